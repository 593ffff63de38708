"""YAML configuration loader with env var resolution and Pydantic validation.

Loads config from (priority order):
1. An explicit path passed to load_config()
2. ./fedex.yaml or ./fedex.yml (working directory)
3. ~/.fedex/config.yaml (user home)

Environment variables override YAML: FEDEX_<FIELD> (e.g. FEDEX_PASSWORD,
FEDEX_TEST). ${VAR} references in YAML values resolve from environment
at load time.

Example fedex.yaml:
    key: ${FEDEX_DEVELOPER_KEY}
    password: ${FEDEX_DEVELOPER_PASSWORD}
    account: "510087020"
    login: "118546765"
    test: true
    options:
      dropoff_type: dropbox
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, field_validator

from src.utils.redaction import redact_for_logging

logger = logging.getLogger(__name__)

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")
_ENV_PREFIX = "FEDEX_"


def resolve_env_vars(value: str) -> str:
    """Resolve ${VAR} references in a string from environment variables.

    Args:
        value: String potentially containing ${VAR} references.

    Returns:
        String with all ${VAR} references replaced by their env values.
        Missing env vars resolve to empty string.
    """
    def _replace(match: re.Match) -> str:
        return os.environ.get(match.group(1), "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    """Recursively resolve ${VAR} references in a nested data structure."""
    if isinstance(data, str):
        return resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    return data


class FedExConfig(BaseModel):
    """FedEx credentials, environment and default request options."""

    key: str = ""
    password: str = ""
    account: str = ""
    login: str = ""
    test: bool = False
    log_xml: bool = False
    options: dict[str, Any] = {}

    @field_validator("account", "login", mode="before")
    @classmethod
    def _stringify_numbers(cls, value: Any) -> Any:
        # Unquoted account and meter numbers load from YAML as ints
        return str(value) if isinstance(value, int) else value


def _find_config_file() -> Path | None:
    """Search for config file in standard locations.

    Returns:
        Path to config file if found, None otherwise.
    """
    candidates = [
        Path.cwd() / "fedex.yaml",
        Path.cwd() / "fedex.yml",
        Path.home() / ".fedex" / "config.yaml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply FEDEX_<FIELD> env var overrides to top-level config fields.

    Only scalar fields are overridable; ``options`` is YAML-only. Values
    "true"/"false" (any case) become booleans, everything else stays a
    string so account numbers keep leading zeros.

    Args:
        data: Parsed YAML config dict.

    Returns:
        Config dict with env var overrides applied.
    """
    overridable = [name for name in FedExConfig.model_fields if name != "options"]
    for name in overridable:
        value = os.environ.get(_ENV_PREFIX + name.upper())
        if value is None:
            continue
        if value.lower() in ("true", "false"):
            data[name] = value.lower() == "true"
        else:
            data[name] = value
    return data


def load_config(config_path: str | None = None) -> FedExConfig | None:
    """Load FedEx configuration from YAML file with env var resolution.

    Args:
        config_path: Explicit path to config file. If None, searches
            standard locations (cwd, then ~/.fedex/).

    Returns:
        Parsed and validated FedExConfig, or None if no config found.

    Raises:
        FileNotFoundError: If config_path is given but does not exist.
    """
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = _find_config_file()
        if path is None:
            return None

    logger.info("Loading config from %s", path)

    with open(path) as f:
        raw_data = yaml.safe_load(f) or {}

    data = _resolve_env_vars_recursive(raw_data)
    data = _apply_env_overrides(data)
    logger.debug("Resolved FedEx config: %s", redact_for_logging(data))

    return FedExConfig(**data)
