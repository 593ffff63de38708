"""Secret redaction utility for safe logging.

FedEx requests carry the developer key, password, account number and
meter number in plain XML elements. Anything that logs request text or
loaded configuration goes through here first.
"""

import re

# Substring patterns matched case-insensitively against dict keys
_DEFAULT_SENSITIVE_PATTERNS = frozenset({
    "key", "password", "secret", "token", "account", "login", "meter",
})

_REDACTED = "***REDACTED***"

# XML elements whose text is a credential
_SENSITIVE_ELEMENTS = ("Key", "Password", "AccountNumber", "MeterNumber")

_SENSITIVE_ELEMENT_PATTERN = re.compile(
    r"<(?P<tag>(?:[\w.-]+:)?(?:" + "|".join(_SENSITIVE_ELEMENTS) + r"))(?P<attrs>\s[^>]*)?>"
    r"[^<]*"
    r"</(?P=tag)>"
)


def _is_sensitive_key(key: str, sensitive_patterns: frozenset[str]) -> bool:
    """Check if a key matches any sensitive pattern (case-insensitive substring).

    Args:
        key: Dict key to check.
        sensitive_patterns: Patterns to match against.

    Returns:
        True if the key matches any sensitive pattern.
    """
    key_lower = key.lower()
    return any(pattern in key_lower for pattern in sensitive_patterns)


def redact_for_logging(
    obj: dict,
    sensitive_patterns: frozenset[str] = _DEFAULT_SENSITIVE_PATTERNS,
) -> dict:
    """Redact sensitive values from a dict for safe logging.

    Args:
        obj: Dict to redact. It is not mutated; a copy is returned.
        sensitive_patterns: Substring patterns whose matching keys' values
            should be replaced. Matching is case-insensitive.

    Returns:
        New dict with sensitive values replaced by '***REDACTED***'.
        Handles nested dicts and lists of dicts recursively.
    """
    result = {}
    for key, value in obj.items():
        if _is_sensitive_key(str(key), sensitive_patterns):
            result[key] = _REDACTED
        elif isinstance(value, dict):
            result[key] = redact_for_logging(value, sensitive_patterns)
        elif isinstance(value, list):
            result[key] = [
                redact_for_logging(item, sensitive_patterns) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value
    return result


def redact_xml(xml_text: str | None) -> str | None:
    """Replace the text of credential elements in an XML document.

    Prefixed tags (``<v6:Key>``) are handled too. Element structure is
    kept so the redacted text stays readable.

    Args:
        xml_text: Request or reply XML (None passes through).

    Returns:
        XML text with Key, Password, AccountNumber and MeterNumber values
        replaced by '***REDACTED***'.
    """
    if xml_text is None:
        return None
    return _SENSITIVE_ELEMENT_PATTERN.sub(
        lambda m: f"<{m.group('tag')}{m.group('attrs') or ''}>{_REDACTED}</{m.group('tag')}>",
        xml_text,
    )
