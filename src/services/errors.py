"""Shared service-layer error types.

Centralised here to avoid circular imports between the parser, mapper
and service modules.
"""

from dataclasses import dataclass


@dataclass
class FedExServiceError(Exception):
    """A FedEx reply that could not be interpreted at all.

    Raised for malformed XML or a reply with no status node. Carrier-reported
    failures are not raised; they come back as responses with success=False.

    Attributes:
        code: Adapter error code (E-XXXX format)
        message: Human-readable error message
        remediation: Suggested fix
        details: Raw error details (e.g., the reply text)
    """

    code: str
    message: str
    remediation: str = ""
    details: dict | None = None

    def __str__(self) -> str:
        """Return formatted error message."""
        return f"[{self.code}] {self.message}"
