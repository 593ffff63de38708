"""Typed domain exceptions for caller programming errors.

These are raised locally, before anything is sent to FedEx, when a call
is shaped wrong. Carrier-side rejections are never raised; they come
back as response objects with ``success=False``.

Usage:
    try:
        service.ship(shipper, recipient, [pkg_a, pkg_b])
    except ValidationError as e:
        log.error("bad ship call: %s", e)
"""


class DomainError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ValidationError(DomainError):
    """A call was made with arguments the adapter cannot send."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
