"""FedEx notification code translation to adapter error codes.

Maps the Code and Message of a FedEx reply's Notifications node to the
E-XXXX registry, so failed results carry actionable remediation steps
alongside the carrier's own wording.
"""

from src.errors.registry import get_error


# Map of FedEx notification codes to adapter error codes
FEDEX_ERROR_MAP: dict[str, str] = {
    "1000": "E-5001",  # Authentication Failed
    "521": "E-2001",  # Destination postal code missing or invalid
    "556": "E-3004",  # There are no valid services available
    "9040": "E-3007",  # No information for the following shipments has been received
}

# Notification messages that require pattern matching
FEDEX_MESSAGE_PATTERNS: dict[str, str] = {
    "authentication failed": "E-5001",
    "postal code": "E-2001",
    "weight": "E-2004",
    "dimension": "E-2004",
    "no valid services": "E-3004",
    "service is not allowed": "E-3004",
    "service unavailable": "E-3001",
    "no information for the following shipments": "E-3007",
}


def translate_fedex_error(
    fedex_code: str | None,
    fedex_message: str | None,
) -> tuple[str, str, str]:
    """Translate a FedEx notification to an adapter error.

    Args:
        fedex_code: Notifications/Code from the reply (e.g., "556").
        fedex_message: Notifications/Message from the reply.

    Returns:
        Tuple of (error_code, formatted_message, remediation).
    """
    carrier_message = fedex_message or (f"Code: {fedex_code}" if fedex_code else "Unknown error")

    sa_code = FEDEX_ERROR_MAP.get(fedex_code or "")
    if sa_code is None and fedex_message:
        message_lower = fedex_message.lower()
        for pattern, code in FEDEX_MESSAGE_PATTERNS.items():
            if pattern in message_lower:
                sa_code = code
                break

    error = get_error(sa_code or "E-3005")
    if error is None:
        return (
            "E-3005",
            f"FedEx error: {carrier_message}",
            "Inspect the raw reply XML on the response for details.",
        )

    return (
        error.code,
        _format_message(error.message_template, carrier_message=carrier_message),
        error.remediation,
    )


def _format_message(template: str, **kwargs: object) -> str:
    """Format a message template with context, ignoring missing keys.

    Args:
        template: Message template with {placeholder} syntax.
        **kwargs: Values to substitute into the template.

    Returns:
        Formatted message string.
    """
    try:
        return template.format(**kwargs)
    except KeyError:
        return template
