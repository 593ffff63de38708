"""Error code registry with E-XXXX format codes.

Organizes the adapter's errors into categories:
- E-2xxx: Validation errors (bad shipment data as judged by FedEx)
- E-3xxx: Carrier API errors
- E-5xxx: Authentication errors

Each error includes a code, title, message template, and remediation steps.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error codes."""

    VALIDATION = "validation"  # E-2xxx: Validation errors
    CARRIER_API = "carrier_api"  # E-3xxx: Carrier API errors
    AUTH = "auth"  # E-5xxx: Authentication errors


@dataclass
class ErrorCode:
    """Definition of an error code with metadata.

    Attributes:
        code: Error code in E-XXXX format.
        category: Error category for grouping.
        title: Short title for display.
        message_template: Message with {placeholders} for context.
        remediation: Action user should take to resolve.
        is_retryable: Whether the operation can be retried without user action.
    """

    code: str
    category: ErrorCategory
    title: str
    message_template: str
    remediation: str
    is_retryable: bool = False


ERROR_REGISTRY: dict[str, ErrorCode] = {
    # Validation errors (E-2xxx)
    "E-2001": ErrorCode(
        code="E-2001",
        category=ErrorCategory.VALIDATION,
        title="Invalid Postal Code",
        message_template="FedEx rejected a postal code: {carrier_message}",
        remediation="Check the origin and destination postal codes match their country codes.",
    ),
    "E-2004": ErrorCode(
        code="E-2004",
        category=ErrorCategory.VALIDATION,
        title="Invalid Weight or Dimensions",
        message_template="FedEx rejected the package weight or dimensions: {carrier_message}",
        remediation="Check the package weight and dimensions are positive and within service limits.",
    ),
    # Carrier API errors (E-3xxx)
    "E-3001": ErrorCode(
        code="E-3001",
        category=ErrorCategory.CARRIER_API,
        title="FedEx Service Unavailable",
        message_template="FedEx is not responding: {carrier_message}",
        remediation="Wait a few minutes and retry.",
        is_retryable=True,
    ),
    "E-3004": ErrorCode(
        code="E-3004",
        category=ErrorCategory.CARRIER_API,
        title="FedEx Service Not Available",
        message_template="No FedEx service is available for this shipment: {carrier_message}",
        remediation="Try a different service type or verify the destination is serviceable.",
    ),
    "E-3005": ErrorCode(
        code="E-3005",
        category=ErrorCategory.CARRIER_API,
        title="FedEx Unknown Error",
        message_template="FedEx returned an unexpected error: {carrier_message}",
        remediation="Inspect the raw reply XML on the response for details.",
    ),
    "E-3006": ErrorCode(
        code="E-3006",
        category=ErrorCategory.CARRIER_API,
        title="Malformed FedEx Reply",
        message_template="FedEx reply could not be interpreted: {details}",
        remediation="Retry the request. If it persists, capture the raw reply and check the endpoint.",
        is_retryable=True,
    ),
    "E-3007": ErrorCode(
        code="E-3007",
        category=ErrorCategory.CARRIER_API,
        title="Tracking Information Not Found",
        message_template="FedEx has no tracking information yet: {carrier_message}",
        remediation="Verify the tracking number and identifier type, or retry later.",
        is_retryable=True,
    ),
    # Auth errors (E-5xxx)
    "E-5001": ErrorCode(
        code="E-5001",
        category=ErrorCategory.AUTH,
        title="FedEx Authentication Failed",
        message_template="Failed to authenticate with FedEx: {carrier_message}",
        remediation="Check the developer key, password, account number and meter number.",
    ),
}


def get_error(code: str) -> ErrorCode | None:
    """Get error definition by code.

    Args:
        code: Error code in E-XXXX format.

    Returns:
        ErrorCode if found, None otherwise.
    """
    return ERROR_REGISTRY.get(code)


def get_errors_by_category(category: ErrorCategory) -> list[ErrorCode]:
    """Get all errors in a category.

    Args:
        category: The error category to filter by.

    Returns:
        List of ErrorCode objects in the specified category.
    """
    return [e for e in ERROR_REGISTRY.values() if e.category == category]
