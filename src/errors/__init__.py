"""Error handling framework for the FedEx adapter.

This package provides:
- Error code registry with E-XXXX format codes
- FedEx notification translation to friendly messages
- Domain exceptions for locally rejected calls

Error categories:
- E-2xxx: Validation errors
- E-3xxx: Carrier API errors
- E-5xxx: Authentication errors
"""

from src.errors.domain import DomainError, ValidationError
from src.errors.fedex_translation import (
    FEDEX_ERROR_MAP,
    translate_fedex_error,
)
from src.errors.registry import (
    ERROR_REGISTRY,
    ErrorCategory,
    ErrorCode,
    get_error,
    get_errors_by_category,
)

__all__ = [
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    "get_errors_by_category",
    # FedEx translation
    "translate_fedex_error",
    "FEDEX_ERROR_MAP",
    # Domain
    "DomainError",
    "ValidationError",
]
