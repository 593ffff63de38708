"""Tests for the FedEx service error type."""

from src.services.errors import FedExServiceError


def test_str_includes_code():
    error = FedExServiceError(code="E-3006", message="FedEx returned an empty reply")
    assert str(error) == "[E-3006] FedEx returned an empty reply"


def test_defaults():
    error = FedExServiceError(code="E-3006", message="x")
    assert error.remediation == ""
    assert error.details is None
