"""Root-level pytest fixtures for all tests.

Provides shared fixtures for FedEx adapter tests:
- Credentials
- Locations, packages and ship parties
Reply XML builders live in tests.helpers.fedex_replies.
"""

import pytest

from src.services.fedex_options import FedExCredentials
from src.services.shipping_models import Contact, Location, Package, ShipParty


# ============================================================================
# Pytest Markers
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests requiring external services"
    )


# ============================================================================
# Domain fixtures
# ============================================================================


@pytest.fixture
def credentials():
    """FedEx sandbox-style credentials."""
    return FedExCredentials(
        key="devkey123",
        password="devpass456",
        account="510087020",
        login="118546765",
    )


@pytest.fixture
def ottawa():
    return Location(country_code="CA", postal_code="K1A0B1", city="Ottawa", state="ON")


@pytest.fixture
def toronto():
    return Location(country_code="CA", postal_code="M5V2T6", city="Toronto", state="ON")


@pytest.fixture
def metric_package():
    """2 kg, 10x10x10 cm."""
    return Package(weight=2, dimensions=(10, 10, 10))


@pytest.fixture
def ship_parties():
    """Shipper (US, commercial) and recipient (US, residential)."""
    shipper = ShipParty(
        contact=Contact(person_name="Ada Lovelace", phone_number="5555550100", company_name="Engines Ltd"),
        location=Location(
            country_code="US", postal_code="38117", city="Memphis", state="TN",
            address1="3610 Hacks Cross Rd", address2="Suite 200", address_type="commercial",
        ),
    )
    recipient = ShipParty(
        contact=Contact(person_name="Grace Hopper", phone_number="5555550199"),
        location=Location(
            country_code="US", postal_code="90210", city="Beverly Hills", state="CA",
            address1="1 Main St", address_type="residential",
        ),
    )
    return shipper, recipient
