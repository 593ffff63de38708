"""Service layer for the FedEx XML adapter.

Provides rate quoting, tracking and shipment creation against the FedEx
XML gateway, plus the value objects those operations take and return.
"""

from src.services.errors import FedExServiceError
from src.services.fedex_options import FedExCredentials, ShipmentOptions
from src.services.fedex_service import FedExService
from src.services.fedex_transport import FedExTransport
from src.services.shipping_models import (
    Contact,
    Location,
    Package,
    RateEstimate,
    RateResponse,
    ShipmentEvent,
    ShipParty,
    ShipResponse,
    TrackingResponse,
)

__all__ = [
    "FedExService",
    "FedExTransport",
    "FedExCredentials",
    "ShipmentOptions",
    "FedExServiceError",
    "Contact",
    "Location",
    "Package",
    "ShipParty",
    "RateEstimate",
    "ShipmentEvent",
    "RateResponse",
    "TrackingResponse",
    "ShipResponse",
]
