"""Canonical FedEx XML API constants.

Single source of truth for endpoints, schema versions, option code
tables and wire defaults. All request-building and parsing modules
import from here instead of using inline magic strings.

Follows the same pattern as fedex_service_codes.py (Enum + parallel
lookups + frozenset).
"""

from enum import Enum


# ---------------------------------------------------------------------------
# Carrier identity
# ---------------------------------------------------------------------------

FEDEX_CARRIER_NAME = "FedEx"

# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

FEDEX_TEST_URL = "https://gatewaybeta.fedex.com:443/xml"
FEDEX_LIVE_URL = "https://gateway.fedex.com:443/xml"


# ---------------------------------------------------------------------------
# Wire schema versions
# ---------------------------------------------------------------------------


class Operation(str, Enum):
    """The three FedEx XML operations this adapter speaks."""

    RATE = "rate"
    TRACK = "track"
    SHIP = "ship"


# operation → (request root, namespace, service id, (major, intermediate, minor))
SCHEMA_VERSIONS: dict[Operation, tuple[str, str, str, tuple[int, int, int]]] = {
    Operation.RATE: ("RateRequest", "http://fedex.com/ws/rate/v6", "crs", (6, 0, 0)),
    Operation.TRACK: ("TrackRequest", "http://fedex.com/ws/track/v3", "trck", (3, 0, 0)),
    Operation.SHIP: ("ProcessShipmentRequest", "http://fedex.com/ws/ship/v10", "ship", (10, 0, 0)),
}

REPLY_ROOTS: dict[Operation, str] = {
    Operation.RATE: "RateReply",
    Operation.TRACK: "TrackReply",
    Operation.SHIP: "ProcessShipmentReply",
}


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------


class UnitSystem(str, Enum):
    """Measurement system used for weights and dimensions on the wire."""

    IMPERIAL = "imperial"
    METRIC = "metric"


# Countries FedEx bills in pounds and inches
IMPERIAL_COUNTRIES: frozenset[str] = frozenset({"US", "LR", "MM"})

WEIGHT_UNITS: dict[UnitSystem, str] = {
    UnitSystem.IMPERIAL: "LB",
    UnitSystem.METRIC: "KG",
}

DIMENSION_UNITS: dict[UnitSystem, str] = {
    UnitSystem.IMPERIAL: "IN",
    UnitSystem.METRIC: "CM",
}

KGS_PER_LB = 0.45359237
CM_PER_INCH = 2.54

MIN_BILLABLE_WEIGHT = 0.1


# ---------------------------------------------------------------------------
# Option code tables (caller alias → wire code)
# ---------------------------------------------------------------------------

PACKAGE_TYPES: dict[str, str] = {
    "fedex_envelope": "FEDEX_ENVELOPE",
    "fedex_pak": "FEDEX_PAK",
    "fedex_box": "FEDEX_BOX",
    "fedex_tube": "FEDEX_TUBE",
    "fedex_10_kg_box": "FEDEX_10KG_BOX",
    "fedex_25_kg_box": "FEDEX_25KG_BOX",
    "your_packaging": "YOUR_PACKAGING",
}

DROPOFF_TYPES: dict[str, str] = {
    "regular_pickup": "REGULAR_PICKUP",
    "request_courier": "REQUEST_COURIER",
    "dropbox": "DROP_BOX",
    "business_service_center": "BUSINESS_SERVICE_CENTER",
    "station": "STATION",
}

PAYMENT_TYPES: dict[str, str] = {
    "sender": "SENDER",
    "recipient": "RECIPIENT",
    "third_party": "THIRD_PARTY",
    "collect": "COLLECT",
}

PACKAGE_IDENTIFIER_TYPES: dict[str, str] = {
    "tracking_number": "TRACKING_NUMBER_OR_DOORTAG",
    "door_tag": "TRACKING_NUMBER_OR_DOORTAG",
    "rma": "RMA",
    "ground_shipment_id": "GROUND_SHIPMENT_ID",
    "ground_invoice_number": "GROUND_INVOICE_NUMBER",
    "ground_customer_reference": "GROUND_CUSTOMER_REFERENCE",
    "ground_po": "GROUND_PO",
    "express_reference": "EXPRESS_REFERENCE",
    "express_mps_master": "EXPRESS_MPS_MASTER",
}


# ---------------------------------------------------------------------------
# Request defaults
# ---------------------------------------------------------------------------

DEFAULT_DROPOFF_TYPE = "REGULAR_PICKUP"
DEFAULT_PACKAGING_TYPE = "YOUR_PACKAGING"
DEFAULT_PAYMENT_TYPE = "SENDER"
DEFAULT_PACKAGE_IDENTIFIER_TYPE = "tracking_number"
RATE_REQUEST_TYPE = "ACCOUNT"


# ---------------------------------------------------------------------------
# Special services
# ---------------------------------------------------------------------------

SATURDAY_DELIVERY = "SATURDAY_DELIVERY"
EMAIL_NOTIFICATION = "EMAIL_NOTIFICATION"
SIGNATURE_OPTION = "SIGNATURE_OPTION"
ADULT_SIGNATURE = "ADULT"
ALCOHOL = "ALCOHOL"

NOTIFICATION_RECIPIENT_TYPE = "RECIPIENT"
NOTIFICATION_EVENT = "ON_SHIPMENT"
NOTIFICATION_FORMAT = "HTML"
NOTIFICATION_LANGUAGE = "EN"


# ---------------------------------------------------------------------------
# Label specification
# ---------------------------------------------------------------------------

LABEL_FORMAT_TYPE = "COMMON2D"
DEFAULT_IMAGE_TYPE = "PDF"
DEFAULT_LABEL_STOCK_TYPE = "PAPER_8.5X11_TOP_HALF_LABEL"
THERMAL_DOC_TAB_STOCK_TYPE = "STOCK_4X6.75_LEADING_DOC_TAB"
THERMAL_PRINTING_ORIENTATION = "TOP_EDGE_OF_TEXT_FIRST"


# ---------------------------------------------------------------------------
# Customer references
# ---------------------------------------------------------------------------

PO_NUMBER_REFERENCE = "P_O_NUMBER"
INVOICE_NUMBER_REFERENCE = "INVOICE_NUMBER"


# ---------------------------------------------------------------------------
# Reply interpretation
# ---------------------------------------------------------------------------

# Severities that still count as a usable reply
SUCCESS_SEVERITIES: frozenset[str] = frozenset({"SUCCESS", "WARNING", "NOTE"})

# FedEx reports pounds sterling as UKL
FEDEX_POUND_CODE = "UKL"
ISO_POUND_CODE = "GBP"

NO_RATES_MESSAGE = "No shipping rates could be found for the destination address"
