"""Canonical FedEx service type definitions.

Single source of truth for FedEx service type display names and the
fallback used for service types FedEx adds after this table was written.
"""

from enum import Enum

from src.services.fedex_constants import FEDEX_CARRIER_NAME, SATURDAY_DELIVERY


class ServiceType(str, Enum):
    """FedEx service types as they appear in RateReplyDetails/ServiceType."""

    PRIORITY_OVERNIGHT = "PRIORITY_OVERNIGHT"
    FEDEX_2_DAY = "FEDEX_2_DAY"
    STANDARD_OVERNIGHT = "STANDARD_OVERNIGHT"
    FIRST_OVERNIGHT = "FIRST_OVERNIGHT"
    FEDEX_EXPRESS_SAVER = "FEDEX_EXPRESS_SAVER"
    FEDEX_1_DAY_FREIGHT = "FEDEX_1_DAY_FREIGHT"
    FEDEX_2_DAY_FREIGHT = "FEDEX_2_DAY_FREIGHT"
    FEDEX_3_DAY_FREIGHT = "FEDEX_3_DAY_FREIGHT"
    INTERNATIONAL_PRIORITY = "INTERNATIONAL_PRIORITY"
    INTERNATIONAL_ECONOMY = "INTERNATIONAL_ECONOMY"
    INTERNATIONAL_FIRST = "INTERNATIONAL_FIRST"
    INTERNATIONAL_PRIORITY_FREIGHT = "INTERNATIONAL_PRIORITY_FREIGHT"
    INTERNATIONAL_ECONOMY_FREIGHT = "INTERNATIONAL_ECONOMY_FREIGHT"
    GROUND_HOME_DELIVERY = "GROUND_HOME_DELIVERY"
    FEDEX_GROUND = "FEDEX_GROUND"
    INTERNATIONAL_GROUND = "INTERNATIONAL_GROUND"


# Display names: service type (optionally with Saturday suffix) → human-readable name
SERVICE_TYPE_NAMES: dict[str, str] = {
    "PRIORITY_OVERNIGHT": "FedEx Priority Overnight",
    "PRIORITY_OVERNIGHT_SATURDAY_DELIVERY": "FedEx Priority Overnight Saturday Delivery",
    "FEDEX_2_DAY": "FedEx 2 Day",
    "FEDEX_2_DAY_SATURDAY_DELIVERY": "FedEx 2 Day Saturday Delivery",
    "STANDARD_OVERNIGHT": "FedEx Standard Overnight",
    "FIRST_OVERNIGHT": "FedEx First Overnight",
    "FIRST_OVERNIGHT_SATURDAY_DELIVERY": "FedEx First Overnight Saturday Delivery",
    "FEDEX_EXPRESS_SAVER": "FedEx Express Saver",
    "FEDEX_1_DAY_FREIGHT": "FedEx 1 Day Freight",
    "FEDEX_1_DAY_FREIGHT_SATURDAY_DELIVERY": "FedEx 1 Day Freight Saturday Delivery",
    "FEDEX_2_DAY_FREIGHT": "FedEx 2 Day Freight",
    "FEDEX_2_DAY_FREIGHT_SATURDAY_DELIVERY": "FedEx 2 Day Freight Saturday Delivery",
    "FEDEX_3_DAY_FREIGHT": "FedEx 3 Day Freight",
    "FEDEX_3_DAY_FREIGHT_SATURDAY_DELIVERY": "FedEx 3 Day Freight Saturday Delivery",
    "INTERNATIONAL_PRIORITY": "FedEx International Priority",
    "INTERNATIONAL_PRIORITY_SATURDAY_DELIVERY": "FedEx International Priority Saturday Delivery",
    "INTERNATIONAL_ECONOMY": "FedEx International Economy",
    "INTERNATIONAL_FIRST": "FedEx International First",
    "INTERNATIONAL_PRIORITY_FREIGHT": "FedEx International Priority Freight",
    "INTERNATIONAL_ECONOMY_FREIGHT": "FedEx International Economy Freight",
    "GROUND_HOME_DELIVERY": "FedEx Ground Home Delivery",
    "FEDEX_GROUND": "FedEx Ground",
    "INTERNATIONAL_GROUND": "FedEx International Ground",
}


def saturday_service_type(service_type: str) -> str:
    """Return the composite service type for a Saturday-delivery rate line.

    Args:
        service_type: Base FedEx service type (e.g., "FEDEX_2_DAY").

    Returns:
        Service type with the Saturday-delivery suffix appended.
    """
    return f"{service_type}_{SATURDAY_DELIVERY}"


def service_name_for_code(service_code: str) -> str:
    """Resolve a FedEx service type to a human-readable name.

    Known types come from SERVICE_TYPE_NAMES. Unknown types are title-cased
    word by word and given a single "FedEx " prefix, so "FEDEX_NEW_THING"
    becomes "FedEx New Thing" rather than "FedEx Fedex New Thing".

    Args:
        service_code: FedEx service type, possibly with a Saturday suffix.

    Returns:
        Display name for the service.
    """
    known = SERVICE_TYPE_NAMES.get(service_code)
    if known is not None:
        return known

    name = " ".join(word.capitalize() for word in service_code.lower().split("_"))
    name = name.replace("Fedex ", "", 1)
    return f"{FEDEX_CARRIER_NAME} {name}"
