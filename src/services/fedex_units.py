"""Unit-system selection and FedEx billing rounding rules.

FedEx bills weight and dimensions differently: weight is rounded to
three decimals with a 0.1 floor, while each dimension is rounded to
three decimals and then taken up to the next whole unit.

Example:
    >>> round_weight(0.0421), round_weight(2.3456)
    (0.1, 2.346)
    >>> round_dimension(5.001), round_dimension(5.0)
    (6, 5)
"""

import math
from decimal import ROUND_HALF_UP, Decimal

from src.services.fedex_constants import IMPERIAL_COUNTRIES, MIN_BILLABLE_WEIGHT, UnitSystem

_THREE_PLACES = Decimal("0.001")


def resolve_unit_system(country_code: str | None) -> UnitSystem:
    """Pick the unit system FedEx expects for a shipment's origin country.

    Args:
        country_code: ISO alpha-2 origin country code.

    Returns:
        UnitSystem.IMPERIAL for US, LR and MM; UnitSystem.METRIC otherwise.
    """
    if country_code and country_code.strip().upper() in IMPERIAL_COUNTRIES:
        return UnitSystem.IMPERIAL
    return UnitSystem.METRIC


def _round_three(value: float) -> Decimal:
    # str() first so 2.3456 rounds as written rather than as its binary expansion
    return Decimal(str(value)).quantize(_THREE_PLACES, rounding=ROUND_HALF_UP)


def round_weight(value: float) -> float:
    """Round a weight half-up to 3 decimals, with a floor of 0.1."""
    return max(float(_round_three(value)), MIN_BILLABLE_WEIGHT)


def round_dimension(value: float) -> int:
    """Round a dimension half-up to 3 decimals, then up to the next whole unit."""
    return math.ceil(_round_three(value))
