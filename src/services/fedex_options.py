"""Credentials and per-call shipment options for FedEx requests.

ShipmentOptions is the one place option keys and their defaults are
declared. Unknown keys are dropped at validation time, and friendly
aliases (``"dropbox"``, ``"third_party"``) are normalized to FedEx wire
codes once, here, so request builders never see raw caller input.

Example:
    opts = ShipmentOptions.model_validate({"payment_type": "third_party", "foo": 1})
    opts.payment_type   # "THIRD_PARTY"
"""

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

from src.services.fedex_constants import (
    DEFAULT_DROPOFF_TYPE,
    DEFAULT_IMAGE_TYPE,
    DEFAULT_LABEL_STOCK_TYPE,
    DEFAULT_PACKAGE_IDENTIFIER_TYPE,
    DEFAULT_PACKAGING_TYPE,
    DEFAULT_PAYMENT_TYPE,
    DROPOFF_TYPES,
    PACKAGE_TYPES,
    PAYMENT_TYPES,
)
from src.services.fedex_service_codes import ServiceType
from src.services.shipping_models import Location

PackageIdentifierType = Literal[
    "tracking_number",
    "door_tag",
    "rma",
    "ground_shipment_id",
    "ground_invoice_number",
    "ground_customer_reference",
    "ground_po",
    "express_reference",
    "express_mps_master",
]


def _resolve_code(value: Any, aliases: dict[str, str], default: str) -> str:
    """Map an alias (any case) to its wire code; pass anything else through upper-cased."""
    if value is None or not str(value).strip():
        return default
    stripped = str(value).strip()
    return aliases.get(stripped.lower(), stripped.upper())


class FedExCredentials(BaseModel):
    """The four values FedEx requires on every request."""

    model_config = ConfigDict(frozen=True)

    key: str
    """Developer key."""
    password: str
    account: str
    """Account number."""
    login: str
    """Meter number."""

    @field_validator("account", "login", mode="before")
    @classmethod
    def _stringify_numbers(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    def __repr__(self) -> str:
        return f"FedExCredentials(account={self.account!r}, login={self.login!r})"


class ShipmentOptions(BaseModel):
    """Recognized FedEx request options and their defaults."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    dropoff_type: str = DEFAULT_DROPOFF_TYPE
    packaging_type: str = DEFAULT_PACKAGING_TYPE
    service_type: str = ServiceType.GROUND_HOME_DELIVERY.value
    payment_type: str = DEFAULT_PAYMENT_TYPE
    payor_account_number: str | None = None
    saturday_delivery: bool = False
    alcohol: bool = False
    adult_signature: bool = False
    image_type: str = DEFAULT_IMAGE_TYPE
    label_stock_type: str = DEFAULT_LABEL_STOCK_TYPE
    po_number: str | None = None
    invoice_number: str | None = None
    ship_timestamp: datetime | None = None
    shipper_email: str | None = None
    recipient_email: str | None = None
    package_identifier_type: PackageIdentifierType = DEFAULT_PACKAGE_IDENTIFIER_TYPE
    ship_date_range_begin: date | None = None
    ship_date_range_end: date | None = None
    shipper: Location | None = None
    """Rate requests only: quote as this shipper when it differs from the origin."""
    test: bool = False
    log_xml: bool = False

    @field_validator("dropoff_type", mode="before")
    @classmethod
    def _dropoff_alias(cls, value: Any) -> str:
        return _resolve_code(value, DROPOFF_TYPES, DEFAULT_DROPOFF_TYPE)

    @field_validator("packaging_type", mode="before")
    @classmethod
    def _packaging_alias(cls, value: Any) -> str:
        return _resolve_code(value, PACKAGE_TYPES, DEFAULT_PACKAGING_TYPE)

    @field_validator("payment_type", mode="before")
    @classmethod
    def _payment_alias(cls, value: Any) -> str:
        return _resolve_code(value, PAYMENT_TYPES, DEFAULT_PAYMENT_TYPE)

    @field_validator("service_type", mode="before")
    @classmethod
    def _service_upper(cls, value: Any) -> str:
        return _resolve_code(value, {}, ServiceType.GROUND_HOME_DELIVERY.value)

    @field_validator("po_number", "invoice_number", "payor_account_number", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str | None:
        # Account and reference numbers often arrive as ints from YAML
        if value is None:
            return None
        return str(value)

    def merged(self, overrides: dict[str, Any] | None) -> "ShipmentOptions":
        """Return a new options record with overrides applied on top of this one.

        Only fields explicitly set on this record are carried over, so
        defaults keep flowing through validation with the overrides.
        """
        if not overrides:
            return self
        data = self.model_dump(exclude_unset=True)
        data.update(overrides)
        return ShipmentOptions.model_validate(data)
