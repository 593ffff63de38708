"""Carrier-agnostic shipping value objects and carrier response models.

Locations, packages and contacts describe what the caller wants shipped;
RateEstimate, ShipmentEvent and the *Response classes describe what the
carrier said back. Every response keeps the raw reply XML and the raw
request text so any result can be audited against the wire payload.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Protocol

from src.services.fedex_constants import CM_PER_INCH, KGS_PER_LB, UnitSystem
from src.utils.xml_nodes import as_list

_AXES = ("length", "width", "height")


@dataclass(frozen=True)
class Location:
    """A postal location. Street lines are only needed for shipment creation."""

    country_code: str
    postal_code: str = ""
    city: str = ""
    state: str = ""
    address1: str = ""
    address2: str = ""
    address_type: str | None = None
    """'commercial', 'residential', or None when unknown."""

    @property
    def commercial(self) -> bool:
        return self.address_type == "commercial"

    @property
    def residential(self) -> bool:
        return self.address_type == "residential"


@dataclass(frozen=True)
class Package:
    """A parcel's weight and dimensions, readable in either unit system.

    Values are stored in the unit system they were created in and
    converted on access, so a metric package read back in metric is
    returned exactly as given.

    Example:
        >>> pkg = Package(weight=2, dimensions=(10, 10, 10))
        >>> pkg.kgs, pkg.cm("length")
        (2.0, 10.0)
    """

    weight: float
    dimensions: tuple[float, ...] = (0.0, 0.0, 0.0)
    units: UnitSystem = UnitSystem.METRIC

    def __post_init__(self) -> None:
        dims = tuple(float(d) for d in self.dimensions)
        if len(dims) > len(_AXES):
            raise ValueError(f"Package takes at most 3 dimensions, got {len(dims)}")
        dims = dims + (0.0,) * (len(_AXES) - len(dims))
        object.__setattr__(self, "weight", float(self.weight))
        object.__setattr__(self, "dimensions", dims)
        object.__setattr__(self, "units", UnitSystem(self.units))

    @property
    def kgs(self) -> float:
        if self.units is UnitSystem.METRIC:
            return self.weight
        return self.weight * KGS_PER_LB

    @property
    def lbs(self) -> float:
        if self.units is UnitSystem.IMPERIAL:
            return self.weight
        return self.weight / KGS_PER_LB

    def cm(self, axis: str) -> float:
        value = self._dimension(axis)
        if self.units is UnitSystem.METRIC:
            return value
        return value * CM_PER_INCH

    def inches(self, axis: str) -> float:
        value = self._dimension(axis)
        if self.units is UnitSystem.IMPERIAL:
            return value
        return value / CM_PER_INCH

    def weight_in(self, system: UnitSystem) -> float:
        """Weight in pounds for imperial, kilograms for metric."""
        return self.lbs if system is UnitSystem.IMPERIAL else self.kgs

    def dimension_in(self, axis: str, system: UnitSystem) -> float:
        """Dimension in inches for imperial, centimetres for metric."""
        return self.inches(axis) if system is UnitSystem.IMPERIAL else self.cm(axis)

    def _dimension(self, axis: str) -> float:
        try:
            return self.dimensions[_AXES.index(axis)]
        except ValueError:
            raise ValueError(f"Unknown package axis '{axis}', expected one of {_AXES}") from None


# ---------------------------------------------------------------------------
# Contacts
# ---------------------------------------------------------------------------


class ContactSource(Protocol):
    """Anything that can supply the three contact fields."""

    @property
    def person_name(self) -> str | None: ...

    @property
    def phone_number(self) -> str | None: ...

    @property
    def company_name(self) -> str | None: ...


class _MappingContactSource:
    """Reads contact fields from a mapping's keys."""

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data = data

    @property
    def person_name(self) -> str | None:
        return self._data.get("person_name")

    @property
    def phone_number(self) -> str | None:
        return self._data.get("phone_number")

    @property
    def company_name(self) -> str | None:
        return self._data.get("company_name")


class _AttributeContactSource:
    """Reads contact fields from an object's attributes; missing ones are None."""

    def __init__(self, obj: Any) -> None:
        self._obj = obj

    @property
    def person_name(self) -> str | None:
        return getattr(self._obj, "person_name", None)

    @property
    def phone_number(self) -> str | None:
        return getattr(self._obj, "phone_number", None)

    @property
    def company_name(self) -> str | None:
        return getattr(self._obj, "company_name", None)


@dataclass(frozen=True)
class Contact:
    """Person-level identity printed on a shipping label."""

    person_name: str | None = None
    phone_number: str | None = None
    company_name: str | None = None

    @classmethod
    def from_object(cls, obj: Any, **overrides: str | None) -> Contact:
        """Build a Contact from a Contact, a mapping, or an attribute-bearing object.

        Args:
            obj: Source of person_name / phone_number / company_name.
            **overrides: Field values that win over whatever obj supplies.

        Returns:
            A new Contact (or obj itself when it is already a Contact and
            no overrides are given).
        """
        if isinstance(obj, Contact) and not overrides:
            return obj

        source: ContactSource
        if isinstance(obj, Mapping):
            source = _MappingContactSource(obj)
        else:
            source = _AttributeContactSource(obj)

        values = {
            "person_name": source.person_name,
            "phone_number": source.phone_number,
            "company_name": source.company_name,
        }
        values.update({k: v for k, v in overrides.items() if k in values})
        return cls(**values)

    def __str__(self) -> str:
        return " ".join(p for p in (self.person_name, self.phone_number, self.company_name) if p)


@dataclass(frozen=True)
class ShipParty:
    """Shipper or recipient for shipment creation: who plus where."""

    contact: Contact
    location: Location


# ---------------------------------------------------------------------------
# Carrier results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RateEstimate:
    """One quoted service for a shipment."""

    origin: Location
    destination: Location
    carrier: str
    service_name: str
    service_code: str
    total_price: Decimal
    currency: str
    packages: tuple[Package, ...] = ()
    delivery_range: tuple[datetime | None, datetime | None] = (None, None)


@dataclass(frozen=True)
class ShipmentEvent:
    """A single scan in a package's tracking history."""

    description: str
    time: datetime
    location: Location


@dataclass(frozen=True)
class CarrierResponse:
    """Fields shared by every carrier reply.

    Attributes:
        success: Whether the reply is usable.
        message: "{Severity} - {Code}: {Message}" from the reply status.
        params: Parsed reply document with namespace prefixes removed.
        xml: Raw reply text.
        request: Raw request text that produced this reply.
        error_code: E-XXXX code for carrier-reported failures.
        remediation: Suggested fix for carrier-reported failures.
    """

    success: bool
    message: str
    params: dict[str, Any] = field(default_factory=dict)
    xml: str = ""
    request: str = ""
    error_code: str | None = None
    remediation: str = ""


@dataclass(frozen=True)
class RateResponse(CarrierResponse):
    rates: tuple[RateEstimate, ...] = ()


@dataclass(frozen=True)
class TrackingResponse(CarrierResponse):
    tracking_number: str | None = None
    destination: Location | None = None
    shipment_events: tuple[ShipmentEvent, ...] = ()


@dataclass(frozen=True)
class ShipResponse(CarrierResponse):
    """Result of shipment creation.

    ``label`` holds the decoded label image. ``params`` still contains the
    base64 label text exactly as received; use storable_params() for
    anything that is persisted or logged.
    """

    tracking_number: str | None = None
    carrier_code: str | None = None
    currency: str | None = None
    total_price: Decimal | None = None
    binary_barcode: bytes | None = None
    string_barcode: str | None = None
    label: bytes | None = None
    shipper: ShipParty | None = None
    recipient: ShipParty | None = None

    def storable_params(self) -> dict[str, Any]:
        """Return a copy of params with every label image nulled out.

        Tolerates any reply shape: nodes that are missing or not where a
        ProcessShipmentReply would put them are left alone.
        """
        params = copy.deepcopy(self.params)
        for root in params.values():
            if not isinstance(root, dict):
                continue
            for detail in as_list(root.get("CompletedShipmentDetail")):
                for package in as_list(detail.get("CompletedPackageDetails")):
                    label = package.get("Label")
                    if not isinstance(label, dict):
                        continue
                    for part in as_list(label.get("Parts")):
                        if "Image" in part:
                            part["Image"] = None
        return params

