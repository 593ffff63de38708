"""FedEx XML payload builder for rate, track and ship requests.

Builds each request as an ordered dict in FedEx's element order and
serializes it with xmltodict. Every request starts with the same
authentication header and a Version node whose service id and version
triple must match what the FedEx gateway expects for that operation.

Example:
    from src.services.fedex_payload_builder import build_rate_request

    xml = build_rate_request(
        credentials=creds,
        origin=Location(country_code="CA", postal_code="K1A0B1"),
        destination=Location(country_code="CA", postal_code="M5V2T6"),
        packages=[Package(weight=2, dimensions=(10, 10, 10))],
        options=ShipmentOptions(),
    )
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Any

import xmltodict

from src.services.fedex_constants import (
    ADULT_SIGNATURE,
    ALCOHOL,
    DIMENSION_UNITS,
    EMAIL_NOTIFICATION,
    INVOICE_NUMBER_REFERENCE,
    LABEL_FORMAT_TYPE,
    NOTIFICATION_EVENT,
    NOTIFICATION_FORMAT,
    NOTIFICATION_LANGUAGE,
    NOTIFICATION_RECIPIENT_TYPE,
    PACKAGE_IDENTIFIER_TYPES,
    PO_NUMBER_REFERENCE,
    RATE_REQUEST_TYPE,
    SATURDAY_DELIVERY,
    SCHEMA_VERSIONS,
    SIGNATURE_OPTION,
    THERMAL_DOC_TAB_STOCK_TYPE,
    THERMAL_PRINTING_ORIENTATION,
    WEIGHT_UNITS,
    Operation,
    UnitSystem,
)
from src.services.fedex_options import FedExCredentials, ShipmentOptions
from src.services.fedex_units import resolve_unit_system, round_dimension, round_weight
from src.services.shipping_models import Location, Package, ShipParty

_TRUE = "true"


def build_request_header(
    credentials: FedExCredentials,
    options: ShipmentOptions,
) -> dict[str, Any]:
    """Build the authentication block shared by every request.

    The PO number doubles as the customer transaction id so replies can be
    matched to orders in FedEx's own logs.

    Args:
        credentials: Developer key/password plus account and meter numbers.
        options: Per-call options (only po_number is read).

    Returns:
        Ordered dict of WebAuthenticationDetail, ClientDetail, TransactionDetail.
    """
    return {
        "WebAuthenticationDetail": {
            "UserCredential": {
                "Key": credentials.key,
                "Password": credentials.password,
            },
        },
        "ClientDetail": {
            "AccountNumber": credentials.account,
            "MeterNumber": credentials.login,
        },
        "TransactionDetail": {
            "CustomerTransactionId": options.po_number,
        },
    }


def build_version_node(operation: Operation) -> dict[str, Any]:
    """Build the Version node for an operation."""
    _, _, service_id, (major, intermediate, minor) = SCHEMA_VERSIONS[operation]
    return {
        "ServiceId": service_id,
        "Major": major,
        "Intermediate": intermediate,
        "Minor": minor,
    }


def build_weight_node(package: Package, units: UnitSystem) -> dict[str, Any]:
    """Build a Weight node, rounded per FedEx billing rules."""
    return {
        "Units": WEIGHT_UNITS[units],
        "Value": round_weight(package.weight_in(units)),
    }


def build_dimensions_node(package: Package, units: UnitSystem) -> dict[str, Any]:
    """Build a Dimensions node; each axis is rounded up to a whole unit."""
    node: dict[str, Any] = {
        axis.capitalize(): round_dimension(package.dimension_in(axis, units))
        for axis in ("length", "width", "height")
    }
    node["Units"] = DIMENSION_UNITS[units]
    return node


def build_location_node(location: Location) -> dict[str, Any]:
    """Build the minimal address shape used by rate requests."""
    address: dict[str, Any] = {
        "PostalCode": location.postal_code,
        "CountryCode": location.country_code.upper(),
    }
    if location.residential:
        address["Residential"] = _TRUE
    return {"Address": address}


def build_party_node(party: ShipParty) -> dict[str, Any]:
    """Build the full contact + address shape used by ship requests."""
    contact: dict[str, Any] = {"PersonName": party.contact.person_name}
    if party.contact.company_name:
        contact["CompanyName"] = party.contact.company_name
    contact["PhoneNumber"] = party.contact.phone_number

    location = party.location
    street_lines: list[str] = [location.address1]
    if location.address2:
        street_lines.append(location.address2)

    address: dict[str, Any] = {
        "StreetLines": street_lines,
        "City": location.city,
        "StateOrProvinceCode": location.state,
        "PostalCode": location.postal_code,
        "CountryCode": location.country_code.upper(),
    }
    if location.residential:
        address["Residential"] = _TRUE

    return {"Contact": contact, "Address": address}


def build_rate_request(
    credentials: FedExCredentials,
    origin: Location,
    destination: Location,
    packages: Sequence[Package],
    options: ShipmentOptions,
) -> str:
    """Build a RateRequest (v6) quoting every service for the packages.

    Units follow the origin country. When options.shipper names a different
    location than the origin, it is sent as Shipper and the origin is sent
    separately as Origin.

    Args:
        credentials: FedEx credentials.
        origin: Where the packages ship from.
        destination: Where the packages ship to.
        packages: One RequestedPackages entry is emitted per package.
        options: Per-call options.

    Returns:
        Serialized RateRequest XML.
    """
    units = resolve_unit_system(origin.country_code)
    shipper = options.shipper or origin

    requested: dict[str, Any] = {
        "ShipTimestamp": _timestamp(options.ship_timestamp),
        "DropoffType": options.dropoff_type,
        "PackagingType": options.packaging_type,
        "Shipper": build_location_node(shipper),
        "Recipient": build_location_node(destination),
    }
    if options.shipper is not None and options.shipper != origin:
        requested["Origin"] = build_location_node(origin)
    requested["RateRequestTypes"] = RATE_REQUEST_TYPE
    requested["PackageCount"] = len(packages)

    line_items = []
    for package in packages:
        item: dict[str, Any] = {
            "Weight": build_weight_node(package, units),
            "Dimensions": build_dimensions_node(package, units),
        }
        if options.adult_signature:
            item["SpecialServicesRequested"] = {
                "SpecialServiceTypes": SIGNATURE_OPTION,
                "SignatureOptionDetail": {"OptionType": ADULT_SIGNATURE},
            }
        line_items.append(item)
    requested["RequestedPackages"] = line_items

    return _serialize(Operation.RATE, credentials, options, {
        "ReturnTransitAndCommit": _TRUE,
        "VariableOptions": SATURDAY_DELIVERY,
        "RequestedShipment": requested,
    })


def build_tracking_request(
    credentials: FedExCredentials,
    tracking_number: str,
    options: ShipmentOptions,
) -> str:
    """Build a TrackRequest (v3) asking for detailed scan events.

    Args:
        credentials: FedEx credentials.
        tracking_number: Identifier to look up; its kind comes from
            options.package_identifier_type.
        options: Per-call options.

    Returns:
        Serialized TrackRequest XML.
    """
    body: dict[str, Any] = {
        "PackageIdentifier": {
            "Value": tracking_number,
            "Type": PACKAGE_IDENTIFIER_TYPES[options.package_identifier_type],
        },
    }
    if options.ship_date_range_begin is not None:
        body["ShipDateRangeBegin"] = options.ship_date_range_begin.isoformat()
    if options.ship_date_range_end is not None:
        body["ShipDateRangeEnd"] = options.ship_date_range_end.isoformat()
    body["IncludeDetailedScans"] = _TRUE

    return _serialize(Operation.TRACK, credentials, options, body)


def build_ship_request(
    credentials: FedExCredentials,
    shipper: ShipParty,
    recipient: ShipParty,
    package: Package,
    options: ShipmentOptions,
) -> str:
    """Build a ProcessShipmentRequest (v10) for a single package.

    An on-shipment e-mail notification is always requested for the
    shipper's address (and the recipient's when given). The payor account
    number is sent as-is; FedEx rejects the request if it is missing.

    Args:
        credentials: FedEx credentials.
        shipper: Sender contact and address; also decides the unit system.
        recipient: Receiver contact and address.
        package: The one package being shipped.
        options: Per-call options.

    Returns:
        Serialized ProcessShipmentRequest XML.
    """
    units = resolve_unit_system(shipper.location.country_code)

    requested: dict[str, Any] = {
        "ShipTimestamp": _timestamp(options.ship_timestamp),
        "DropoffType": options.dropoff_type,
        "ServiceType": options.service_type,
        "PackagingType": options.packaging_type,
        "Shipper": build_party_node(shipper),
        "Recipient": build_party_node(recipient),
        "ShippingChargesPayment": {
            "PaymentType": options.payment_type,
            "Payor": {
                "AccountNumber": options.payor_account_number,
                "CountryCode": shipper.location.country_code.upper(),
            },
        },
        "SpecialServicesRequested": _ship_special_services(options),
        "LabelSpecification": _label_specification(options),
        "RateRequestTypes": RATE_REQUEST_TYPE,
        "PackageCount": 1,
        "RequestedPackageLineItems": _ship_line_item(package, units, options),
    }

    return _serialize(Operation.SHIP, credentials, options, {
        "RequestedShipment": requested,
    })


# ── Ship sub-blocks ───────────────────────────────────────────────────


def _ship_special_services(options: ShipmentOptions) -> dict[str, Any]:
    service_types = [EMAIL_NOTIFICATION]
    if options.saturday_delivery:
        service_types.insert(0, SATURDAY_DELIVERY)

    recipients = [_notification_recipient(options.shipper_email)]
    if options.recipient_email:
        recipients.append(_notification_recipient(options.recipient_email))

    return {
        "SpecialServiceTypes": service_types,
        "EMailNotificationDetail": {"Recipients": recipients},
    }


def _notification_recipient(email: str | None) -> dict[str, Any]:
    return {
        "EMailNotificationRecipientType": NOTIFICATION_RECIPIENT_TYPE,
        "EMailAddress": email,
        "NotificationEventsRequested": NOTIFICATION_EVENT,
        "Format": NOTIFICATION_FORMAT,
        "Localization": {"LanguageCode": NOTIFICATION_LANGUAGE},
    }


def _label_specification(options: ShipmentOptions) -> dict[str, Any]:
    label: dict[str, Any] = {
        "LabelFormatType": LABEL_FORMAT_TYPE,
        "ImageType": options.image_type,
        "LabelStockType": options.label_stock_type,
    }
    if options.label_stock_type == THERMAL_DOC_TAB_STOCK_TYPE:
        label["LabelPrintingOrientation"] = THERMAL_PRINTING_ORIENTATION
    return label


def _ship_line_item(
    package: Package,
    units: UnitSystem,
    options: ShipmentOptions,
) -> dict[str, Any]:
    item: dict[str, Any] = {
        "SequenceNumber": 1,
        "Weight": build_weight_node(package, units),
        "Dimensions": build_dimensions_node(package, units),
    }

    references = []
    if options.po_number:
        references.append({"CustomerReferenceType": PO_NUMBER_REFERENCE, "Value": options.po_number})
    if options.invoice_number:
        references.append({"CustomerReferenceType": INVOICE_NUMBER_REFERENCE, "Value": options.invoice_number})
    if references:
        item["CustomerReferences"] = references

    if options.alcohol:
        item["SpecialServicesRequested"] = {"SpecialServiceTypes": ALCOHOL}
    return item


# ── Serialization ─────────────────────────────────────────────────────


def _timestamp(value: datetime | None) -> str:
    """ISO 8601 ship timestamp; defaults to now in the local timezone."""
    stamp = value or datetime.now().astimezone()
    return stamp.replace(microsecond=0).isoformat()


def _serialize(
    operation: Operation,
    credentials: FedExCredentials,
    options: ShipmentOptions,
    body: dict[str, Any],
) -> str:
    root, namespace, _, _ = SCHEMA_VERSIONS[operation]
    document = {
        root: {
            "@xmlns": namespace,
            **build_request_header(credentials, options),
            "Version": build_version_node(operation),
            **body,
        },
    }
    return xmltodict.unparse(document)
