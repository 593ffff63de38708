"""FedEx reply parsing.

Turns raw reply XML into a namespace-free dict, reads the status triple
from the reply's first Notifications node, and extracts the payload of
each operation. Nothing here decides what the caller sees; see
fedex_mapper for that.

Per the FedEx XML gateway's behaviour:
- Prefixes differ between schemas and releases (``v6:``, ``ns:``, none),
  so element names are matched by local name only.
- WARNING and NOTE replies carry usable payloads and count as success.
- Optional nested fields default to empty/zero rather than failing.
"""

import base64
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any
from xml.parsers.expat import ExpatError

import xmltodict
from dateutil import parser as date_parser
from dateutil.parser import ParserError

from src.errors.registry import get_error
from src.services.errors import FedExServiceError
from src.services.fedex_constants import (
    FEDEX_POUND_CODE,
    ISO_POUND_CODE,
    REPLY_ROOTS,
    SATURDAY_DELIVERY,
    SUCCESS_SEVERITIES,
    Operation,
)
from src.services.fedex_service_codes import saturday_service_type
from src.services.shipping_models import Location, ShipmentEvent
from src.utils.xml_nodes import as_list, find_node, node_text, strip_namespace

logger = logging.getLogger(__name__)

_MALFORMED_CODE = "E-3006"


@dataclass(frozen=True)
class ReplyStatus:
    """Severity, code and message from a reply's Notifications node."""

    severity: str
    code: str
    message: str

    @property
    def success(self) -> bool:
        return self.severity.upper() in SUCCESS_SEVERITIES

    @property
    def summary(self) -> str:
        return f"{self.severity} - {self.code}: {self.message}"


@dataclass(frozen=True)
class ParsedReply:
    """A reply that parsed and has a status node."""

    root_name: str
    root: dict[str, Any]
    document: dict[str, Any]
    status: ReplyStatus


@dataclass(frozen=True)
class RateLine:
    """One RateReplyDetails entry, before origin/destination are attached."""

    service_code: str
    service_type: str
    """service_code, with the Saturday-delivery suffix when applicable."""
    total_price: Decimal
    currency: str
    delivery_timestamp: datetime | None = None


@dataclass(frozen=True)
class TrackingDetails:
    tracking_number: str
    destination: Location | None
    events: list[ShipmentEvent] = field(default_factory=list)


@dataclass(frozen=True)
class ShipmentDetails:
    tracking_number: str
    carrier_code: str
    currency: str
    total_price: Decimal
    binary_barcode: bytes
    string_barcode: str
    label: bytes


def normalize_currency(code: str) -> str:
    """Map FedEx's UKL pound code (any case) to ISO GBP; pass others through."""
    if code.strip().upper() == FEDEX_POUND_CODE:
        return ISO_POUND_CODE
    return code


def parse_reply(xml_text: str | None, operation: Operation) -> ParsedReply:
    """Parse reply XML and read its status.

    Args:
        xml_text: Raw reply text from the transport.
        operation: Which request this replies to; decides the expected
            root element.

    Returns:
        ParsedReply with the namespace-free document and status.

    Raises:
        FedExServiceError: If the XML is malformed or empty, its root is
            not the reply for this operation, or it has no Notifications
            node under its root element.
    """
    if not xml_text or not xml_text.strip():
        raise _malformed("FedEx returned an empty reply", xml_text)

    try:
        document = xmltodict.parse(
            xml_text,
            process_namespaces=True,
            postprocessor=strip_namespace,
        )
    except ExpatError as e:
        raise _malformed(f"FedEx reply is not well-formed XML: {e}", xml_text) from e

    root_name, root = next(iter(document.items()))
    expected = REPLY_ROOTS[operation]
    if root_name != expected:
        raise _malformed(f"Expected a {expected} reply but got <{root_name}>", xml_text)

    notification = find_node(root, "Notifications")
    if not isinstance(notification, (dict, list)) or not as_list(notification):
        raise _malformed(f"FedEx <{root_name}> reply has no Notifications node", xml_text)

    notification = as_list(notification)[0]
    status = ReplyStatus(
        severity=node_text(notification.get("Severity")),
        code=node_text(notification.get("Code")),
        message=node_text(notification.get("Message")),
    )
    logger.debug("FedEx %s reply status: %s", operation.value, status.summary)

    return ParsedReply(root_name=root_name, root=root, document=document, status=status)


def extract_rate_lines(root: dict[str, Any]) -> list[RateLine]:
    """Extract every RateReplyDetails entry from a RateReply.

    Args:
        root: The RateReply element.

    Returns:
        Rate lines in reply order; empty when the reply quotes nothing.
    """
    lines = []
    for detail in as_list(root.get("RateReplyDetails")):
        service_code = node_text(detail.get("ServiceType"))
        applied = [node_text(o) for o in _as_values(detail.get("AppliedOptions"))]
        service_type = (
            saturday_service_type(service_code) if SATURDAY_DELIVERY in applied else service_code
        )

        charge = find_node(detail, "RatedShipmentDetails", "ShipmentRateDetail", "TotalNetCharge")
        lines.append(RateLine(
            service_code=service_code,
            service_type=service_type,
            total_price=_decimal(node_text(find_node(charge, "Amount"))),
            currency=normalize_currency(node_text(find_node(charge, "Currency"))),
            delivery_timestamp=_parse_timestamp(node_text(detail.get("DeliveryTimestamp"))),
        ))
    return lines


def extract_tracking(root: dict[str, Any]) -> TrackingDetails:
    """Extract destination and scan events from a successful TrackReply.

    Events without a country are discarded. Timestamps keep their
    wall-clock fields and are labelled UTC without conversion. The result
    is sorted oldest first regardless of reply order.

    Args:
        root: The TrackReply element.

    Returns:
        TrackingDetails for the first TrackDetails entry.
    """
    details = find_node(root, "TrackDetails")
    if isinstance(details, list):
        details = details[0] if details else None
    if not isinstance(details, dict):
        return TrackingDetails(tracking_number="", destination=None)

    destination = None
    destination_node = details.get("DestinationAddress")
    if isinstance(destination_node, dict):
        destination = Location(
            country_code=node_text(destination_node.get("CountryCode")),
            state=node_text(destination_node.get("StateOrProvinceCode")),
            city=node_text(destination_node.get("City")),
        )

    events = []
    for event in as_list(details.get("Events")):
        address = event.get("Address")
        country = node_text(find_node(address, "CountryCode"))
        if not country:
            continue

        raw_time = node_text(event.get("Timestamp"))
        time = _parse_timestamp(raw_time)
        if time is None:
            logger.warning("Dropping FedEx scan event with unreadable timestamp %r", raw_time)
            continue

        events.append(ShipmentEvent(
            description=node_text(event.get("EventDescription")),
            time=time,
            location=Location(
                country_code=country,
                city=node_text(find_node(address, "City")),
                state=node_text(find_node(address, "StateOrProvinceCode")),
                postal_code=node_text(find_node(address, "PostalCode")),
            ),
        ))

    events.sort(key=lambda e: e.time)
    return TrackingDetails(
        tracking_number=node_text(details.get("TrackingNumber")),
        destination=destination,
        events=events,
    )


def extract_shipment(root: dict[str, Any]) -> ShipmentDetails:
    """Extract tracking number, charges, barcodes and label from a ProcessShipmentReply.

    Args:
        root: The ProcessShipmentReply element.

    Returns:
        ShipmentDetails with base64 payloads decoded.

    Raises:
        ValueError: If the reply carries no tracking number or no label, or
            a base64 payload cannot be decoded (binascii.Error is a
            ValueError).
    """
    completed = find_node(root, "CompletedShipmentDetail")
    if not completed:
        raise ValueError("reply has no CompletedShipmentDetail")

    package = find_node(completed, "CompletedPackageDetails")
    tracking_number = node_text(find_node(package, "TrackingIds", "TrackingNumber"))
    if not tracking_number:
        raise ValueError("reply has no tracking number")

    label = base64.b64decode(node_text(find_node(package, "Label", "Parts", "Image")))
    if not label:
        raise ValueError("reply has no label image")

    charge = find_node(completed, "ShipmentRating", "ShipmentRateDetails", "TotalNetCharge")
    barcodes = find_node(package, "OperationalDetail", "Barcodes")

    return ShipmentDetails(
        tracking_number=tracking_number,
        carrier_code=node_text(find_node(completed, "CarrierCode")),
        currency=normalize_currency(node_text(find_node(charge, "Currency"))),
        total_price=_decimal(node_text(find_node(charge, "Amount"))),
        binary_barcode=base64.b64decode(node_text(find_node(barcodes, "BinaryBarcodes", "Value"))),
        string_barcode=node_text(find_node(barcodes, "StringBarcodes", "Value")),
        label=label,
    )


# ── Helpers ───────────────────────────────────────────────────────────


def _as_values(node: Any) -> list[Any]:
    """Like as_list, but keeps text leaves (AppliedOptions repeats as plain strings)."""
    if node is None:
        return []
    if isinstance(node, list):
        return node
    return [node]


def _decimal(text: str) -> Decimal:
    try:
        return Decimal(text)
    except InvalidOperation:
        return Decimal("0")


def _parse_timestamp(text: str) -> datetime | None:
    """Parse a FedEx timestamp, keeping its wall-clock fields as UTC."""
    if not text:
        return None
    try:
        parsed = date_parser.parse(text)
    except (ParserError, ValueError, OverflowError):
        return None
    return parsed.replace(microsecond=0, tzinfo=timezone.utc)


def _malformed(message: str, xml_text: str | None) -> FedExServiceError:
    error = get_error(_MALFORMED_CODE)
    return FedExServiceError(
        code=_MALFORMED_CODE,
        message=message,
        remediation=error.remediation if error else "",
        details={"xml": (xml_text or "")[:500]},
    )
