"""Map parsed FedEx replies onto the public response models.

Every builder here attaches the raw reply and request text, and failed
replies get an E-XXXX code and remediation from the FedEx translation
table alongside the carrier's own status message.
"""

from collections.abc import Sequence

from src.errors.fedex_translation import translate_fedex_error
from src.errors.registry import get_error
from src.services.fedex_constants import FEDEX_CARRIER_NAME, NO_RATES_MESSAGE
from src.services.fedex_response_parser import (
    ParsedReply,
    RateLine,
    ReplyStatus,
    ShipmentDetails,
    TrackingDetails,
)
from src.services.fedex_service_codes import service_name_for_code
from src.services.shipping_models import (
    Location,
    Package,
    RateEstimate,
    RateResponse,
    ShipParty,
    ShipResponse,
    TrackingResponse,
)

_NO_RATES_CODE = "E-3004"


def map_rate_response(
    reply: ParsedReply,
    lines: Sequence[RateLine],
    *,
    origin: Location,
    destination: Location,
    packages: Sequence[Package],
    xml: str,
    request: str,
) -> RateResponse:
    """Build a RateResponse from the extracted rate lines.

    A reply that quotes nothing is never successful, even when FedEx
    marked it SUCCESS; in that case the message says no rates were found.

    Args:
        reply: Parsed reply with status.
        lines: Rate lines from extract_rate_lines.
        origin: Caller's origin, attached to every estimate.
        destination: Caller's destination, attached to every estimate.
        packages: Caller's packages, attached to every estimate.
        xml: Raw reply text.
        request: Raw request text.

    Returns:
        RateResponse with one RateEstimate per line, in reply order.
    """
    rates = tuple(
        RateEstimate(
            origin=origin,
            destination=destination,
            carrier=FEDEX_CARRIER_NAME,
            service_name=service_name_for_code(line.service_type),
            service_code=line.service_code,
            total_price=line.total_price,
            currency=line.currency,
            packages=tuple(packages),
            delivery_range=(line.delivery_timestamp, line.delivery_timestamp),
        )
        for line in lines
    )

    success = reply.status.success and bool(rates)
    message = reply.status.summary
    error_code, remediation = None, ""
    if not rates and reply.status.success:
        message = NO_RATES_MESSAGE
        error = get_error(_NO_RATES_CODE)
        error_code, remediation = _NO_RATES_CODE, error.remediation if error else ""
    elif not success:
        error_code, remediation = _translate(reply.status)

    return RateResponse(
        success=success,
        message=message,
        params=reply.document,
        xml=xml,
        request=request,
        error_code=error_code,
        remediation=remediation,
        rates=rates,
    )


def map_tracking_response(
    reply: ParsedReply,
    details: TrackingDetails | None,
    *,
    xml: str,
    request: str,
) -> TrackingResponse:
    """Build a TrackingResponse; details is None for failed replies."""
    error_code, remediation = (None, "") if reply.status.success else _translate(reply.status)
    if details is None:
        return TrackingResponse(
            success=reply.status.success,
            message=reply.status.summary,
            params=reply.document,
            xml=xml,
            request=request,
            error_code=error_code,
            remediation=remediation,
        )

    return TrackingResponse(
        success=reply.status.success,
        message=reply.status.summary,
        params=reply.document,
        xml=xml,
        request=request,
        tracking_number=details.tracking_number or None,
        destination=details.destination,
        shipment_events=tuple(details.events),
    )


def map_ship_response(
    reply: ParsedReply,
    details: ShipmentDetails | None,
    *,
    shipper: ShipParty,
    recipient: ShipParty,
    xml: str,
    request: str,
    extraction_error: Exception | None = None,
) -> ShipResponse:
    """Build a ShipResponse.

    Args:
        reply: Parsed reply with status.
        details: Extracted shipment payload, or None when the reply failed
            or its payload could not be read.
        shipper: Caller's shipper, echoed on the response.
        recipient: Caller's recipient, echoed on the response.
        xml: Raw reply text.
        request: Raw request text.
        extraction_error: Set when FedEx reported success but the payload
            was unreadable; the response is then marked unsuccessful.

    Returns:
        ShipResponse, populated only when details is given.
    """
    common = {
        "params": reply.document,
        "xml": xml,
        "request": request,
        "shipper": shipper,
        "recipient": recipient,
    }

    if extraction_error is not None:
        error = get_error("E-3006")
        return ShipResponse(
            success=False,
            message=f"{reply.status.summary} ({extraction_error})",
            error_code="E-3006",
            remediation=error.remediation if error else "",
            **common,
        )

    if details is None or not reply.status.success:
        error_code, remediation = _translate(reply.status)
        return ShipResponse(
            success=False,
            message=reply.status.summary,
            error_code=error_code,
            remediation=remediation,
            **common,
        )

    return ShipResponse(
        success=True,
        message=reply.status.summary,
        tracking_number=details.tracking_number,
        carrier_code=details.carrier_code,
        currency=details.currency,
        total_price=details.total_price,
        binary_barcode=details.binary_barcode,
        string_barcode=details.string_barcode,
        label=details.label,
        **common,
    )


def _translate(status: ReplyStatus) -> tuple[str, str]:
    error_code, _, remediation = translate_fedex_error(status.code, status.message)
    return error_code, remediation
