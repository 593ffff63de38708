"""FedEx service layer: rate quotes, tracking and shipment creation.

Each call runs build -> post -> parse -> map synchronously. Carrier-side
failures come back as responses with ``success=False``; only malformed
replies (FedExServiceError), transport failures (httpx errors) and
wrongly shaped calls (ValidationError) raise.

Example:
    svc = FedExService(
        FedExCredentials(key=..., password=..., account=..., login=...),
        test=True,
    )
    response = svc.find_rates(origin, destination, [Package(weight=2, dimensions=(10, 10, 10))])
    for rate in response.rates:
        print(rate.service_name, rate.total_price, rate.currency)
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from src.config import FedExConfig
from src.errors.domain import ValidationError
from src.services.fedex_constants import Operation
from src.services.fedex_mapper import map_rate_response, map_ship_response, map_tracking_response
from src.services.fedex_options import FedExCredentials, ShipmentOptions
from src.services.fedex_payload_builder import (
    build_rate_request,
    build_ship_request,
    build_tracking_request,
)
from src.services.fedex_response_parser import (
    extract_rate_lines,
    extract_shipment,
    extract_tracking,
    parse_reply,
)
from src.services.fedex_transport import FedExTransport
from src.services.shipping_models import (
    Contact,
    Location,
    Package,
    RateResponse,
    ShipParty,
    ShipResponse,
    TrackingResponse,
)
from src.utils.redaction import redact_xml

logger = logging.getLogger(__name__)

_CREDENTIAL_FIELDS = frozenset(FedExCredentials.model_fields)


class FedExService:
    """FedEx XML gateway client.

    Default options given at construction apply to every call; per-call
    options override them for that call only. Credential fields (key,
    password, account, login) may also be overridden per call.

    Attributes:
        last_request: Request XML of the most recent call, for diagnostics.
        last_response: Reply XML of the most recent call, for diagnostics.
    """

    def __init__(
        self,
        credentials: FedExCredentials | Mapping[str, Any],
        transport: FedExTransport | None = None,
        **default_options: Any,
    ) -> None:
        """Initialize with FedEx credentials.

        Args:
            credentials: FedExCredentials, or a mapping with key, password,
                account and login.
            transport: Transport to post through. A default FedExTransport
                is created when None and closed by close().
            **default_options: ShipmentOptions fields applied to every call
                (e.g. test=True, dropoff_type="dropbox"). Unknown keys are
                ignored.
        """
        if not isinstance(credentials, FedExCredentials):
            credentials = FedExCredentials.model_validate(dict(credentials))
        self._credentials = credentials
        self._defaults = ShipmentOptions.model_validate(default_options)
        self._owns_transport = transport is None
        self._transport = transport or FedExTransport()
        self.last_request: str | None = None
        self.last_response: str | None = None

    @classmethod
    def from_config(
        cls,
        config: FedExConfig,
        transport: FedExTransport | None = None,
    ) -> "FedExService":
        """Build a service from loaded configuration.

        Args:
            config: Result of src.config.load_config().
            transport: Optional transport override.

        Returns:
            FedExService using the config's credentials, environment and
            default options.
        """
        credentials = FedExCredentials(
            key=config.key,
            password=config.password,
            account=config.account,
            login=config.login,
        )
        return cls(
            credentials,
            transport=transport,
            **{**config.options, "test": config.test, "log_xml": config.log_xml},
        )

    def find_rates(
        self,
        origin: Location,
        destination: Location,
        packages: Sequence[Package],
        options: Mapping[str, Any] | None = None,
    ) -> RateResponse:
        """Quote every FedEx service available between two locations.

        Args:
            origin: Ship-from location; its country decides the unit system.
            destination: Ship-to location.
            packages: Packages to quote.
            options: Per-call option overrides.

        Returns:
            RateResponse. success is False when FedEx reports a failure or
            quotes no services.

        Raises:
            FedExServiceError: If the reply cannot be interpreted.
        """
        credentials, opts = self._resolve(options)
        request = build_rate_request(credentials, origin, destination, packages, opts)
        xml = self._commit(request, opts)

        reply = parse_reply(xml, Operation.RATE)
        lines = extract_rate_lines(reply.root)
        return map_rate_response(
            reply,
            lines,
            origin=origin,
            destination=destination,
            packages=packages,
            xml=xml,
            request=request,
        )

    def find_tracking_info(
        self,
        tracking_number: str,
        options: Mapping[str, Any] | None = None,
    ) -> TrackingResponse:
        """Look up a package's scan history.

        Args:
            tracking_number: Identifier to track. Set options
                ``package_identifier_type`` to track by something other than
                a tracking number (e.g. "ground_po").
            options: Per-call option overrides.

        Returns:
            TrackingResponse with events oldest first.

        Raises:
            FedExServiceError: If the reply cannot be interpreted.
        """
        credentials, opts = self._resolve(options)
        request = build_tracking_request(credentials, str(tracking_number), opts)
        xml = self._commit(request, opts)

        reply = parse_reply(xml, Operation.TRACK)
        details = extract_tracking(reply.root) if reply.status.success else None
        return map_tracking_response(reply, details, xml=xml, request=request)

    def ship(
        self,
        shipper: ShipParty,
        recipient: ShipParty,
        packages: Package | Sequence[Package],
        options: Mapping[str, Any] | None = None,
    ) -> ShipResponse:
        """Create a single-package shipment and fetch its label.

        Args:
            shipper: Sender; its contact may be a Contact, a mapping or any
                object with person_name/phone_number/company_name.
            recipient: Receiver, same contact rules as shipper.
            packages: Exactly one package (a bare Package is accepted).
            options: Per-call option overrides (payor_account_number,
                shipper_email, po_number, ...).

        Returns:
            ShipResponse with the decoded label. If FedEx reports success
            but the payload is unreadable or incomplete, success is False and the message
            names the extraction failure.

        Raises:
            ValidationError: If packages is not exactly one package.
            FedExServiceError: If the reply cannot be interpreted.
        """
        if isinstance(packages, Package):
            packages = [packages]
        if len(packages) != 1:
            raise ValidationError(
                f"FedEx shipment creation takes exactly one package, got {len(packages)}"
            )

        shipper = ShipParty(Contact.from_object(shipper.contact), shipper.location)
        recipient = ShipParty(Contact.from_object(recipient.contact), recipient.location)

        credentials, opts = self._resolve(options)
        request = build_ship_request(credentials, shipper, recipient, packages[0], opts)
        xml = self._commit(request, opts)

        reply = parse_reply(xml, Operation.SHIP)
        common = {"shipper": shipper, "recipient": recipient, "xml": xml, "request": request}
        if not reply.status.success:
            return map_ship_response(reply, None, **common)

        try:
            details = extract_shipment(reply.root)
        except ValueError as e:
            logger.warning(
                "FedEx reported %s but the shipment payload is unreadable: %s",
                reply.status.summary, e, exc_info=True,
            )
            return map_ship_response(reply, None, extraction_error=e, **common)

        logger.info("FedEx shipment created: tracking=%s", details.tracking_number)
        return map_ship_response(reply, details, **common)

    def close(self) -> None:
        """Close the transport if this service created it."""
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> "FedExService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ── Internals ─────────────────────────────────────────────────────

    def _resolve(
        self,
        options: Mapping[str, Any] | None,
    ) -> tuple[FedExCredentials, ShipmentOptions]:
        """Split per-call options into credential overrides and shipment options."""
        overrides = dict(options or {})
        credential_overrides = {
            name: overrides.pop(name) for name in list(overrides) if name in _CREDENTIAL_FIELDS
        }

        credentials = self._credentials
        if credential_overrides:
            credentials = FedExCredentials.model_validate(
                {**credentials.model_dump(), **credential_overrides}
            )
        return credentials, self._defaults.merged(overrides)

    def _commit(self, request: str, options: ShipmentOptions) -> str:
        """Post a request and record it and its reply."""
        self.last_request = request
        self.last_response = None
        if options.log_xml:
            logger.info("FedEx request: %s", redact_xml(request))

        xml = self._transport.post(request, test=options.test)

        self.last_response = xml
        if options.log_xml:
            logger.info("FedEx reply: %s", redact_xml(xml))
        return xml
