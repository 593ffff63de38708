"""Tests for the FedEx service facade (build -> post -> parse -> map)."""

import logging
from decimal import Decimal
from unittest.mock import MagicMock

import httpx
import pytest
import xmltodict

from src.config import FedExConfig
from src.errors.domain import ValidationError
from src.services.errors import FedExServiceError
from src.services.fedex_options import FedExCredentials
from src.services.fedex_service import FedExService
from src.services.shipping_models import Location, Package, ShipParty
from tests.helpers.fedex_replies import (
    BARCODE_BYTES,
    LABEL_BYTES,
    RecordingTransport,
    notification,
    rate_detail,
    rate_reply,
    ship_reply,
    track_event,
    track_reply,
)


def _service(credentials, *replies, **defaults):
    transport = RecordingTransport(*replies)
    return FedExService(credentials, transport=transport, **defaults), transport


class TestFedExServiceInit:

    def test_accepts_credential_mapping(self):
        svc = FedExService(
            {"key": "k", "password": "p", "account": 1, "login": 2},
            transport=RecordingTransport(),
        )
        assert svc.last_request is None
        assert svc.last_response is None

    def test_from_config(self, ottawa, toronto, metric_package):
        config = FedExConfig(
            key="k", password="p", account="111", login="222",
            test=True, options={"dropoff_type": "dropbox"},
        )
        transport = RecordingTransport(rate_reply(rate_detail()))
        svc = FedExService.from_config(config, transport=transport)

        svc.find_rates(ottawa, toronto, [metric_package])

        assert transport.calls[0]["test"] is True
        request = xmltodict.parse(transport.calls[0]["body"])["RateRequest"]
        assert request["ClientDetail"] == {"AccountNumber": "111", "MeterNumber": "222"}
        assert request["RequestedShipment"]["DropoffType"] == "DROP_BOX"

    def test_closes_transport_it_created(self, credentials, monkeypatch):
        transport_cls = MagicMock()
        monkeypatch.setattr("src.services.fedex_service.FedExTransport", transport_cls)

        with FedExService(credentials):
            pass

        transport_cls.return_value.close.assert_called_once_with()

    def test_leaves_injected_transport_open(self, credentials):
        transport = MagicMock()

        with FedExService(credentials, transport=transport):
            pass

        transport.close.assert_not_called()


class TestFindRates:

    def test_round_trip(self, credentials, ottawa, toronto, metric_package):
        """2 kg 10x10x10 cm from Canada, one EUR quote back."""
        svc, transport = _service(credentials, rate_reply(rate_detail(amount="15.50", currency="EUR")))

        response = svc.find_rates(ottawa, toronto, [metric_package])

        assert response.success is True
        assert len(response.rates) == 1
        rate = response.rates[0]
        assert rate.total_price == Decimal("15.50")
        assert rate.currency == "EUR"
        assert rate.carrier == "FedEx"
        assert rate.service_code == "INTERNATIONAL_PRIORITY"
        assert rate.service_name == "FedEx International Priority"
        assert rate.origin == ottawa
        assert rate.destination == toronto
        assert rate.packages == (metric_package,)

        request = xmltodict.parse(transport.calls[0]["body"])["RateRequest"]
        package = request["RequestedShipment"]["RequestedPackages"]
        assert package["Weight"] == {"Units": "KG", "Value": "2.0"}
        assert package["Dimensions"]["Units"] == "CM"

    def test_raw_text_preserved(self, credentials, ottawa, toronto, metric_package):
        reply = rate_reply(rate_detail())
        svc, transport = _service(credentials, reply)

        response = svc.find_rates(ottawa, toronto, [metric_package])

        assert response.xml == reply
        assert response.request == transport.calls[0]["body"]
        assert svc.last_request == response.request
        assert svc.last_response == reply
        assert "RateReply" in response.params

    def test_saturday_service_name(self, credentials, ottawa, toronto, metric_package):
        svc, _ = _service(credentials, rate_reply(rate_detail("FEDEX_2_DAY", applied_options="SATURDAY_DELIVERY")))
        rate = svc.find_rates(ottawa, toronto, [metric_package]).rates[0]
        assert rate.service_code == "FEDEX_2_DAY"
        assert rate.service_name == "FedEx 2 Day Saturday Delivery"

    def test_unknown_service_name(self, credentials, ottawa, toronto, metric_package):
        svc, _ = _service(credentials, rate_reply(rate_detail("SOME_NEW_SERVICE")))
        rate = svc.find_rates(ottawa, toronto, [metric_package]).rates[0]
        assert rate.service_name == "FedEx Some New Service"

    def test_empty_success_reply_is_failure(self, credentials, ottawa, toronto, metric_package):
        svc, _ = _service(credentials, rate_reply())

        response = svc.find_rates(ottawa, toronto, [metric_package])

        assert response.success is False
        assert response.rates == ()
        assert response.message == "No shipping rates could be found for the destination address"
        assert response.error_code == "E-3004"

    def test_carrier_error_translated(self, credentials, ottawa, toronto, metric_package):
        status = notification(severity="ERROR", code="1000", message="Authentication Failed")
        svc, _ = _service(credentials, rate_reply(status=status))

        response = svc.find_rates(ottawa, toronto, [metric_package])

        assert response.success is False
        assert response.message == "ERROR - 1000: Authentication Failed"
        assert response.error_code == "E-5001"
        assert response.remediation

    def test_per_call_options_override_defaults(self, credentials, ottawa, toronto, metric_package):
        svc, transport = _service(
            credentials, rate_reply(rate_detail()), rate_reply(rate_detail()), dropoff_type="dropbox",
        )

        svc.find_rates(ottawa, toronto, [metric_package], {"dropoff_type": "station", "test": True})
        svc.find_rates(ottawa, toronto, [metric_package])

        first = xmltodict.parse(transport.calls[0]["body"])["RateRequest"]
        second = xmltodict.parse(transport.calls[1]["body"])["RateRequest"]
        assert first["RequestedShipment"]["DropoffType"] == "STATION"
        assert second["RequestedShipment"]["DropoffType"] == "DROP_BOX"
        assert transport.calls[0]["test"] is True
        assert transport.calls[1]["test"] is False

    def test_per_call_credential_override(self, credentials, ottawa, toronto, metric_package):
        svc, transport = _service(credentials, rate_reply(rate_detail()))

        svc.find_rates(ottawa, toronto, [metric_package], {"account": 999})

        request = xmltodict.parse(transport.calls[0]["body"])["RateRequest"]
        assert request["ClientDetail"]["AccountNumber"] == "999"
        assert request["ClientDetail"]["MeterNumber"] == "118546765"

    def test_malformed_reply_raises(self, credentials, ottawa, toronto, metric_package):
        svc, _ = _service(credentials, "<html>Service Unavailable")
        with pytest.raises(FedExServiceError) as exc_info:
            svc.find_rates(ottawa, toronto, [metric_package])
        assert exc_info.value.code == "E-3006"
        assert svc.last_response == "<html>Service Unavailable"

    def test_transport_error_propagates(self, credentials, ottawa, toronto, metric_package):
        transport = MagicMock()
        transport.post.side_effect = httpx.ConnectError("refused")
        svc = FedExService(credentials, transport=transport)

        with pytest.raises(httpx.ConnectError):
            svc.find_rates(ottawa, toronto, [metric_package])
        assert svc.last_request is not None
        assert svc.last_response is None


class TestXmlLogging:

    def test_log_xml_redacts_credentials(self, credentials, ottawa, toronto, metric_package, caplog):
        svc, _ = _service(credentials, rate_reply(rate_detail()), log_xml=True)

        with caplog.at_level(logging.INFO, logger="src.services.fedex_service"):
            svc.find_rates(ottawa, toronto, [metric_package])

        assert "FedEx request" in caplog.text
        assert "FedEx reply" in caplog.text
        assert "devkey123" not in caplog.text
        assert "devpass456" not in caplog.text
        assert "510087020" not in caplog.text
        assert "***REDACTED***" in caplog.text

    def test_no_xml_logged_by_default(self, credentials, ottawa, toronto, metric_package, caplog):
        svc, _ = _service(credentials, rate_reply(rate_detail()))

        with caplog.at_level(logging.INFO, logger="src.services.fedex_service"):
            svc.find_rates(ottawa, toronto, [metric_package])

        assert "FedEx request" not in caplog.text


class TestFindTrackingInfo:

    def test_events_sorted(self, credentials):
        reply = track_reply(
            track_event("Delivered", "2024-03-03T09:00:00"),
            track_event("Picked up", "2024-03-01T09:00:00"),
            track_event("Label created", "2024-02-29T09:00:00", country=""),
            track_event("In transit", "2024-03-02T09:00:00"),
        )
        svc, transport = _service(credentials, reply)

        response = svc.find_tracking_info("797806677146")

        assert response.success is True
        assert response.tracking_number == "797806677146"
        assert response.destination == Location(country_code="CA", state="ON", city="TORONTO")
        assert [e.description for e in response.shipment_events] == ["Picked up", "In transit", "Delivered"]
        request = xmltodict.parse(transport.calls[0]["body"])["TrackRequest"]
        assert request["PackageIdentifier"]["Value"] == "797806677146"

    def test_not_found(self, credentials):
        status = notification(
            severity="ERROR", code="9040",
            message="No information for the following shipments has been received by our system yet.",
        )
        svc, _ = _service(credentials, track_reply(status=status))

        response = svc.find_tracking_info("123")

        assert response.success is False
        assert response.shipment_events == ()
        assert response.destination is None
        assert response.error_code == "E-3007"

    def test_numeric_tracking_number(self, credentials):
        svc, transport = _service(credentials, track_reply())
        svc.find_tracking_info(797806677146)
        request = xmltodict.parse(transport.calls[0]["body"])["TrackRequest"]
        assert request["PackageIdentifier"]["Value"] == "797806677146"


class TestShip:

    def test_successful_shipment(self, credentials, ship_parties):
        shipper, recipient = ship_parties
        svc, transport = _service(credentials, ship_reply())

        response = svc.ship(shipper, recipient, [Package(weight=1)], {"payor_account_number": "510087020"})

        assert response.success is True
        assert response.tracking_number == "794797892730"
        assert response.carrier_code == "FDXE"
        assert response.total_price == Decimal("42.10")
        assert response.currency == "GBP"
        assert response.label == LABEL_BYTES
        assert response.binary_barcode == BARCODE_BYTES
        assert response.string_barcode == "9612019794797892730"
        assert response.shipper == shipper
        assert response.recipient == recipient
        assert len(transport.calls) == 1

    def test_storable_params_drop_label(self, credentials, ship_parties):
        shipper, recipient = ship_parties
        svc, _ = _service(credentials, ship_reply())

        response = svc.ship(shipper, recipient, Package(weight=1))

        stored = response.storable_params()
        label = stored["ProcessShipmentReply"]["CompletedShipmentDetail"]["CompletedPackageDetails"]["Label"]
        assert label["Parts"]["Image"] is None
        original = response.params["ProcessShipmentReply"]["CompletedShipmentDetail"]["CompletedPackageDetails"]
        assert original["Label"]["Parts"]["Image"]

    def test_mapping_contact_accepted(self, credentials):
        svc, transport = _service(credentials, ship_reply())
        shipper = ShipParty(
            contact={"person_name": "Ada", "phone_number": "555"},
            location=Location(country_code="CA", postal_code="K1A0B1", address1="1 Wellington St"),
        )
        recipient = ShipParty(
            contact={"person_name": "Grace", "phone_number": "556"},
            location=Location(country_code="CA", postal_code="M5V2T6", address1="1 Front St"),
        )

        response = svc.ship(shipper, recipient, [Package(weight=1)])

        assert response.shipper.contact.person_name == "Ada"
        request = xmltodict.parse(transport.calls[0]["body"])["ProcessShipmentRequest"]
        assert request["RequestedShipment"]["Shipper"]["Contact"]["PersonName"] == "Ada"
        assert request["RequestedShipment"]["RequestedPackageLineItems"]["Weight"]["Units"] == "KG"

    @pytest.mark.parametrize("count", [0, 2])
    def test_requires_exactly_one_package(self, credentials, ship_parties, count):
        shipper, recipient = ship_parties
        svc, transport = _service(credentials)

        with pytest.raises(ValidationError, match="exactly one package"):
            svc.ship(shipper, recipient, [Package(weight=1)] * count)
        assert transport.calls == []

    def test_carrier_failure(self, credentials, ship_parties):
        shipper, recipient = ship_parties
        status = notification(severity="ERROR", code="3000", message="Invalid payor account number")
        svc, _ = _service(credentials, ship_reply(status=status))

        response = svc.ship(shipper, recipient, [Package(weight=1)])

        assert response.success is False
        assert response.message == "ERROR - 3000: Invalid payor account number"
        assert response.tracking_number is None
        assert response.label is None
        assert response.error_code == "E-3005"

    def test_unreadable_label_degrades(self, credentials, ship_parties, caplog):
        shipper, recipient = ship_parties
        svc, _ = _service(credentials, ship_reply(label="abc"))

        response = svc.ship(shipper, recipient, [Package(weight=1)])

        assert response.success is False
        assert response.message.startswith("SUCCESS - 0: Request was successfully processed.")
        assert response.label is None
        assert response.error_code == "E-3006"
        assert "payload is unreadable" in caplog.text

    def test_credentials_model_passed_through(self, ship_parties):
        creds = FedExCredentials(key="k", password="p", account="1", login="2")
        svc, transport = _service(creds, ship_reply())
        shipper, recipient = ship_parties

        svc.ship(shipper, recipient, [Package(weight=1)])

        request = xmltodict.parse(transport.calls[0]["body"])["ProcessShipmentRequest"]
        assert request["WebAuthenticationDetail"]["UserCredential"]["Key"] == "k"

    @pytest.mark.parametrize("reply", [
        ship_reply(label=""),
        ship_reply(tracking_number=""),
        ship_reply(completed=False),
    ], ids=["empty-label", "no-tracking-number", "no-completed-detail"])
    def test_successful_status_without_payload_degrades(self, credentials, ship_parties, caplog, reply):
        shipper, recipient = ship_parties
        svc, _ = _service(credentials, reply)

        with caplog.at_level(logging.WARNING, logger="src.services.fedex_service"):
            response = svc.ship(shipper, recipient, [Package(weight=1)])

        assert response.success is False
        assert response.label is None
        assert response.tracking_number is None
        assert response.error_code == "E-3006"
        assert "payload is unreadable" in caplog.text

    def test_reply_for_another_operation_raises(self, credentials, ship_parties):
        shipper, recipient = ship_parties
        svc, _ = _service(credentials, track_reply())

        with pytest.raises(FedExServiceError) as exc_info:
            svc.ship(shipper, recipient, [Package(weight=1)])
        assert exc_info.value.code == "E-3006"
