"""Tests for shipping value objects and response models."""

from types import SimpleNamespace

import pytest

from src.services.fedex_constants import UnitSystem
from src.services.shipping_models import (
    Contact,
    Location,
    Package,
    ShipResponse,
)


class TestLocation:

    def test_address_type_flags(self):
        assert Location(country_code="US", address_type="residential").residential is True
        assert Location(country_code="US", address_type="commercial").commercial is True

    def test_unknown_address_type_is_neither(self):
        loc = Location(country_code="US")
        assert loc.residential is False
        assert loc.commercial is False


class TestPackage:

    def test_metric_values_returned_as_given(self):
        pkg = Package(weight=2, dimensions=(10, 20, 30))
        assert pkg.kgs == 2.0
        assert pkg.cm("length") == 10.0
        assert pkg.cm("height") == 30.0

    def test_metric_to_imperial(self):
        pkg = Package(weight=0.45359237, dimensions=(2.54, 5.08, 7.62))
        assert pkg.lbs == pytest.approx(1.0)
        assert pkg.inches("width") == pytest.approx(2.0)

    def test_imperial_to_metric(self):
        pkg = Package(weight=1, dimensions=(1, 1, 1), units=UnitSystem.IMPERIAL)
        assert pkg.kgs == pytest.approx(0.45359237)
        assert pkg.cm("length") == pytest.approx(2.54)

    def test_units_accept_string_value(self):
        pkg = Package(weight=1, units="imperial")
        assert pkg.units is UnitSystem.IMPERIAL

    def test_missing_dimensions_padded_with_zero(self):
        pkg = Package(weight=1, dimensions=(10,))
        assert pkg.dimensions == (10.0, 0.0, 0.0)

    def test_too_many_dimensions_rejected(self):
        with pytest.raises(ValueError, match="at most 3"):
            Package(weight=1, dimensions=(1, 2, 3, 4))

    def test_unknown_axis_rejected(self):
        with pytest.raises(ValueError, match="Unknown package axis"):
            Package(weight=1).cm("depth")

    def test_weight_in_follows_system(self):
        pkg = Package(weight=1, units=UnitSystem.IMPERIAL)
        assert pkg.weight_in(UnitSystem.IMPERIAL) == 1.0
        assert pkg.weight_in(UnitSystem.METRIC) == pytest.approx(0.45359237)


class TestContact:
    """Contact.from_object accepts contacts, mappings and plain objects."""

    def test_contact_returned_unchanged(self):
        contact = Contact(person_name="Ada")
        assert Contact.from_object(contact) is contact

    def test_from_mapping(self):
        contact = Contact.from_object({"person_name": "Ada", "phone_number": "555", "extra": 1})
        assert contact == Contact(person_name="Ada", phone_number="555")

    def test_from_object_with_missing_attributes(self):
        source = SimpleNamespace(person_name="Ada", company_name="Engines Ltd")
        contact = Contact.from_object(source)
        assert contact.person_name == "Ada"
        assert contact.phone_number is None
        assert contact.company_name == "Engines Ltd"

    def test_overrides_win(self):
        contact = Contact.from_object(Contact(person_name="Ada"), phone_number="555")
        assert contact == Contact(person_name="Ada", phone_number="555")

    def test_str_skips_empty_fields(self):
        assert str(Contact(person_name="Ada", company_name="Engines Ltd")) == "Ada Engines Ltd"


class TestShipResponseStorableParams:
    """storable_params() nulls label images without touching params."""

    def _response(self, params):
        return ShipResponse(success=True, message="SUCCESS - 0: ok", params=params)

    def test_label_image_removed(self):
        params = {
            "ProcessShipmentReply": {
                "CompletedShipmentDetail": {
                    "CompletedPackageDetails": {
                        "Label": {"Parts": {"Image": "QUJD"}},
                    },
                },
            },
        }
        response = self._response(params)

        stored = response.storable_params()

        label = stored["ProcessShipmentReply"]["CompletedShipmentDetail"]["CompletedPackageDetails"]["Label"]
        assert label["Parts"]["Image"] is None
        original = params["ProcessShipmentReply"]["CompletedShipmentDetail"]["CompletedPackageDetails"]["Label"]
        assert original["Parts"]["Image"] == "QUJD"

    def test_repeated_parts_all_removed(self):
        params = {
            "ProcessShipmentReply": {
                "CompletedShipmentDetail": {
                    "CompletedPackageDetails": [
                        {"Label": {"Parts": [{"Image": "QQ=="}, {"Image": "Qg=="}]}},
                    ],
                },
            },
        }
        stored = self._response(params).storable_params()
        parts = stored["ProcessShipmentReply"]["CompletedShipmentDetail"]["CompletedPackageDetails"][0]["Label"]["Parts"]
        assert [p["Image"] for p in parts] == [None, None]

    def test_missing_label_tolerated(self):
        params = {"ProcessShipmentReply": {"Notifications": {"Severity": "ERROR"}}}
        assert self._response(params).storable_params() == params

    def test_empty_params(self):
        assert self._response({}).storable_params() == {}
