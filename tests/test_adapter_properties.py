"""Cross-adapter behaviour: determinism, totality, PII escalation and fan-out."""

import copy

import pydantic
import pytest
from conftest import GENERATED_AT, minimal_spec

from specpilot.adapters import AVAILABLE_ADAPTERS
from specpilot.adapters.adobe import transform_to_adobe
from specpilot.adapters.enterprise import RETENTION_DAYS, transform_to_enterprise
from specpilot.adapters.mparticle import transform_to_mparticle
from specpilot.adapters.segment import transform_to_segment
from specpilot.adapters.tealium import transform_to_tealium
from specpilot.errors.exceptions import ValidationError
from specpilot.models.enums import Destination
from specpilot.services.dispatcher import render_destinations, resolve_destinations

PII_ORDER = ["none", "low", "medium", "high"]


def _render(adapter, spec):
    if adapter in (transform_to_segment, transform_to_adobe, transform_to_enterprise):
        return adapter(spec, generated_at=GENERATED_AT)
    return adapter(spec)


# ---------------------------------------------------------------------------
# Determinism and totality
# ---------------------------------------------------------------------------


class TestDeterminism:
    @pytest.mark.parametrize("adapter", list(AVAILABLE_ADAPTERS.values()))
    def test_same_input_same_output(self, adapter, checkout_spec):
        assert _render(adapter, checkout_spec) == _render(adapter, checkout_spec)

    @pytest.mark.parametrize("adapter", list(AVAILABLE_ADAPTERS.values()))
    def test_input_is_not_mutated(self, adapter, checkout_spec):
        before = copy.deepcopy(checkout_spec)
        _render(adapter, checkout_spec)
        assert checkout_spec == before


class TestTotality:
    @pytest.mark.parametrize("adapter", list(AVAILABLE_ADAPTERS.values()))
    @pytest.mark.parametrize(
        "spec",
        [
            {},
            {"metadata": None, "events": None, "destinations": None},
            {"events": [{"name": None, "properties": None, "identity": None}]},
            {"events": [{"name": "X", "properties": [{"name": "p", "type": ["string", "null"]}]}]},
            {"events": [{"name": "X", "properties": [{"name": "p", "pii": None, "consent": None}]}]},
            {"events": [{"name": "X", "properties": [{"name": "p", "enum": "USD", "format": 5}]}]},
            {"events": [{"name": "X", "properties": [{"name": "p", "min": "low", "max": [1], "required": "yes"}]}]},
            {"events": [{"name": "X", "properties": [{"name": 7, "pii": {"classification": 3}}, "stray"]}]},
            {"events": [{"name": 42, "identity": {"primary": 5, "secondary": [None, "email", {"x": 1}]}}]},
            {"events": [{"name": "X", "identity": "user_id", "properties": "oops", "business_rules": "one"}]},
            {"metadata": {"title": 3, "version": None}, "destinations": ["Segment", {"requirements": None}]},
        ],
    )
    def test_partial_specs_never_raise(self, adapter, spec):
        assert isinstance(_render(adapter, spec), dict)

    @pytest.mark.parametrize("adapter", list(AVAILABLE_ADAPTERS.values()))
    def test_malformed_hints_are_ignored(self, adapter):
        noisy = {"events": [{"name": "X", "properties": [{"name": "p", "enum": "USD", "format": 5, "min": "a"}]}]}
        clean = {"events": [{"name": "X", "properties": [{"name": "p"}]}]}
        assert _render(adapter, noisy) == _render(adapter, clean)

    @pytest.mark.parametrize("spec", [{"events": "oops"}, {"metadata": "x"}, {"events": ["Add To Cart"]}])
    def test_wrong_top_level_shape_is_rejected(self, spec):
        with pytest.raises(pydantic.ValidationError):
            render_destinations(spec)

    def test_unrecognized_type_uses_each_default(self):
        spec = minimal_spec(prop_type="currency")
        segment = transform_to_segment(spec)["rules"]["events"][0]["rules"]["properties"]["product_id"]
        tealium = transform_to_tealium(spec)["events"][0]["attributes"][0]
        mparticle = transform_to_mparticle(spec)["data_plan_versions"][0]["version_document"]["data_points"][0]
        mp_attr = mparticle["validator"]["definition"]["properties"]["data"]["properties"]["custom_attributes"][
            "properties"
        ]["product_id"]
        adobe_fields = transform_to_adobe(spec)["xdm:experienceEvents"][0]["xdm:fields"]
        enterprise_fields = transform_to_enterprise(spec)["events"][0]["schema"]["fields"]

        assert segment["type"] == "string"
        assert tealium["type"] == "string"
        assert mp_attr["type"] == "string"
        assert adobe_fields[-1]["xdm:dataType"] == "xdm:string"
        assert enterprise_fields[-1]["field_type"] == "VARCHAR(255)"


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_minimal_spec(self):
        spec = minimal_spec()
        segment_event = transform_to_segment(spec)["rules"]["events"][0]
        assert segment_event["name"] == "Add To Cart"
        assert "product_id" in segment_event["rules"]["properties"]
        assert segment_event["rules"]["required"] == ["product_id"]

        attrs = transform_to_tealium(spec)["events"][0]["attributes"]
        assert attrs == [{"name": "product_id", "type": "string", "required": True, "description": ""}]

        points = transform_to_mparticle(spec)["data_plan_versions"][0]["version_document"]["data_points"]
        assert len(points) == 1
        assert points[0]["match"]["criteria"] == {"event_name": "Add To Cart"}

    def test_pii_escalation(self):
        spec = minimal_spec(pii="high")
        field = transform_to_enterprise(spec)["events"][0]["schema"]["fields"][-1]
        assert field["pii_classification"] == "HIGH"
        assert field["data_governance"]["retention_days"] == 30
        assert field["data_governance"]["masking_rule"] == "FULL_MASK"
        assert field["consent_requirements"]["required"] is True
        assert set(field["consent_requirements"]["consent_types"]) == {"EXPLICIT_CONSENT", "DATA_PROCESSING"}

        adobe = transform_to_adobe(spec)
        assert adobe["xdm:experienceEvents"][0]["xdm:fields"][-1]["xdm:sensitivityLabel"] == "S1"
        assert adobe["xdm:dataGovernance"]["xdm:consentRequired"] is True


class TestPiiMonotonicity:
    def test_retention_never_grows_with_sensitivity(self):
        retention = [
            transform_to_enterprise(minimal_spec(pii=level))["events"][0]["schema"]["fields"][-1][
                "data_governance"
            ]["retention_days"]
            for level in PII_ORDER
        ]
        assert retention == sorted(retention, reverse=True)
        assert retention[-1] == RETENTION_DAYS.resolve("HIGH")

    def test_consent_never_drops_with_sensitivity(self):
        required = [
            transform_to_enterprise(minimal_spec(pii=level))["events"][0]["schema"]["fields"][-1][
                "consent_requirements"
            ]["required"]
            for level in PII_ORDER
        ]
        assert required == sorted(required)

    def test_adobe_document_consent_never_drops(self):
        required = [
            transform_to_adobe(minimal_spec(pii=level))["xdm:dataGovernance"]["xdm:consentRequired"]
            for level in PII_ORDER
        ]
        assert required == [False, False, True, True]


# ---------------------------------------------------------------------------
# Registry and fan-out
# ---------------------------------------------------------------------------


class TestDispatcher:
    def test_registry_covers_every_destination(self):
        assert set(AVAILABLE_ADAPTERS) == set(Destination)

    def test_resolve_defaults_to_all(self):
        assert resolve_destinations(None) == list(Destination)
        assert resolve_destinations([]) == list(Destination)

    def test_resolve_dedupes_and_normalizes(self):
        assert resolve_destinations(["ADOBE", "adobe", " segment "]) == [
            Destination.ADOBE,
            Destination.SEGMENT,
        ]

    def test_unknown_destination_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            resolve_destinations(["segment", "braze"])
        assert exc_info.value.details["unknown"] == ["braze"]
        assert exc_info.value.status_code == 400

    def test_render_subset(self, checkout_spec):
        outputs = render_destinations(checkout_spec, ["tealium", "mparticle"])
        assert list(outputs) == ["tealium", "mparticle"]
        assert outputs["tealium"] == transform_to_tealium(checkout_spec)

    def test_render_all(self, checkout_spec):
        outputs = render_destinations(checkout_spec)
        assert list(outputs) == ["segment", "tealium", "mparticle", "adobe", "enterprise"]
