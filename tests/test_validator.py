"""Deterministic governance validator tests."""

import pytest
from conftest import CHECKOUT_SPEC

from specpilot.models.canonical import CanonicalEvent, CanonicalSpec
from specpilot.services.validator import (
    is_snake_case,
    is_title_case,
    overall_score,
    suggest_snake_case,
    validate_event,
    validate_spec,
)


def _event(**overrides) -> CanonicalEvent:
    data = {
        "name": "Order Completed",
        "properties": [{"name": "order_id", "type": "string"}],
        "identity": {"primary": "user_id"},
    }
    data.update(overrides)
    return CanonicalEvent.model_validate(data)


class TestNamingHelpers:
    @pytest.mark.parametrize("name", ["order_id", "a", "utm_source2"])
    def test_snake_case_accepts(self, name):
        assert is_snake_case(name)

    @pytest.mark.parametrize("name", ["orderId", "Order_id", "_order", "order-id", ""])
    def test_snake_case_rejects(self, name):
        assert not is_snake_case(name)

    def test_title_case_allows_small_words(self):
        assert is_title_case("Product Added to Cart")
        assert is_title_case("Terms of Service Accepted")
        assert not is_title_case("product added")
        assert not is_title_case("Product added")

    def test_suggest_snake_case(self):
        assert suggest_snake_case("orderTotal") == "order_total"
        assert suggest_snake_case("OrderTotal") == "order_total"


class TestValidateEvent:
    def test_clean_event_scores_100(self):
        result = validate_event(_event())
        assert result.overall_score == 100
        assert result.naming == [] and result.consent == []

    def test_naming_findings(self):
        result = validate_event(_event(name="order completed", properties=[{"name": "orderId"}]))
        assert len(result.naming) == 2
        assert "order_id" in result.naming[1]
        assert result.overall_score == 80

    def test_numeric_field_type(self):
        result = validate_event(_event(properties=[{"name": "quantity", "type": "string"}]))
        assert result.fields == ["Property 'quantity' should have type 'number', not 'string'"]
        assert result.overall_score == 95

    def test_missing_primary_identity(self):
        result = validate_event(_event(identity=None))
        assert len(result.identity) == 1
        assert result.overall_score == 80

    def test_pii_field_needs_high_and_consent(self):
        result = validate_event(_event(properties=[{"name": "email", "type": "string"}]))
        assert len(result.consent) == 2
        assert result.overall_score == 70

    def test_pii_field_declared_correctly(self):
        result = validate_event(
            _event(
                properties=[
                    {
                        "name": "customer_email",
                        "pii": {"classification": "high"},
                        "consent": {"required": True},
                    }
                ]
            )
        )
        assert result.consent == []

    def test_monetary_without_currency(self):
        result = validate_event(_event(properties=[{"name": "total", "type": "number"}]))
        assert len(result.governance) == 1
        assert result.overall_score == 95

    def test_score_is_clamped(self):
        props = [{"name": f"Bad Name {i}", "type": "string"} for i in range(12)]
        result = validate_event(_event(name="bad", properties=props, identity=None))
        assert result.overall_score == 0


class TestValidateSpec:
    def test_populates_every_event_without_mutating(self):
        original = CanonicalSpec.model_validate(CHECKOUT_SPEC)
        validated = validate_spec(original)
        assert all(event.validation is not None for event in validated.events)
        assert all(event.validation is None for event in original.events)

    def test_checkout_scores(self):
        validated = validate_spec(CHECKOUT_SPEC)
        assert [e.validation.overall_score for e in validated.events] == [100, 100]
        assert overall_score(validated) == 100

    def test_overall_score_of_empty_spec(self):
        assert overall_score(CanonicalSpec()) == 100
