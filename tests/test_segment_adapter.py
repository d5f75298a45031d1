"""Segment tracking-plan adapter tests."""

from conftest import GENERATED_AT, minimal_spec

from specpilot.adapters.segment import (
    ISO_8601_PREFIX,
    map_segment_type,
    transform_to_segment,
    transform_to_segment_simple,
)


def _event(plan: dict, index: int = 0) -> dict:
    return plan["rules"]["events"][index]


class TestSegmentTypes:
    def test_datetime_maps_to_string(self):
        assert map_segment_type("datetime") == "string"

    def test_any_maps_to_type_list(self):
        assert map_segment_type("any") == ["string", "number", "boolean", "object", "array"]

    def test_unknown_maps_to_string(self):
        assert map_segment_type("currency") == "string"
        assert map_segment_type(None) == "string"


class TestTransformToSegment:
    def test_plan_naming(self, checkout_spec):
        plan = transform_to_segment(checkout_spec, generated_at=GENERATED_AT)
        assert plan["display_name"] == "Checkout Funnel"
        assert plan["name"] == "checkout_funnel"
        assert plan["type"] == "TRACKING_PLAN"

    def test_untitled_plan_uses_default_name(self):
        plan = transform_to_segment({"events": []}, generated_at=GENERATED_AT)
        assert plan["display_name"] == "SpecPilot Tracking Plan"
        assert plan["name"] == "specpilot_tracking_plan"
        assert plan["_metadata"]["sourceSpec"] == "Unknown"

    def test_event_schema(self, checkout_spec):
        event = _event(transform_to_segment(checkout_spec, generated_at=GENERATED_AT))
        assert event["name"] == "Product Added To Cart"
        assert event["version"] == 1
        rules = event["rules"]
        assert rules["$schema"] == "http://json-schema.org/draft-07/schema#"
        assert list(rules["properties"])[0] == "context"
        assert rules["required"] == ["product_id", "price"]

    def test_enum_hint_is_carried(self, checkout_spec):
        props = _event(transform_to_segment(checkout_spec))["rules"]["properties"]
        assert props["currency"]["enum"] == ["USD", "EUR"]
        assert "enum" not in props["product_id"]

    def test_missing_description_gets_default(self, checkout_spec):
        props = _event(transform_to_segment(checkout_spec))["rules"]["properties"]
        assert props["currency"]["description"] == "currency property"

    def test_timestamp_injected_when_absent(self):
        props = _event(transform_to_segment(minimal_spec()))["rules"]["properties"]
        assert props["timestamp"]["pattern"] == ISO_8601_PREFIX
        assert props["timestamp"]["type"] == "string"

    def test_declared_timestamp_is_kept(self):
        spec = minimal_spec()
        spec["events"][0]["properties"].append(
            {"name": "timestamp", "type": "datetime", "description": "When it happened"}
        )
        props = _event(transform_to_segment(spec))["rules"]["properties"]
        assert props["timestamp"] == {"description": "When it happened", "type": "string"}

    def test_property_keys_are_snake_case(self):
        spec = minimal_spec()
        spec["events"][0]["properties"][0]["name"] = "productId"
        event = _event(transform_to_segment(spec))
        assert "product_id" in event["rules"]["properties"]
        assert event["rules"]["required"] == ["product_id"]

    def test_required_has_no_duplicates(self):
        spec = minimal_spec()
        spec["events"][0]["properties"].append({"name": "productId", "required": True})
        event = _event(transform_to_segment(spec))
        assert event["rules"]["required"] == ["product_id"]

    def test_scaffolding_present(self, checkout_spec):
        rules = transform_to_segment(checkout_spec)["rules"]
        assert set(rules["global"]["properties"]) == {
            "anonymousId",
            "userId",
            "messageId",
            "sentAt",
            "receivedAt",
        }
        assert set(rules["identify"]["properties"]["traits"]["properties"]) == {
            "email",
            "name",
            "created_at",
        }
        assert rules["group"]["properties"]["groupId"]["type"] == "string"

    def test_metadata_block(self, checkout_spec):
        meta = transform_to_segment(checkout_spec, generated_at=GENERATED_AT)["_metadata"]
        assert meta == {
            "generatedBy": "SpecPilot Segment Adapter",
            "generatedAt": GENERATED_AT,
            "sourceSpec": "Checkout Funnel",
        }


class TestSegmentSimple:
    def test_keeps_raw_names_and_hints(self):
        spec = minimal_spec(prop_type="integer")
        prop = spec["events"][0]["properties"][0]
        prop.update({"name": "productId", "min": 1, "max": 10, "example": 3})
        plan = transform_to_segment_simple(spec)
        event = plan["rules"]["events"][0]
        assert event["name"] == "Add To Cart"
        schema = event["rules"]["properties"]["properties"]["productId"]
        assert schema == {
            "type": "integer",
            "description": "",
            "example": 3,
            "minimum": 1,
            "maximum": 10,
        }
        assert event["rules"]["properties"]["required"] == ["productId"]

    def test_datetime_falls_back_to_string(self):
        plan = transform_to_segment_simple(minimal_spec(prop_type="datetime"))
        schema = plan["rules"]["events"][0]["rules"]["properties"]["properties"]["product_id"]
        assert schema["type"] == "string"
