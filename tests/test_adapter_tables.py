"""Tests for the shared lookup-table mechanics and naming helpers."""

import pytest

from specpilot.adapters.base import (
    LookupTable,
    Rule,
    contains_all,
    contains_any,
    equals,
    exact_table,
    keyword_cascade,
    screaming_snake_case,
    slugify,
    snake_case,
    title_case,
    underscore_whitespace,
)


class TestLookupTable:
    def test_first_match_wins(self):
        table = keyword_cascade(
            [(contains_any("cart"), "first"), (contains_any("cart", "add"), "second")],
            default="fallback",
        )
        assert table.resolve("Add To Cart") == "first"

    def test_default_when_nothing_matches(self):
        table = exact_table({"string": "S"}, default="D")
        assert table.resolve("currency") == "D"
        assert table.resolve(None) == "D"
        assert table.resolve("") == "D"

    def test_keys_are_case_insensitive(self):
        table = exact_table({"string": "S"}, default="D")
        assert table.resolve("STRING") == "S"

    def test_non_string_key_falls_back(self):
        table = exact_table({"string": "S"}, default="D")
        assert table.resolve(["string", "null"]) == "D"

    def test_results_are_copies(self):
        table = exact_table({"high": ["A"]}, default=[])
        table.resolve("high").append("B")
        assert table.resolve("high") == ["A"]

    def test_outputs_lists_default_last(self):
        table = LookupTable(rules=(Rule(equals("a"), 1), Rule(equals("b"), 2)), default=0)
        assert table.outputs() == [1, 2, 0]

    def test_contains_all_requires_every_word(self):
        predicate = contains_all("cart", "add")
        assert predicate("add to cart")
        assert not predicate("view cart")


class TestNaming:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("add to cart", "Add To Cart"),
            ("add_to-cart", "Add To Cart"),
            ("  order   completed ", "Order Completed"),
            ("", ""),
        ],
    )
    def test_title_case(self, raw, expected):
        assert title_case(raw) == expected

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("productId", "product_id"),
            ("Order Total", "order_total"),
            ("already_snake", "already_snake"),
            ("page-url", "page_url"),
        ],
    )
    def test_snake_case(self, raw, expected):
        assert snake_case(raw) == expected

    def test_screaming_snake_case(self):
        assert screaming_snake_case("Add To Cart") == "ADD_TO_CART"
        assert screaming_snake_case("orderCompleted") == "ORDER_COMPLETED"

    def test_underscore_whitespace(self):
        assert underscore_whitespace("Checkout  Funnel Plan") == "checkout_funnel_plan"

    def test_slugify_collapses_punctuation(self):
        assert slugify("Checkout Funnel (v2)!") == "checkout_funnel_v2_"

    @pytest.mark.parametrize(
        "text",
        ["Checkout Funnel", "Add--To  Cart!!", "__already_slug__", "Ünïcode Plan", ""],
    )
    def test_slugify_is_idempotent(self, text):
        once = slugify(text)
        assert slugify(once) == once
        assert all(c.isdigit() or ("a" <= c <= "z") or c == "_" for c in once)
