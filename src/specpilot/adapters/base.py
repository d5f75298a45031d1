"""Shared lookup tables and naming helpers for destination adapters.

Every adapter owns its own tables; only the mechanics live here. A
``LookupTable`` is an ordered tuple of ``Rule`` objects evaluated against a
lower-cased key, first match wins, and it always ends in a default so lookups
are total.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Generic, TypeVar

T = TypeVar("T")

Predicate = Callable[[str], bool]


@dataclass(frozen=True)
class Rule(Generic[T]):
    """One ``(predicate, result)`` pair in a lookup table."""

    predicate: Predicate
    result: T
    label: str = ""


@dataclass(frozen=True)
class LookupTable(Generic[T]):
    """Ordered first-match-wins table with a mandatory default."""

    rules: tuple[Rule[T], ...]
    default: T

    def resolve(self, key: str | None) -> T:
        """Return the first matching result for ``key`` (case-insensitive)."""
        needle = (key or "").lower() if isinstance(key, str) else ""
        for rule in self.rules:
            if rule.predicate(needle):
                return copy.deepcopy(rule.result)
        return copy.deepcopy(self.default)

    def outputs(self) -> list[T]:
        """Every value this table can produce, default last."""
        return [rule.result for rule in self.rules] + [self.default]


# --- Predicates -------------------------------------------------------------


def equals(word: str) -> Predicate:
    word = word.lower()
    return lambda key: key == word


def contains_any(*words: str) -> Predicate:
    return lambda key: any(w in key for w in words)


def contains_all(*words: str) -> Predicate:
    return lambda key: all(w in key for w in words)


def exact_table(mapping: Mapping[str, T], default: T) -> LookupTable[T]:
    """Build an exact-match table (type maps, PII tables) from a mapping."""
    return LookupTable(
        rules=tuple(Rule(equals(key), value, label=key) for key, value in mapping.items()),
        default=default,
    )


def keyword_cascade(rules: list[tuple[Predicate, T]], default: T) -> LookupTable[T]:
    """Build a substring-keyword classifier evaluated in list order."""
    return LookupTable(
        rules=tuple(Rule(predicate, result) for predicate, result in rules),
        default=default,
    )


# --- Naming -----------------------------------------------------------------

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_SPACE_OR_HYPHEN = re.compile(r"[\s-]+")
_WORD_SEPARATORS = re.compile(r"[\s_-]+")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")


def title_case(name: str) -> str:
    """``add_to-cart`` -> ``Add To Cart``."""
    words = [w for w in _WORD_SEPARATORS.split(name or "") if w]
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


def snake_case(name: str) -> str:
    """``productId`` -> ``product_id``; ``Order Total`` -> ``order_total``."""
    return _SPACE_OR_HYPHEN.sub("_", _CAMEL_BOUNDARY.sub(r"\1_\2", name or "").lower())


def screaming_snake_case(name: str) -> str:
    """``Add To Cart`` -> ``ADD_TO_CART``."""
    return _SPACE_OR_HYPHEN.sub("_", _CAMEL_BOUNDARY.sub(r"\1_\2", name or "").upper())


def underscore_whitespace(text: str) -> str:
    """Lower-case and join whitespace runs with underscores."""
    return _WHITESPACE.sub("_", (text or "").lower())


def strip_whitespace(text: str) -> str:
    return _WHITESPACE.sub("", (text or "").lower())


def slugify(text: str) -> str:
    """Lower-case, collapse every non-alphanumeric run to one underscore.

    Idempotent: ``slugify(slugify(x)) == slugify(x)``.
    """
    return _NON_ALNUM.sub("_", (text or "").lower())


def utc_now_iso() -> str:
    """Generation timestamp embedded in each adapter's metadata block."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
