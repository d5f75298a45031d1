"""Fan a canonical spec out to the requested destination adapters."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from specpilot.adapters import AVAILABLE_ADAPTERS
from specpilot.errors.exceptions import ValidationError
from specpilot.models.canonical import CanonicalSpec
from specpilot.models.enums import Destination

logger = logging.getLogger(__name__)


def resolve_destinations(names: Iterable[str] | None) -> list[Destination]:
    """Normalize a requested subset; ``None`` or empty means every adapter."""
    if not names:
        return list(AVAILABLE_ADAPTERS)

    resolved: list[Destination] = []
    unknown: list[str] = []
    for name in names:
        try:
            destination = Destination(str(name).strip().lower())
        except ValueError:
            unknown.append(str(name))
            continue
        if destination not in resolved:
            resolved.append(destination)

    if unknown:
        raise ValidationError(
            f"Unknown destination(s): {', '.join(unknown)}",
            details={"unknown": unknown, "available": [d.value for d in Destination]},
        )
    return resolved


def render_destinations(
    canonical: CanonicalSpec | dict,
    destinations: Iterable[str] | None = None,
) -> dict[str, dict]:
    """Run each requested adapter independently and key the outputs by name."""
    spec = CanonicalSpec.coerce(canonical)
    selected = resolve_destinations(destinations)
    outputs = {str(dest): AVAILABLE_ADAPTERS[dest](spec) for dest in selected}
    logger.info(
        "Rendered %d destination(s) for '%s' (%d events)",
        len(outputs),
        spec.metadata.title or "Untitled",
        len(spec.events),
    )
    return outputs
