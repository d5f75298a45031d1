"""Destination adapter registry: destination name -> pure transform function."""

from collections.abc import Callable

from specpilot.adapters.adobe import transform_to_adobe
from specpilot.adapters.enterprise import transform_to_enterprise
from specpilot.adapters.mparticle import transform_to_mparticle
from specpilot.adapters.segment import transform_to_segment, transform_to_segment_simple
from specpilot.adapters.tealium import transform_to_tealium
from specpilot.models.enums import Destination

DestinationAdapter = Callable[..., dict]

AVAILABLE_ADAPTERS: dict[str, DestinationAdapter] = {
    Destination.SEGMENT: transform_to_segment,
    Destination.TEALIUM: transform_to_tealium,
    Destination.MPARTICLE: transform_to_mparticle,
    Destination.ADOBE: transform_to_adobe,
    Destination.ENTERPRISE: transform_to_enterprise,
}


__all__ = [
    "AVAILABLE_ADAPTERS",
    "DestinationAdapter",
    "transform_to_adobe",
    "transform_to_enterprise",
    "transform_to_mparticle",
    "transform_to_segment",
    "transform_to_segment_simple",
    "transform_to_tealium",
]
