"""Abstract base class for outbound sink adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from specpilot.config import settings


class SinkAdapter(ABC):
    """Pushes SpecPilot data to an external system."""

    adapter_type: str = "unknown"

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout or settings.integration_timeout_seconds

    @abstractmethod
    async def test_connection(self, config: Any) -> bool:
        """Test connectivity to the external sink.

        Returns:
            True if connection is successful.
        """
        ...
