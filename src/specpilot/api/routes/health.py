"""Health check endpoints."""

from fastapi import APIRouter

from specpilot import __version__
from specpilot.adapters import AVAILABLE_ADAPTERS

router = APIRouter()


@router.get("/health")
async def health_check():
    """Return service health status."""
    return {
        "status": "healthy",
        "service": "specpilot-api",
        "version": __version__,
        "destinations": [str(d) for d in AVAILABLE_ADAPTERS],
    }
