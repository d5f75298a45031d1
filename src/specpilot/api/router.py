"""Master API router mounted at /api/v1."""

from fastapi import APIRouter

from specpilot.api.routes import health, integrations, specs

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(specs.router)
api_router.include_router(integrations.router)
