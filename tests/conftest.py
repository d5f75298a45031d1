"""Shared test fixtures."""

import copy
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from specpilot.services.generator import SpecGenerator
from specpilot.stores.memory import InMemoryStore

GENERATED_AT = "2026-01-01T00:00:00.000Z"

CHECKOUT_SPEC = {
    "metadata": {
        "title": "Checkout Funnel",
        "summary": "Track the checkout funnel from cart to purchase.",
        "version": "1.0",
        "status": "draft",
    },
    "events": [
        {
            "name": "Product Added to Cart",
            "description": "User adds a product to the cart",
            "trigger": "Click on Add to Cart",
            "properties": [
                {
                    "name": "product_id",
                    "type": "string",
                    "required": True,
                    "description": "Product identifier",
                    "pii": {"classification": "none"},
                    "consent": {"required": False},
                },
                {
                    "name": "price",
                    "type": "number",
                    "required": True,
                    "description": "Unit price",
                    "pii": {"classification": "none"},
                },
                {
                    "name": "currency",
                    "type": "string",
                    "required": False,
                    "pii": {"classification": "none"},
                    "enum": ["USD", "EUR"],
                },
            ],
            "identity": {
                "primary": "user_id",
                "secondary": ["anonymous_id"],
                "stitching_assumptions": "Anonymous id merged on login",
            },
            "business_rules": ["Fires once per add action"],
            "technical_rules": ["Client-side only"],
        },
        {
            "name": "Order Completed",
            "description": "User completes a purchase",
            "trigger": "Order confirmation page load",
            "properties": [
                {
                    "name": "order_id",
                    "type": "string",
                    "required": True,
                    "pii": {"classification": "none"},
                },
                {
                    "name": "email",
                    "type": "string",
                    "required": False,
                    "description": "Customer email",
                    "pii": {"classification": "high", "reason": "Direct identifier"},
                    "consent": {"required": True, "policy_group": "marketing"},
                },
                {
                    "name": "total",
                    "type": "number",
                    "required": True,
                    "pii": {"classification": "none"},
                },
                {
                    "name": "currency",
                    "type": "string",
                    "required": True,
                    "pii": {"classification": "none"},
                },
            ],
            "identity": {"primary": "user_id", "secondary": ["email"]},
        },
    ],
    "destinations": [
        {"name": "Segment", "requirements": ["Track via analytics.js"]},
        {"name": "Snowflake", "requirements": ["Daily load"]},
    ],
    "acceptance_criteria": ["Events fire in staging", "Properties match schema"],
    "open_questions": ["Should guest checkouts be tracked?"],
}


def minimal_spec(pii: str = "none", prop_type: str = "string") -> dict:
    """One event, one required property, no primary identity."""
    return {
        "metadata": {"title": "Minimal Plan"},
        "events": [
            {
                "name": "Add To Cart",
                "properties": [
                    {
                        "name": "product_id",
                        "type": prop_type,
                        "required": True,
                        "pii": {"classification": pii},
                    }
                ],
                "identity": {"primary": None},
            }
        ],
    }


@pytest.fixture
def checkout_spec() -> dict:
    return copy.deepcopy(CHECKOUT_SPEC)


# ---------------------------------------------------------------------------
# OpenAI stand-in
# ---------------------------------------------------------------------------


def completion(content: str):
    """Minimal object shaped like a chat completion response."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion(json.dumps(CHECKOUT_SPEC)))
    return client


@pytest.fixture
def generator(openai_client) -> SpecGenerator:
    return SpecGenerator(openai_client, model="test-model", summary_model="test-model", improve_model="test-model")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def app(store, generator):
    """Create a test application instance backed by an in-memory store."""
    from specpilot.main import attach_services, create_app

    _app = create_app()
    attach_services(_app, store, generator=generator)
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
