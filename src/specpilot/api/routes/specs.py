"""Spec generation, adapter fan-out and review workflow routes."""

import asyncio
import logging

from fastapi import APIRouter

from specpilot.dependencies import ClientId, Generator, Integrations, OptionalClientId, SpecService
from specpilot.models.canonical import CanonicalSpec
from specpilot.models.review import (
    AdaptersFromCanonicalRequest,
    CanonicalRequest,
    IntakeRequest,
    ReviewUpdateRequest,
    SaveSpecRequest,
    SlackShareRequest,
    UpdateSpecRequest,
)
from specpilot.services.dispatcher import render_destinations
from specpilot.services.markdown_renderer import render_spec_markdown
from specpilot.services.validator import overall_score, validate_spec

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/specpilot", tags=["Specs"])


def _dump(spec: CanonicalSpec) -> dict:
    return spec.model_dump(mode="json", exclude_none=True)


# --- Generation ---


@router.post("/intake")
async def intake_to_markdown(body: IntakeRequest, generator: Generator):
    markdown = await generator.generate_markdown(body.input)
    return {"ok": True, "markdown": markdown}


@router.post("/canonical")
async def intake_to_canonical(body: IntakeRequest, generator: Generator):
    spec = await generator.generate_canonical(body.input)
    return {"ok": True, "canonical_spec": _dump(spec)}


@router.post("/adapters")
async def intake_to_adapters(body: IntakeRequest, generator: Generator):
    spec = await generator.generate_canonical(body.input)
    outputs = await asyncio.to_thread(render_destinations, spec)
    return {"ok": True, "canonical_spec": _dump(spec), **outputs}


@router.post("/improve")
async def improve_intake(body: IntakeRequest, generator: Generator):
    improved = await generator.improve_intake(body.input)
    return {"ok": True, "original": body.input, "improved": improved}


# --- Deterministic transforms ---


@router.post("/adapters-from-canonical")
async def adapters_from_canonical(body: AdaptersFromCanonicalRequest):
    outputs = await asyncio.to_thread(render_destinations, body.canonical_spec, body.destinations)
    return {"ok": True, **outputs}


@router.post("/validate")
async def validate_canonical(body: CanonicalRequest):
    spec = validate_spec(body.canonical_spec)
    return {"ok": True, "canonical_spec": _dump(spec), "overall_score": overall_score(spec)}


@router.post("/render-markdown")
async def render_markdown(body: CanonicalRequest):
    return {"ok": True, "markdown": render_spec_markdown(body.canonical_spec)}


# --- Review storage ---


@router.post("/save")
async def save_spec(
    body: SaveSpecRequest,
    specs: SpecService,
    integrations: Integrations,
    client_id: OptionalClientId,
):
    stored = await specs.save_spec(
        body.canonical_spec,
        status=body.status,
        comment_text=body.comment_text,
        author=body.author,
        markdown_spec=body.markdown_spec,
        title=body.title,
        created_by=body.created_by,
    )
    await integrations.notify_spec_update(client_id, stored)
    return {"ok": True, "stored": stored.model_dump(mode="json")}


@router.post("/review")
async def review_spec(
    body: ReviewUpdateRequest,
    specs: SpecService,
    integrations: Integrations,
    client_id: OptionalClientId,
):
    updated = await specs.update_review(
        body.id,
        body.status,
        comment_text=body.comment_text,
        author=body.author,
        user_role=body.user_role,
    )
    await integrations.notify_spec_update(client_id, updated)
    return {"ok": True, "stored": updated.model_dump(mode="json")}


@router.put("/spec/{spec_id}")
async def update_spec(spec_id: str, body: UpdateSpecRequest, specs: SpecService):
    updated = await specs.update_spec(spec_id, body.canonical_spec, body.markdown_spec)
    return {"ok": True, "stored": updated.model_dump(mode="json")}


@router.get("/spec/{spec_id}")
async def get_spec(spec_id: str, specs: SpecService):
    """Stored spec plus every destination document rebuilt from it."""
    stored = await specs.get_spec(spec_id)
    outputs = await asyncio.to_thread(render_destinations, stored.canonical_spec)
    return {"ok": True, "stored": {**stored.model_dump(mode="json"), **outputs}}


@router.get("/specs")
async def list_specs(specs: SpecService):
    summaries = await specs.list_summaries()
    return {"ok": True, "specs": [s.model_dump(mode="json") for s in summaries]}


@router.delete("/spec/{spec_id}")
async def delete_spec(spec_id: str, specs: SpecService):
    await specs.delete_spec(spec_id)
    return {"ok": True, "deleted": spec_id}


# --- Sharing ---


@router.post("/slack-share")
async def share_to_slack(
    body: SlackShareRequest,
    specs: SpecService,
    integrations: Integrations,
    client_id: ClientId,
):
    stored = await specs.get_spec(body.spec_id)
    await integrations.share_spec(client_id, stored, body)
    return {"ok": True}


@router.post("/jira-ticket/{spec_id}")
async def create_jira_ticket(
    spec_id: str,
    specs: SpecService,
    integrations: Integrations,
    client_id: ClientId,
):
    stored = await specs.get_spec(spec_id)
    issue = await integrations.create_jira_ticket(client_id, stored)
    return {"ok": True, "issue_key": issue.key, "issue_id": issue.id, "url": issue.url}
