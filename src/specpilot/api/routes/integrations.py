"""Per-client Slack and Jira configuration routes."""

from fastapi import APIRouter

from specpilot.dependencies import ClientId, Integrations
from specpilot.models.integration import JiraConfig, SlackConfig

router = APIRouter(prefix="/integrations", tags=["Integrations"])


@router.post("/slack")
async def configure_slack(body: SlackConfig, integrations: Integrations, client_id: ClientId):
    await integrations.configure_slack(client_id, body)
    return {"ok": True}


@router.post("/jira")
async def configure_jira(body: JiraConfig, integrations: Integrations, client_id: ClientId):
    await integrations.configure_jira(client_id, body)
    return {"ok": True}


@router.get("/me")
async def integration_status(integrations: Integrations, client_id: ClientId):
    """Which integrations are configured; secrets are never returned."""
    status = await integrations.status(client_id)
    return {"ok": True, **status.model_dump()}
