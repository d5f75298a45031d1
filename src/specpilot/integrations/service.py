"""IntegrationService: per-client Slack and Jira delivery for saved specs."""

from __future__ import annotations

import logging

from specpilot.config import settings
from specpilot.errors.exceptions import (
    IntegrationError,
    IntegrationNotConfiguredError,
    ValidationError,
)
from specpilot.integrations.adapters.jira import JiraAdapter, JiraIssue
from specpilot.integrations.adapters.slack import SlackAdapter
from specpilot.integrations.config_store import IntegrationConfigStore
from specpilot.models.canonical import CanonicalSpec
from specpilot.models.integration import IntegrationStatus, JiraConfig, SlackConfig
from specpilot.models.review import SlackShareRequest, StoredSpec
from specpilot.services.validator import overall_score

logger = logging.getLogger(__name__)


class IntegrationService:
    """Orchestrates outbound integration operations for one deployment."""

    def __init__(
        self,
        config_store: IntegrationConfigStore,
        slack: SlackAdapter | None = None,
        jira: JiraAdapter | None = None,
        frontend_url: str | None = None,
    ):
        self.config_store = config_store
        self.slack = slack or SlackAdapter()
        self.jira = jira or JiraAdapter()
        self.frontend_url = frontend_url or settings.frontend_url

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    async def configure_slack(self, client_id: str, config: SlackConfig) -> None:
        """Ping the webhook, then store it. Nothing is stored if the ping fails."""
        if not await self.slack.test_connection(config):
            raise ValidationError(
                "Slack webhook URL seems invalid or unreachable",
                code="INTEGRATION_TEST_FAILED",
            )
        await self.config_store.set_slack(client_id, config)
        logger.info("Slack configured for client %s", client_id)

    async def configure_jira(self, client_id: str, config: JiraConfig) -> None:
        """Probe the Jira project, then store the credentials."""
        if not await self.jira.test_connection(config):
            raise ValidationError(
                "Jira config test failed (project not reachable)",
                code="INTEGRATION_TEST_FAILED",
            )
        await self.config_store.set_jira(client_id, config)
        logger.info("Jira configured for client %s (project=%s)", client_id, config.project_key)

    async def status(self, client_id: str) -> IntegrationStatus:
        return await self.config_store.status(client_id)

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    async def notify_spec_update(self, client_id: str | None, spec: StoredSpec) -> bool:
        """Post a status update for a saved or reviewed spec.

        Never raises: a missing configuration or a failed delivery is logged
        and reported as False so the calling request still succeeds.
        """
        if not client_id:
            return False
        try:
            config = await self.config_store.get(client_id)
            if config.slack is None:
                return False
            text = SlackAdapter.build_status_text(spec.id, spec.title, spec.status, spec.summary)
            return await self.slack.push_text(config.slack, text)
        except Exception as exc:  # noqa: BLE001  notification failures must not fail the request
            logger.error("Slack notify failed for spec %s: %s", spec.id, exc)
            return False

    async def share_spec(self, client_id: str, spec: StoredSpec, request: SlackShareRequest) -> None:
        """Post a share card; request fields override what is stored."""
        config = await self.config_store.get(client_id)
        if config.slack is None:
            raise IntegrationNotConfiguredError("Slack")

        if request.validation_score is not None:
            score = request.validation_score
        else:
            score = overall_score(CanonicalSpec.coerce(spec.canonical_spec))
        blocks = SlackAdapter.build_share_blocks(
            spec_id=spec.id,
            title=request.title or spec.title,
            summary=request.summary if request.summary is not None else spec.summary,
            status=request.status or spec.status,
            event_count=request.event_count if request.event_count is not None else spec.event_count,
            validation_score=score,
            frontend_url=self.frontend_url,
        )
        if not await self.slack.push_blocks(config.slack, blocks):
            raise IntegrationError("Failed to send to Slack")

    async def create_jira_ticket(self, client_id: str, spec: StoredSpec) -> JiraIssue:
        """Create a Task in the configured project from a stored spec."""
        config = await self.config_store.get(client_id)
        if config.jira is None:
            raise IntegrationNotConfiguredError("Jira")

        title = (spec.canonical_spec.get("metadata") or {}).get("title") or f"Spec {spec.id}"
        description = JiraAdapter.format_description(spec.markdown_spec, spec.id, spec.status)
        return await self.jira.create_issue(config.jira, title, description)
