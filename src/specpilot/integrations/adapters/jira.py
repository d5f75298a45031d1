"""Jira sink adapter: creates issues in Jira Cloud via the REST v3 API."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from specpilot.errors.exceptions import IntegrationError
from specpilot.integrations.adapters.base import SinkAdapter
from specpilot.models.integration import JiraConfig

logger = logging.getLogger(__name__)

ISSUE_TYPE = "Task"


@dataclass(frozen=True)
class JiraIssue:
    key: str
    id: str
    url: str


class JiraAdapter(SinkAdapter):
    """Creates issues in Jira Cloud using Basic auth (email + API token)."""

    adapter_type: str = "jira"

    # ------------------------------------------------------------------
    # Connection test
    # ------------------------------------------------------------------

    async def test_connection(self, config: JiraConfig) -> bool:
        """Verify credentials and project by calling ``/rest/api/3/project/{key}``.

        Returns:
            True if Jira responds with 200.
        """
        url = f"{config.base_url}/rest/api/3/project/{config.project_key}"
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(url, headers=config.auth_headers(), timeout=self.timeout)
            if response.status_code == 200:
                logger.info("Jira connection test succeeded for project %s", config.project_key)
                return True
            logger.warning(
                "Jira connection test returned %s for project %s",
                response.status_code,
                config.project_key,
            )
            return False
        except httpx.HTTPError as exc:
            logger.error("Jira connection test failed for %s: %s", config.base_url, exc)
            return False

    # ------------------------------------------------------------------
    # Issues
    # ------------------------------------------------------------------

    async def create_issue(self, config: JiraConfig, summary: str, description: str) -> JiraIssue:
        """POST ``/rest/api/3/issue``; raises IntegrationError unless Jira answers 2xx."""
        url = f"{config.base_url}/rest/api/3/issue"
        headers = {**config.auth_headers(), "Content-Type": "application/json"}
        payload = {
            "fields": {
                "project": {"key": config.project_key},
                "summary": summary,
                "description": description,
                "issuetype": {"name": ISSUE_TYPE},
            }
        }

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(url, json=payload, headers=headers, timeout=self.timeout)
        except httpx.HTTPError as exc:
            logger.error("Jira issue creation failed for %s: %s", config.base_url, exc)
            raise IntegrationError("Error calling Jira API", details={"reason": str(exc)}) from exc

        if not response.is_success:
            logger.warning(
                "Jira issue creation returned %s for project %s: %s",
                response.status_code,
                config.project_key,
                response.text[:500],
            )
            raise IntegrationError(
                "Failed to create Jira issue",
                details={"status": response.status_code},
            )

        data = response.json()
        key = data.get("key", "")
        issue = JiraIssue(key=key, id=str(data.get("id", "")), url=config.browse_url(key))
        logger.info("Jira issue %s created in project %s", issue.key, config.project_key)
        return issue

    @staticmethod
    def format_description(markdown: str | None, spec_id: str, status: str) -> str:
        """Spec markdown followed by a provenance footer."""
        return (
            (markdown or "")
            + f"\n\n---\nGenerated by SpecPilot\nSpec ID: {spec_id}\nStatus: {status}"
        )
