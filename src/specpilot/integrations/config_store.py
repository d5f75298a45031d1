"""Per-client integration settings, keyed by the ``X-Client-Id`` header."""

from __future__ import annotations

from specpilot.models.integration import IntegrationConfig, IntegrationStatus, JiraConfig, SlackConfig
from specpilot.stores.base import KeyValueStore

INTEGRATIONS_NAMESPACE = "integrations"


class IntegrationConfigStore:
    def __init__(self, store: KeyValueStore):
        self.store = store

    async def get(self, client_id: str) -> IntegrationConfig:
        raw = await self.store.get(INTEGRATIONS_NAMESPACE, client_id)
        return IntegrationConfig.model_validate(raw) if raw else IntegrationConfig()

    async def _save(self, client_id: str, config: IntegrationConfig) -> None:
        await self.store.set(INTEGRATIONS_NAMESPACE, client_id, config.model_dump(mode="json"))

    async def set_slack(self, client_id: str, slack: SlackConfig) -> None:
        config = await self.get(client_id)
        config.slack = slack
        await self._save(client_id, config)

    async def set_jira(self, client_id: str, jira: JiraConfig) -> None:
        config = await self.get(client_id)
        config.jira = jira
        await self._save(client_id, config)

    async def status(self, client_id: str) -> IntegrationStatus:
        config = await self.get(client_id)
        return IntegrationStatus(slack=config.slack is not None, jira=config.jira is not None)
