"""Slack sink adapter: status updates and spec share cards via incoming webhooks."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx

from specpilot.integrations.adapters.base import SinkAdapter
from specpilot.models.integration import SlackConfig

logger = logging.getLogger(__name__)

TEST_MESSAGE = "✅ SpecPilot Slack integration connected."


class SlackAdapter(SinkAdapter):
    """Posts messages to a Slack incoming webhook.

    Slack webhooks are pre-authenticated; no auth headers are required.
    """

    adapter_type: str = "slack"

    # ------------------------------------------------------------------
    # Connection test
    # ------------------------------------------------------------------

    async def test_connection(self, config: SlackConfig) -> bool:
        """Send the connection ping to the webhook.

        Returns:
            True if Slack responds with 200.
        """
        return await self._post(config, {"text": TEST_MESSAGE}, context="connection test")

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def push_text(self, config: SlackConfig, text: str) -> bool:
        return await self._post(config, {"text": text}, context="status update")

    async def push_blocks(self, config: SlackConfig, blocks: list[dict]) -> bool:
        return await self._post(config, {"blocks": blocks}, context="share card")

    async def _post(self, config: SlackConfig, payload: dict, *, context: str) -> bool:
        if config.channel:
            payload = {**payload, "channel": config.channel}
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(config.webhook_url, json=payload, timeout=self.timeout)
            if response.status_code == 200:
                logger.info("Slack %s delivered", context)
                return True
            logger.warning(
                "Slack %s returned %s: %s",
                context,
                response.status_code,
                response.text[:200],
            )
            return False
        except httpx.HTTPError as exc:
            logger.error("Slack %s failed: %s", context, exc)
            return False

    # ------------------------------------------------------------------
    # Message builders
    # ------------------------------------------------------------------

    @staticmethod
    def build_status_text(spec_id: str, title: str, status: str, summary: str = "") -> str:
        """Plain mrkdwn text posted when a spec is saved or reviewed."""
        text = (
            "\U0001f4c4 *SpecPilot Update*\n"
            f"• *Title:* {title}\n"
            f"• *Status:* {status}\n"
            f"• *Spec ID:* {spec_id}\n"
        )
        if summary:
            text += f"• *Summary:* {summary}"
        return text

    @staticmethod
    def build_share_blocks(
        *,
        spec_id: str,
        title: str,
        summary: str,
        status: str,
        event_count: int,
        validation_score: int,
        frontend_url: str,
        shared_at: datetime | None = None,
    ) -> list[dict]:
        """Block Kit card linking back to the spec in the web client."""
        shared_at = shared_at or datetime.now(timezone.utc)
        return [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": "\U0001f4cb SpecPilot Specification", "emoji": True},
            },
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"*<{frontend_url}?spec={spec_id}|{title}>*\n{summary or '_No summary provided_'}",
                },
            },
            {"type": "divider"},
            {
                "type": "section",
                "fields": [
                    {"type": "mrkdwn", "text": f"*Status:*\n{status[:1].upper() + status[1:]}"},
                    {"type": "mrkdwn", "text": f"*Events:*\n{event_count}"},
                    {"type": "mrkdwn", "text": f"*Validation Score:*\n{validation_score}/100"},
                    {"type": "mrkdwn", "text": f"*Spec ID:*\n`{spec_id}`"},
                ],
            },
            {
                "type": "context",
                "elements": [
                    {
                        "type": "mrkdwn",
                        "text": f"Shared via SpecPilot • {shared_at.strftime('%Y-%m-%d %H:%M UTC')}",
                    }
                ],
            },
        ]
