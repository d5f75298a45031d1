"""Per-client Slack and Jira integration settings."""

from __future__ import annotations

import base64

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class SlackConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    webhook_url: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("webhook_url", "webhookUrl")
    )
    channel: str | None = None

    @field_validator("webhook_url")
    @classmethod
    def _http_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("webhook_url must be an http(s) URL")
        return value


class JiraConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    base_url: str = Field(..., min_length=1, validation_alias=AliasChoices("base_url", "baseUrl"))
    email: str = Field(..., min_length=1)
    api_token: str = Field(..., min_length=1, validation_alias=AliasChoices("api_token", "apiToken"))
    project_key: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("project_key", "projectKey")
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def auth_headers(self) -> dict[str, str]:
        """Basic-auth headers (email + API token) for Jira Cloud."""
        token = base64.b64encode(f"{self.email}:{self.api_token}".encode()).decode()
        return {"Authorization": f"Basic {token}", "Accept": "application/json"}

    def browse_url(self, issue_key: str) -> str:
        return f"{self.base_url}/browse/{issue_key}"


class IntegrationConfig(BaseModel):
    """Everything stored for one client; either part may be absent."""

    slack: SlackConfig | None = None
    jira: JiraConfig | None = None


class IntegrationStatus(BaseModel):
    """Which integrations are configured, without secrets."""

    slack: bool = False
    jira: bool = False
