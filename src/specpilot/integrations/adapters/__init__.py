"""Outbound sink adapters."""

from specpilot.integrations.adapters.base import SinkAdapter
from specpilot.integrations.adapters.jira import JiraAdapter, JiraIssue
from specpilot.integrations.adapters.slack import SlackAdapter

__all__ = ["JiraAdapter", "JiraIssue", "SinkAdapter", "SlackAdapter"]
