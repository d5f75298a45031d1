"""Slack and Jira integrations."""
