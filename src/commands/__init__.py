"""Slack command, action and view handlers."""
