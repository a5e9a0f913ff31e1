"""Slash commands for role holders and staff."""
