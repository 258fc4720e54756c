"""Tempus CLI command groups."""
