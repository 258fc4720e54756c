"""Tempus CLI - task and calendar client for the Tempus API."""

__version__ = "0.3.0"
