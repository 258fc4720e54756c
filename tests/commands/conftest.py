"""Fixtures for command tests: an isolated config and a store over a fake gateway."""

from __future__ import annotations

from contextlib import asynccontextmanager

import pytest

from tempus_cli.services.task_store import TaskStore


@pytest.fixture()
def cli_env(tmp_config, monkeypatch):
    """Signed in through ``TEMPUS_TOKEN`` with config files under tmp_path."""
    monkeypatch.setenv("TEMPUS_TOKEN", "test-token")
    return tmp_config


@pytest.fixture()
def store(gateway, cli_env, monkeypatch):
    """The TaskStore every ``build_session()`` in the command modules yields."""
    task_store = TaskStore(gateway)

    @asynccontextmanager
    async def fake_session():
        yield task_store

    monkeypatch.setattr("tempus_cli.commands.tasks.build_session", fake_session)
    monkeypatch.setattr("tempus_cli.commands.lists.build_session", fake_session)
    return task_store
