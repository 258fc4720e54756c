"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from the real config, credentials and
log directories, plus factories for tasks, lists and a fake gateway.
"""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock, patch

import pytest

from tempus_cli.models import Task, TaskList
from tempus_cli.repositories import TaskGateway


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolate_environment(tmp_path, monkeypatch):
    """Send logs to tmp_path and make sure no real token leaks in."""
    import tempus_cli.utils.logger as logger_module

    monkeypatch.delenv("TEMPUS_TOKEN", raising=False)
    logger_module._logger = None
    with patch("tempus_cli.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield

    app_logger = logging.getLogger("tempus_cli")
    for handler in list(app_logger.handlers):
        handler.close()
        app_logger.removeHandler(handler)
    logger_module._logger = None


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance, and
    ``get_config_service()`` called anywhere during the test builds one here.
    """
    from tempus_cli.services.config_service import ConfigService, get_config_service

    tmpdir = str(tmp_path / "config")
    get_config_service.cache_clear()
    with patch("tempus_cli.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("tempus_cli.services.config_service.user_data_dir", return_value=tmpdir):
            yield ConfigService()
    get_config_service.cache_clear()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_task():
    """Factory for server-shaped tasks."""

    def _make(task_id: str = "1", **fields) -> Task:
        data = {"task_id": task_id, "task_name": f"Task {task_id}", "user_id": "u1"}
        data.update(fields)
        return Task.model_validate(data)

    return _make


@pytest.fixture()
def make_list():
    """Factory for server-shaped lists."""

    def _make(list_id: str = "10", **fields) -> TaskList:
        data = {
            "list_id": list_id,
            "list_name": f"List {list_id}",
            "list_icon": "📋",
            "list_color": "#FF6B6B",
        }
        data.update(fields)
        return TaskList.model_validate(data)

    return _make


@pytest.fixture()
def gateway():
    """A TaskGateway whose every method is an AsyncMock."""
    return AsyncMock(spec=TaskGateway)
