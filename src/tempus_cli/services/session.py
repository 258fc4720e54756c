"""Per-invocation wiring of identity, gateway and store."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from tempus_cli.adapters.rest_api import RestApiGateway
from tempus_cli.repositories import TaskGateway
from tempus_cli.services.api.client import APIClient
from tempus_cli.services.auth_service import (
    IdentityProvider,
    StaticTokenIdentity,
    StoredCredentialsIdentity,
)
from tempus_cli.services.config_service import ConfigService, get_config_service
from tempus_cli.services.task_store import TaskStore

TOKEN_ENV_VAR = "TEMPUS_TOKEN"


def get_identity(config_service: ConfigService | None = None) -> IdentityProvider:
    """``TEMPUS_TOKEN`` wins over the stored credentials file."""
    token = os.environ.get(TOKEN_ENV_VAR)
    if token:
        return StaticTokenIdentity(token)
    return StoredCredentialsIdentity(config_service)


@asynccontextmanager
async def build_session(
    gateway: TaskGateway | None = None,
    config_service: ConfigService | None = None,
) -> AsyncIterator[TaskStore]:
    """Yield a fresh TaskStore and close its gateway afterwards."""
    config_service = config_service or get_config_service()
    config = config_service.config
    if gateway is None:
        client = APIClient(identity=get_identity(config_service), config_service=config_service)
        gateway = RestApiGateway(client)

    store = TaskStore(
        gateway,
        min_event_minutes=config.calendar.min_event_minutes,
        palette_seed=config.lists.palette_seed,
    )
    try:
        yield store
    finally:
        await gateway.close()
