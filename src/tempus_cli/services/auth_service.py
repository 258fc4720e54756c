"""Identity collaborators used to authenticate gateway requests.

The hosted identity provider issues the token; Tempus CLI only reads it back
from token storage. Sign-up, password reset and token refresh happen in the
provider's own flows and are not driven from here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from tempus_cli.models import UserHandle
from tempus_cli.services.config_service import ConfigService, get_config_service


class IdentityProvider(ABC):
    """Source of the bearer token and the signed-in user."""

    @abstractmethod
    def get_token(self) -> str | None:
        """Return the current access token, or None when signed out."""

    @abstractmethod
    def get_current_user(self) -> UserHandle | None:
        """Return the signed-in user, or None when signed out."""


class StoredCredentialsIdentity(IdentityProvider):
    """Identity backed by the credentials file kept by ConfigService."""

    def __init__(self, config_service: ConfigService | None = None):
        self.config_service = config_service or get_config_service()

    def get_token(self) -> str | None:
        credentials = self.config_service.load_credentials()
        if not credentials:
            return None
        return credentials.get("token") or None

    def get_current_user(self) -> UserHandle | None:
        credentials = self.config_service.load_credentials()
        if not credentials or not credentials.get("token"):
            return None
        return UserHandle(
            user_id=credentials.get("user_id"),
            email=credentials.get("email"),
        )


class StaticTokenIdentity(IdentityProvider):
    """Identity with a fixed token, e.g. from the ``TEMPUS_TOKEN`` variable."""

    def __init__(self, token: str | None, user: UserHandle | None = None):
        self._token = token
        self._user = user

    def get_token(self) -> str | None:
        return self._token

    def get_current_user(self) -> UserHandle | None:
        if not self._token:
            return None
        return self._user or UserHandle()


class AuthService:
    """Service for handling authentication-related operations."""

    def __init__(self, config_service: ConfigService | None = None):
        self.config_service = config_service or get_config_service()

    def login(
        self, token: str, *, user_id: str | None = None, email: str | None = None
    ) -> UserHandle:
        """Store a token issued by the identity provider."""
        self.config_service.save_credentials(token, user_id=user_id, email=email)
        return UserHandle(user_id=user_id, email=email)

    def logout(self) -> None:
        self.config_service.clear_credentials()

    def is_authenticated(self) -> bool:
        """Check if the user is authenticated."""
        return StoredCredentialsIdentity(self.config_service).get_token() is not None
