"""Unit tests for identity providers and AuthService."""

from __future__ import annotations

from tempus_cli.models import UserHandle
from tempus_cli.services.auth_service import (
    AuthService,
    StaticTokenIdentity,
    StoredCredentialsIdentity,
)


class TestStoredCredentialsIdentity:
    def test_signed_out(self, tmp_config):
        identity = StoredCredentialsIdentity(tmp_config)
        assert identity.get_token() is None
        assert identity.get_current_user() is None

    def test_reads_stored_token_and_user(self, tmp_config):
        tmp_config.save_credentials("tok", user_id="u1", email="me@example.com")
        identity = StoredCredentialsIdentity(tmp_config)

        assert identity.get_token() == "tok"
        assert identity.get_current_user() == UserHandle(user_id="u1", email="me@example.com")

    def test_empty_token_counts_as_signed_out(self, tmp_config):
        tmp_config.credentials_path.write_text('{"token": ""}', encoding="utf-8")
        identity = StoredCredentialsIdentity(tmp_config)

        assert identity.get_token() is None
        assert identity.get_current_user() is None


class TestStaticTokenIdentity:
    def test_with_token(self):
        identity = StaticTokenIdentity("tok")
        assert identity.get_token() == "tok"
        assert identity.get_current_user() == UserHandle()

    def test_with_explicit_user(self):
        user = UserHandle(user_id="u9")
        assert StaticTokenIdentity("tok", user).get_current_user() is user

    def test_without_token(self):
        identity = StaticTokenIdentity(None)
        assert identity.get_token() is None
        assert identity.get_current_user() is None


class TestAuthService:
    def test_login_stores_credentials(self, tmp_config):
        service = AuthService(tmp_config)

        user = service.login("tok", user_id="u1", email="me@example.com")

        assert user == UserHandle(user_id="u1", email="me@example.com")
        assert service.is_authenticated()
        assert tmp_config.load_credentials()["token"] == "tok"

    def test_logout_clears_credentials(self, tmp_config):
        service = AuthService(tmp_config)
        service.login("tok")

        service.logout()

        assert not service.is_authenticated()
        assert tmp_config.load_credentials() is None
