"""Configuration service for managing Tempus CLI configuration.

This module provides the ConfigService class, the single source of truth for
configuration and stored credentials. It handles:

- Loading and saving config.json
- Dot-separated key access (``api.timeout``, ``calendar.min_event_minutes``)
- The credentials file that backs the identity provider's token storage
"""

from __future__ import annotations

import json
from functools import lru_cache
from json import JSONDecodeError
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from tempus_cli.exceptions import ValidationError
from tempus_cli.models.config_models import AppConfig


class ConfigService:
    """Service for managing application configuration.

    Configuration lives in ``config.json`` under the platform config directory;
    credentials live in a separate owner-only file under the data directory.
    """

    def __init__(self):
        """Initialize the config service."""

        self.config_dir = Path(user_config_dir("tempus_cli"))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir("tempus_cli"))
        self.credentials_path = self.data_dir / "credentials.json"

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config  # Return cached config if already loaded

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run: write the defaults so users can find and edit them
            self._config = AppConfig()
            self.save_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to storage."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))

            self.config_path.chmod(0o600)
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        value: Any = self.config
        for k in key.split("."):
            if isinstance(value, BaseModel) and k in type(value).model_fields:
                value = getattr(value, k)
            else:
                raise KeyError(key)
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key and persist it."""
        self.get(key)  # raises KeyError for unknown keys

        keys = key.split(".")
        config_dict = self.config.model_dump()
        current = config_dict
        for k in keys[:-1]:
            current = current[k]
        current[keys[-1]] = value

        try:
            self._config = AppConfig.model_validate(config_dict)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid value for {key}: {e.errors()[0]['msg']}"
            ) from e
        self.save_config()

    def reset(self, key: str | None = None) -> None:
        """Reset the whole configuration, or one key, to defaults."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
            return

        default_value: Any = AppConfig()
        for k in key.split("."):
            if isinstance(default_value, BaseModel) and k in type(default_value).model_fields:
                default_value = getattr(default_value, k)
            else:
                raise KeyError(key)
        if isinstance(default_value, BaseModel):
            default_value = default_value.model_dump()
        self.set(key, default_value)

    def load_credentials(self) -> dict | None:
        """Load stored credentials.

        Returns:
            dict with 'token' and optionally 'user_id' / 'email', or None
        """
        if not self.credentials_path.exists():
            return None

        try:
            with open(self.credentials_path, encoding="utf-8") as f:
                return json.load(f)
        except JSONDecodeError:
            return None

    def save_credentials(
        self,
        access_token: str,
        user_id: str | None = None,
        email: str | None = None,
    ) -> None:
        """Save credentials issued by the identity provider.

        Args:
            access_token: The access token (JWT)
            user_id: Optional identity-provider user id
            email: Optional user email
        """
        cred_data = {"token": access_token}
        if user_id:
            cred_data["user_id"] = user_id
        if email:
            cred_data["email"] = email

        self.credentials_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.credentials_path, "w", encoding="utf-8") as f:
            json.dump(cred_data, f, indent=2)

        # Set secure file permissions
        self.credentials_path.chmod(0o600)

    def clear_credentials(self) -> None:
        """Remove stored credentials."""
        if self.credentials_path.exists():
            self.credentials_path.unlink()


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
