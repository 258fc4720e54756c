"""Configuration models for Tempus CLI."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_ENDPOINT = "https://0olevx3qah.execute-api.us-east-1.amazonaws.com"


class APIConfig(BaseModel):
    """API configuration."""

    endpoint: str = Field(default=DEFAULT_ENDPOINT)
    timeout: int = Field(default=30)
    retry: int = Field(default=0, ge=0)  # failed connects only, never timeouts or HTTP errors

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("endpoint cannot be empty")
        return v.strip().rstrip("/")


class CalendarConfig(BaseModel):
    """Calendar and scheduling configuration."""

    min_event_minutes: int = Field(default=60, gt=0)


class ListsConfig(BaseModel):
    """List configuration."""

    palette_seed: int | None = Field(default=None)


class OutputConfig(BaseModel):
    """Output configuration."""

    format: Literal["pretty", "table", "json", "yaml"] = Field(default="pretty")


class AppConfig(BaseModel):
    """Main Tempus configuration"""

    api: APIConfig = Field(default_factory=APIConfig)
    calendar: CalendarConfig = Field(default_factory=CalendarConfig)
    lists: ListsConfig = Field(default_factory=ListsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
