"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class ConfigurationError(RuntimeError):
    """Raised when a required setting is missing for the requested action."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    food_db_path: str = "./food-data.sqlite3"
    omhh_api_uri: str | None = None
    omhh_api_token: str | None = None
    portion_sort_key: Literal["unit", "composite"] = "unit"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def with_overrides(self, **overrides: object) -> "Settings":
        """Return a copy where explicitly provided values take precedence."""
        update = {key: value for key, value in overrides.items() if value is not None}
        return self.model_copy(update=update)

    def require_api(self) -> tuple[str, str]:
        """Return the API base URI and token, failing if either is unset."""
        if not self.omhh_api_uri:
            raise ConfigurationError("API URI is not set (--api or OMHH_API_URI)")
        if not self.omhh_api_token:
            raise ConfigurationError(
                "API token is not set (--token or OMHH_API_TOKEN)"
            )
        return self.omhh_api_uri, self.omhh_api_token
