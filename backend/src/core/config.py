"""Application configuration using pydantic-settings."""
from functools import lru_cache
from typing import Annotated

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str
    # No migration tooling ships with the service, so missing tables are created on startup
    auto_create_tables: bool = True

    # Development mode - bypasses auth for local development
    dev_mode: bool = False

    log_level: str = "INFO"

    cors_origins: Annotated[list[str], NoDecode] = ["http://localhost:5173"]

    # Identity provider, shared with the frontend through the VITE_ prefixed variables
    auth0_domain: str = Field(
        default="",
        validation_alias=AliasChoices("auth0_domain", "VITE_AUTH0_DOMAIN"),
    )
    auth0_client_id: str = Field(
        default="",
        validation_alias=AliasChoices("auth0_client_id", "VITE_AUTH0_CLIENT_ID"),
    )
    auth0_audience: str = Field(
        default="",
        validation_alias=AliasChoices("auth0_audience", "VITE_AUTH0_AUDIENCE"),
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Accept a comma-separated string or a list of origins."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @property
    def auth0_issuer(self) -> str:
        """Expected `iss` claim of access tokens."""
        return f"https://{self.auth0_domain}/"

    @property
    def auth0_jwks_url(self) -> str:
        """URL of the identity provider's signing keys."""
        return f"https://{self.auth0_domain}/.well-known/jwks.json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
