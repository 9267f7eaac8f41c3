"""
Shared configuration management for the Frontegg client.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


CLIENT_ID_ENV_NAME = "FRONTEGG_CLIENT_ID"
CLIENT_SECRET_ENV_NAME = "FRONTEGG_CLIENT_SECRET_KEY"
TENANT_ID_ENV_NAME = "FRONTEGG_TENANT_ID"


class FronteggSettings(BaseSettings):
    """Environment backed settings, overridden by explicit constructor values."""

    model_config = SettingsConfigDict(
        env_prefix="FRONTEGG_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True
    )

    # Credentials
    client_id: Optional[str] = None
    client_secret: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(CLIENT_SECRET_ENV_NAME, "FRONTEGG_CLIENT_SECRET")
    )
    tenant_id: Optional[str] = None

    # Vendor API
    api_base_url: str = "https://api.frontegg.com"
    api_version: str = "v1.0"
    disable_cors: bool = False

    # Transport
    http_timeout: float = 10.0
    http_max_retries: int = 3
    http_retry_base_delay: float = 0.5

    # Logging
    log_level: str = "info"

    # Proxy service caller tokens
    jwt_key: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_audience: Optional[str] = None
    jwt_issuer: Optional[str] = None
    jwt_tenant_claim: str = "tenantId"

    # Proxy service
    host: str = "0.0.0.0"
    port: int = 8080
    env: str = "local"


def get_settings(**overrides) -> FronteggSettings:
    """Load settings from the environment, applying every override that is not None."""
    return FronteggSettings(**{k: v for k, v in overrides.items() if v is not None})
