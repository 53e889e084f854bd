"""Settings for the neo-authz authorization core.

Values are read from the environment (prefix ``NEO_AUTHZ_``) or a ``.env``
file. Services embedding the library may subclass AuthzSettings.
"""

import re
from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthzSettings(BaseSettings):
    """Settings for the external authorization service, the store and the sync guard."""

    model_config = SettingsConfigDict(
        env_prefix="NEO_AUTHZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Keycloak
    keycloak_server_url: str = Field(default="http://localhost:8080")
    keycloak_realm: str = Field(default="neo")
    keycloak_client_id: str = Field(default="neo-authz")
    keycloak_client_secret: SecretStr = Field(default=SecretStr(""))
    keycloak_verify_ssl: bool = Field(default=True)

    # Transactional store
    database_url: str = Field(default="postgresql://localhost:5432/neo")
    db_pool_min_size: int = Field(default=2, ge=1)
    db_pool_max_size: int = Field(default=10, ge=1)
    resource_index_table: str = Field(default="resource_index")

    # Sync guard; no Redis means an in-process cooldown store
    redis_url: Optional[str] = Field(default=None)
    sync_failure_cooldown: float = Field(default=300.0, gt=0)

    # One deadline for chained external calls (create + grant)
    external_call_timeout: float = Field(default=30.0, gt=0)

    @field_validator("keycloak_server_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("resource_index_table")
    @classmethod
    def validate_table_name(cls, value: str) -> str:
        if not re.match(r"^[a-z_][a-z0-9_]*(\.[a-z_][a-z0-9_]*)?$", value):
            raise ValueError(f"Invalid table name: {value}")
        return value


@lru_cache()
def get_settings() -> AuthzSettings:
    """Get cached settings instance."""
    return AuthzSettings()
