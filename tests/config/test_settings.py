"""Tests for settings, logging configuration and service wiring."""

from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError

from neo_authz.config.logging_config import LoggingConfig, get_log_level_from_verbosity
from neo_authz.config.settings import AuthzSettings
from neo_authz.core.exceptions import ConfigurationError, SyncCooldownError, create_error_response
from neo_authz.factory import build_authorization_service
from neo_authz.features.authorization.repositories.memory_sync_failure_store import MemorySyncFailureStore
from neo_authz.features.authorization.repositories.redis_sync_failure_store import RedisSyncFailureStore


class TestAuthzSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("NEO_AUTHZ_REDIS_URL", raising=False)
        settings = AuthzSettings(_env_file=None)

        assert settings.external_call_timeout == 30.0
        assert settings.sync_failure_cooldown == 300.0
        assert settings.redis_url is None
        assert settings.resource_index_table == "resource_index"

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("NEO_AUTHZ_KEYCLOAK_SERVER_URL", "https://auth.example.com/")
        monkeypatch.setenv("NEO_AUTHZ_KEYCLOAK_CLIENT_SECRET", "s3cret")
        monkeypatch.setenv("NEO_AUTHZ_SYNC_FAILURE_COOLDOWN", "60")

        settings = AuthzSettings(_env_file=None)

        assert settings.keycloak_server_url == "https://auth.example.com"
        assert settings.keycloak_client_secret.get_secret_value() == "s3cret"
        assert "s3cret" not in repr(settings)
        assert settings.sync_failure_cooldown == 60.0

    def test_rejects_unsafe_index_table(self):
        with pytest.raises(ValidationError):
            AuthzSettings(_env_file=None, resource_index_table="index; DROP TABLE bots")

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValidationError):
            AuthzSettings(_env_file=None, external_call_timeout=0)


class TestLoggingConfig:
    """Test logging configuration built from the environment."""

    def test_verbosity_mapping(self):
        assert get_log_level_from_verbosity("quiet") == "ERROR"
        assert get_log_level_from_verbosity("VERBOSE") == "INFO"
        assert get_log_level_from_verbosity("unknown") == "WARNING"

    def test_log_level_overrides_verbosity(self, monkeypatch):
        monkeypatch.setenv("LOG_VERBOSITY", "QUIET")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = LoggingConfig.build_config()

        assert config["root"]["level"] == "DEBUG"
        assert config["loggers"]["neo_authz.features.authorization"]["level"] == "DEBUG"

    def test_noisy_libraries_are_quieted(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("ENABLE_SQL_LOGGING", raising=False)

        config = LoggingConfig.build_config()

        assert config["loggers"]["httpx"]["level"] == "ERROR"
        assert config["loggers"]["asyncpg"]["level"] == "WARNING"

    def test_authz_logging_can_be_disabled(self, monkeypatch):
        monkeypatch.setenv("ENABLE_AUTHZ_LOGGING", "false")

        config = LoggingConfig.build_config()

        assert "neo_authz.features.resources" not in config["loggers"]


class TestErrorResponse:
    def test_error_response_shape(self):
        error = SyncCooldownError("sync recently failed", details={"resource_id": "res-1"})

        response = create_error_response(error)

        assert response == {
            "error": {
                "code": "SyncCooldownError",
                "message": "sync recently failed",
                "details": {"resource_id": "res-1"},
                "type": "SyncCooldownError",
            }
        }


class TestBuildAuthorizationService:
    """Test wiring of the service graph."""

    @pytest.mark.asyncio
    async def test_wires_memory_failure_store(self):
        settings = AuthzSettings(_env_file=None, redis_url=None, sync_failure_cooldown=42)

        with patch("neo_authz.factory.DatabaseManager.create_pool", new=AsyncMock()), \
                patch("neo_authz.factory.AsyncPGResourceIndex.ensure_schema", new=AsyncMock()) as ensure_schema, \
                patch("neo_authz.factory.DatabaseManager.close_pool", new=AsyncMock()):
            services = await build_authorization_service(settings)
            await services.close()

        ensure_schema.assert_awaited_once()
        assert isinstance(services.failure_store, MemorySyncFailureStore)
        assert services.failure_store.cooldown_seconds == 42
        assert services.synchronizer.cooldown_seconds == 42
        assert services.lifecycle.external_call_timeout == settings.external_call_timeout
        assert services.authorization.verifier is services.verifier

    @pytest.mark.asyncio
    async def test_wires_redis_failure_store(self):
        settings = AuthzSettings(_env_file=None, redis_url="redis://localhost:6379/0")

        with patch("neo_authz.factory.DatabaseManager.create_pool", new=AsyncMock()), \
                patch("neo_authz.factory.AsyncPGResourceIndex.ensure_schema", new=AsyncMock()), \
                patch("neo_authz.factory.RedisSyncFailureStore.connect", new=AsyncMock()) as connect:
            services = await build_authorization_service(settings)

        connect.assert_awaited_once()
        assert isinstance(services.failure_store, RedisSyncFailureStore)

    @pytest.mark.asyncio
    async def test_unreachable_redis_closes_pool(self):
        settings = AuthzSettings(_env_file=None, redis_url="redis://unreachable:6379/0")
        unreachable = AsyncMock(side_effect=ConfigurationError("Redis connection failed: refused"))

        with patch("neo_authz.factory.DatabaseManager.create_pool", new=AsyncMock()), \
                patch("neo_authz.factory.AsyncPGResourceIndex.ensure_schema", new=AsyncMock()), \
                patch("neo_authz.factory.RedisSyncFailureStore.connect", new=unreachable), \
                patch("neo_authz.factory.DatabaseManager.close_pool", new=AsyncMock()) as close_pool:
            with pytest.raises(ConfigurationError):
                await build_authorization_service(settings)

        close_pool.assert_awaited_once()
