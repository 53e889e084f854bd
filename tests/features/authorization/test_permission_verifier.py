"""Tests for permission checks and the self-healing retry."""

from unittest.mock import AsyncMock

import pytest

from neo_authz.core.exceptions import (
    AuthorizationServiceError,
    InvalidScopeError,
    ResourceSyncError,
)
from neo_authz.features.authorization.entities.permission_check import PermissionCheck
from neo_authz.features.authorization.services.authorization_service import AuthorizationService
from neo_authz.features.authorization.services.permission_verifier import PermissionVerifier
from neo_authz.features.authorization.services.self_healing import SelfHealingSynchronizer
from neo_authz.features.resources.services.resource_resolver import ResourceTypeResolver


class TestPermissionVerifier:
    """Test the thin check wrapper."""

    @pytest.fixture
    def client(self):
        return AsyncMock()

    @pytest.fixture
    def verifier(self, client):
        return PermissionVerifier(client)

    @pytest.mark.asyncio
    async def test_granted(self, verifier, client):
        client.check_permission.return_value = True

        assert await verifier.check_permission("token", "res-1", "view") is True
        client.check_permission.assert_awaited_once_with("token", "res-1", "view")

    @pytest.mark.asyncio
    async def test_denied(self, verifier, client):
        client.check_permission.return_value = False

        assert await verifier.check_permission("token", "res-1", "view") is False

    @pytest.mark.asyncio
    async def test_service_error_is_raised_not_denied(self, verifier, client):
        client.check_permission.side_effect = AuthorizationServiceError("503 Service Unavailable")

        with pytest.raises(AuthorizationServiceError):
            await verifier.check_permission("token", "res-1", "view")

    @pytest.mark.asyncio
    async def test_requires_token(self, verifier, client):
        with pytest.raises(ValueError):
            await verifier.check_permission("", "res-1", "view")
        client.check_permission.assert_not_called()

    @pytest.mark.asyncio
    async def test_check_returns_both_halves(self, verifier, client):
        client.check_permission.return_value = False
        result = await verifier.check("token", "res-1", "view")
        assert result.denied
        assert result.error is None

        error = InvalidScopeError("invalid_scope")
        client.check_permission.side_effect = error
        result = await verifier.check("token", "res-1", "view")
        assert not result.granted
        assert not result.denied
        assert result.error is error


class TestAuthorizationService:
    """Test verify_with_healing against the in-memory service."""

    @pytest.fixture
    def synchronizer(self, entity_stores, fake_client):
        return SelfHealingSynchronizer(ResourceTypeResolver(entity_stores, fake_client), fake_client)

    @pytest.fixture
    def service(self, fake_client, synchronizer):
        return AuthorizationService(PermissionVerifier(fake_client), synchronizer)

    @pytest.mark.asyncio
    async def test_granted_without_sync(self, service, fake_client, sample_bot):
        resource_id = str(sample_bot.id)
        fake_client.decisions[(resource_id, "view")] = True

        assert await service.verify_with_healing("token", resource_id, "view") is True
        assert fake_client.calls_to("sync_resource_scopes") == []

    @pytest.mark.asyncio
    async def test_denial_heals_and_retries_once(self, service, fake_client, sample_bot):
        resource_id = str(sample_bot.id)
        original_sync = fake_client.sync_resource_scopes

        async def sync_then_grant(*args):
            await original_sync(*args)
            fake_client.decisions[(resource_id, "run")] = True

        fake_client.sync_resource_scopes = sync_then_grant

        assert await service.verify_with_healing("token", resource_id, "run", user_id="user-1") is True
        assert len(fake_client.calls_to("check_permission")) == 2
        assert len(fake_client.calls_to("sync_resource_scopes")) == 1

    @pytest.mark.asyncio
    async def test_denial_after_heal_stays_denied(self, service, fake_client, sample_bot):
        resource_id = str(sample_bot.id)

        assert await service.verify_with_healing("token", resource_id, "run") is False
        assert len(fake_client.calls_to("check_permission")) == 2
        assert len(fake_client.calls_to("sync_resource_scopes")) == 1

    @pytest.mark.asyncio
    async def test_unrelated_service_error_skips_heal(self, service, fake_client, sample_bot):
        fake_client.failures["check_permission"] = AuthorizationServiceError("connection refused")

        with pytest.raises(AuthorizationServiceError, match="connection refused"):
            await service.verify_with_healing("token", str(sample_bot.id), "view")

        assert fake_client.calls_to("sync_resource_scopes") == []

    @pytest.mark.asyncio
    async def test_failed_heal_on_plain_denial_returns_false(self, service, fake_client, sample_bot):
        fake_client.failures["sync_resource_scopes"] = AuthorizationServiceError("keycloak unavailable")

        assert await service.verify_with_healing("token", str(sample_bot.id), "view") is False
        assert len(fake_client.calls_to("check_permission")) == 1

    @pytest.mark.asyncio
    async def test_failed_heal_on_invalid_scope_raises_original(self, fake_client):
        error = InvalidScopeError("invalid_scope: view")
        verifier = AsyncMock()
        verifier.check.return_value = PermissionCheck("acme-corp", "view", granted=False, error=error)
        synchronizer = AsyncMock()
        synchronizer.sync.side_effect = ResourceSyncError("sync failed")
        service = AuthorizationService(verifier, synchronizer)

        with pytest.raises(InvalidScopeError) as exc_info:
            await service.verify_with_healing("token", "acme-corp", "view")

        assert exc_info.value is error
        verifier.check_permission.assert_not_called()
