"""Tests for organization creation and deletion."""

import asyncio

import pytest

from neo_authz.core.exceptions import (
    AuthorizationServiceError,
    OrganizationAlreadyExistsError,
    OrganizationError,
    OrganizationValidationError,
)
from neo_authz.features.organizations.services.organization_service import OrganizationService
from neo_authz.features.resources.entities.resource import Resource
from neo_authz.features.resources.entities.resource_type import ResourceType, get_scopes_for_type


class TestOrganizationService:
    """Test Group resource creation with compensating rollback."""

    @pytest.fixture
    def service(self, fake_client):
        return OrganizationService(fake_client, external_call_timeout=1.0)

    @pytest.mark.asyncio
    async def test_create_generates_alias_and_grants_owner(self, service, fake_client):
        organization = await service.create_organization("Acme Corp", "user-1")

        assert organization.alias == "acme-corp"
        assert organization.title == "Acme Corp"
        assert organization.owner_id == "user-1"
        resource = fake_client.resources["acme-corp"]
        assert resource.scopes == get_scopes_for_type(ResourceType.GROUP)
        assert resource.attributes == {"type": ["group"], "ownerId": ["user-1"]}
        assert fake_client.permissions["acme-corp"] == "user-1"

    @pytest.mark.asyncio
    async def test_create_with_explicit_alias(self, service, fake_client):
        organization = await service.create_organization("Acme Corp", "user-1", alias="acme")

        assert organization.alias == "acme"
        assert "acme" in fake_client.resources

    @pytest.mark.asyncio
    async def test_invalid_input_makes_no_calls(self, service, fake_client):
        with pytest.raises(OrganizationValidationError):
            await service.create_organization("", "user-1")
        with pytest.raises(OrganizationValidationError):
            await service.create_organization("Acme", "user-1", alias="Bad Alias")

        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_existing_alias_rejected(self, service, fake_client):
        fake_client.resources["acme-corp"] = Resource("acme-corp", "Group: acme-corp", ["view"], {"type": ["group"]})

        with pytest.raises(OrganizationAlreadyExistsError):
            await service.create_organization("Acme Corp", "user-1")

        assert fake_client.calls_to("create_resource") == []

    @pytest.mark.asyncio
    async def test_alias_check_failure_continues(self, service, fake_client):
        fake_client.failures["get_resource"] = AuthorizationServiceError("keycloak unavailable")

        organization = await service.create_organization("Acme Corp", "user-1")

        assert organization.alias == "acme-corp"

    @pytest.mark.asyncio
    async def test_create_resource_failure(self, service, fake_client):
        fake_client.failures["create_resource"] = AuthorizationServiceError("keycloak unavailable")

        with pytest.raises(OrganizationError, match="Failed to create organization"):
            await service.create_organization("Acme Corp", "user-1")

        assert fake_client.calls_to("create_permission") == []
        assert fake_client.calls_to("delete_resource") == []

    @pytest.mark.asyncio
    async def test_grant_failure_rolls_back_resource(self, service, fake_client):
        cause = AuthorizationServiceError("policy rejected")
        fake_client.failures["create_permission"] = cause

        with pytest.raises(OrganizationError) as exc_info:
            await service.create_organization("Acme Corp", "user-1")

        assert exc_info.value.__cause__ is cause
        assert "acme-corp" not in fake_client.resources
        assert fake_client.calls_to("delete_resource") == [("acme-corp",)]

    @pytest.mark.asyncio
    async def test_rollback_failure_still_raises_original(self, service, fake_client):
        fake_client.failures["create_permission"] = AuthorizationServiceError("policy rejected")
        fake_client.failures["delete_resource"] = AuthorizationServiceError("keycloak unavailable")

        with pytest.raises(OrganizationError, match="policy rejected"):
            await service.create_organization("Acme Corp", "user-1")

    @pytest.mark.asyncio
    async def test_timeout_during_grant_rolls_back(self, fake_client):
        service = OrganizationService(fake_client, external_call_timeout=0.01)

        async def slow_grant(*args):
            await asyncio.sleep(1)

        fake_client.create_permission = slow_grant

        with pytest.raises(OrganizationError, match="Timed out"):
            await service.create_organization("Acme Corp", "user-1")

        assert "acme-corp" not in fake_client.resources

    @pytest.mark.asyncio
    async def test_delete_organization(self, service, fake_client):
        fake_client.resources["acme"] = Resource("acme", "Group: acme", [], {})

        await service.delete_organization("acme")
        await service.delete_organization("acme")

        assert "acme" not in fake_client.resources

    @pytest.mark.asyncio
    async def test_delete_failure(self, service, fake_client):
        fake_client.failures["delete_resource"] = AuthorizationServiceError("keycloak unavailable")

        with pytest.raises(OrganizationError):
            await service.delete_organization("acme")
