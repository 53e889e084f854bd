"""Pytest configuration and fixtures for neo-authz tests."""

import asyncio
from typing import Dict, List, Optional, Tuple

import pytest

from neo_authz.core.exceptions import AuthorizationServiceError, ResourceNotFoundError
from neo_authz.features.resources.entities.resource import DomainEntity, Resource
from neo_authz.features.resources.entities.resource_type import ResourceType
from neo_authz.features.resources.repositories.memory_entity_store import (
    InMemoryEntityStore,
    InMemoryResourceIndex,
    InMemoryTransactionManager,
)


class FakeAuthorizationClient:
    """In-memory authorization service that records every call.

    Set ``failures[operation]`` to an exception to make that operation raise,
    ``decisions[(resource_id, scope)]`` to control check results, and
    ``sync_delay`` to keep upserts in flight.
    """

    def __init__(self):
        self.resources: Dict[str, Resource] = {}
        self.permissions: Dict[str, str] = {}
        self.decisions: Dict[Tuple[str, str], bool] = {}
        self.failures: Dict[str, Exception] = {}
        self.calls: List[Tuple[str, tuple]] = []
        self.sync_delay: float = 0.0

    def calls_to(self, operation: str) -> List[tuple]:
        return [args for name, args in self.calls if name == operation]

    def _record(self, operation: str, *args) -> None:
        self.calls.append((operation, args))
        error = self.failures.get(operation)
        if error is not None:
            raise error

    async def create_resource(self, resource_id, name, scopes, attributes):
        self._record("create_resource", resource_id, name, list(scopes), dict(attributes))
        if resource_id in self.resources:
            raise AuthorizationServiceError(f"Resource {resource_id} already exists")
        self.resources[resource_id] = Resource(resource_id, name, list(scopes), dict(attributes))

    async def sync_resource_scopes(self, resource_id, name, scopes, attributes):
        self._record("sync_resource_scopes", resource_id, name, list(scopes), dict(attributes))
        if self.sync_delay:
            await asyncio.sleep(self.sync_delay)
        self.resources[resource_id] = Resource(resource_id, name, list(scopes), dict(attributes))

    async def delete_resource(self, resource_id):
        self._record("delete_resource", resource_id)
        self.resources.pop(resource_id, None)
        self.permissions.pop(resource_id, None)

    async def get_resource(self, resource_id):
        self._record("get_resource", resource_id)
        resource = self.resources.get(resource_id)
        if resource is None:
            raise ResourceNotFoundError(f"Resource with id [{resource_id}] does not exist.")
        return resource

    async def create_permission(self, resource_id, owner_id):
        self._record("create_permission", resource_id, owner_id)
        self.permissions[resource_id] = owner_id

    async def check_permission(self, caller_token, resource_id, scope):
        self._record("check_permission", caller_token, resource_id, scope)
        return self.decisions.get((resource_id, scope), False)


@pytest.fixture
def fake_client():
    """Recording in-memory authorization service."""
    return FakeAuthorizationClient()


@pytest.fixture
def transaction_manager():
    return InMemoryTransactionManager()


@pytest.fixture
def resource_index():
    return InMemoryResourceIndex()


@pytest.fixture
def entity_stores() -> Dict[ResourceType, InMemoryEntityStore]:
    """One empty in-memory store per domain type."""
    return {
        ResourceType.BOT: InMemoryEntityStore(),
        ResourceType.STRATEGY: InMemoryEntityStore(),
        ResourceType.EXCHANGE: InMemoryEntityStore(),
        ResourceType.RUNNER: InMemoryEntityStore(),
    }


@pytest.fixture
def sample_bot(entity_stores) -> DomainEntity:
    """A public bot seeded into the bot store."""
    return entity_stores[ResourceType.BOT].seed(DomainEntity(name="Alpha", owner_id="user-1", public=True))


@pytest.fixture
def sample_exchange(entity_stores) -> DomainEntity:
    """An exchange seeded into the exchange store."""
    return entity_stores[ResourceType.EXCHANGE].seed(DomainEntity(name="Binance", owner_id="user-2"))


@pytest.fixture
def entity_factory():
    """Build create_entity callables that insert through a given store."""

    def make(store: InMemoryEntityStore, entity: Optional[DomainEntity] = None):
        entity = entity or DomainEntity(name="New", owner_id="owner-1")

        async def create_entity(tx):
            return await store.create(tx, entity)

        return create_entity

    return make
