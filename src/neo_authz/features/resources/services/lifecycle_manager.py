"""Creation and deletion of domain entities together with their resources.

There is no two-phase commit between the database and the authorization
service. On create the external calls run inside the open transaction, so
a failed registration rolls the row back. On delete the row goes first and
the resource is removed best-effort afterwards; a leftover resource has no
row behind it and resolves as a Group until it is cleaned up.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Mapping, Optional

from ....core.exceptions import (
    AuthorizationServiceError,
    EntityNotFoundError,
    InvalidResourceIdError,
    ResourceRegistrationError,
)
from ...authorization.entities.protocols import AuthorizationClient
from ..entities.protocols import EntityStore, ResourceIndex, TransactionManager
from ..entities.resource import DomainEntity, build_attributes
from ..entities.resource_type import ResourceType, display_name_for, get_scopes_for_type
from .resource_resolver import parse_resource_id

logger = logging.getLogger(__name__)

CreateEntity = Callable[[object], Awaitable[DomainEntity]]


class ResourceLifecycleManager:
    """Keeps domain entities and their mirrored resources created and deleted together."""

    def __init__(
        self,
        transaction_manager: TransactionManager,
        stores: Mapping[ResourceType, EntityStore],
        authorization_client: AuthorizationClient,
        resource_index: Optional[ResourceIndex] = None,
        external_call_timeout: float = 30.0,
    ):
        """Initialize the manager.

        Args:
            transaction_manager: Source of store transactions
            stores: Entity store per domain type
            authorization_client: Client for the authorization service
            resource_index: Optional id -> type index written with each entity
            external_call_timeout: Shared deadline in seconds for the create and grant calls
        """
        self._transactions = transaction_manager
        self._stores: Dict[ResourceType, EntityStore] = dict(stores)
        self._client = authorization_client
        self._index = resource_index
        self.external_call_timeout = external_call_timeout

    def _store_for(self, resource_type: ResourceType) -> EntityStore:
        store = self._stores.get(resource_type)
        if store is None:
            raise ValueError(f"No entity store registered for resource type: {resource_type.value}")
        return store

    async def create_with_resource(
        self,
        resource_type: ResourceType,
        create_entity: CreateEntity,
        owner_id: str,
    ) -> DomainEntity:
        """Create an entity and register its resource atomically.

        Args:
            resource_type: Domain type of the new entity
            create_entity: Coroutine function receiving the transaction handle
                and returning the persisted entity
            owner_id: User granted every scope on the new resource

        Returns:
            The created entity

        Raises:
            ResourceRegistrationError: If the resource or the owner grant could
                not be created; the entity is not persisted
        """
        if resource_type is ResourceType.GROUP:
            raise ValueError("Group resources are created through OrganizationService")

        async with self._transactions.transaction() as tx:
            entity = await create_entity(tx)
            if self._index is not None:
                await self._index.put(tx, entity.id, resource_type)
            await self._register(resource_type, entity, owner_id)

        logger.info(f"Created {resource_type.value} {entity.id} with its authorization resource")
        return entity

    async def _register(self, resource_type: ResourceType, entity: DomainEntity, owner_id: str) -> None:
        resource_id = str(entity.id)
        created = False
        try:
            async with asyncio.timeout(self.external_call_timeout):
                await self._client.create_resource(
                    resource_id,
                    display_name_for(resource_type, entity.name),
                    get_scopes_for_type(resource_type),
                    build_attributes(resource_type, owner_id, entity.public),
                )
                created = True
                await self._client.create_permission(resource_id, owner_id)
        except (AuthorizationServiceError, TimeoutError, asyncio.CancelledError) as e:
            logger.error(f"Failed to register resource for {resource_type.value} {resource_id}: {e!r}")
            if created:
                await self._discard_resource(resource_id)
            if isinstance(e, asyncio.CancelledError):
                raise
            raise ResourceRegistrationError(
                f"Failed to register {resource_type.value} resource {resource_id}",
                details={"resource_id": resource_id, "resource_type": resource_type.value},
            ) from e

    async def _discard_resource(self, resource_id: str) -> None:
        # The row is about to roll back; an orphaned resource would resolve as a Group
        try:
            await self._client.delete_resource(resource_id)
        except AuthorizationServiceError as e:
            logger.warning(f"Failed to remove resource {resource_id} after registration failure: {e}")

    async def delete_with_resource(self, resource_type: ResourceType, resource_id: str) -> None:
        """Delete an entity, then its resource best-effort.

        Raises:
            InvalidResourceIdError: If the id is not a UUID
            EntityNotFoundError: If no entity of the type has the id
        """
        entity_id = parse_resource_id(resource_id)
        if entity_id is None:
            raise InvalidResourceIdError(f"Invalid {resource_type.value} id: {resource_id}")
        store = self._store_for(resource_type)

        async with self._transactions.transaction() as tx:
            deleted = await store.delete(tx, entity_id)
            if not deleted:
                raise EntityNotFoundError(
                    f"{resource_type.value.capitalize()} {entity_id} not found",
                    details={"resource_id": str(entity_id)},
                )
            if self._index is not None:
                await self._index.remove(tx, entity_id)

        try:
            await self._client.delete_resource(str(entity_id))
        except AuthorizationServiceError as e:
            logger.warning(f"Deleted {resource_type.value} {entity_id} but failed to delete its resource: {e}")
            return

        logger.info(f"Deleted {resource_type.value} {entity_id} and its authorization resource")

    async def update_with_resource(
        self,
        resource_type: ResourceType,
        resource_id: str,
        name: Optional[str] = None,
        public: Optional[bool] = None,
    ) -> DomainEntity:
        """Update an entity's name or visibility and push the change to its resource.

        The database is the source of truth; a failed resource update is
        logged and left for self-healing to repair.

        Raises:
            InvalidResourceIdError: If the id is not a UUID
            EntityNotFoundError: If no entity of the type has the id
        """
        entity_id = parse_resource_id(resource_id)
        if entity_id is None:
            raise InvalidResourceIdError(f"Invalid {resource_type.value} id: {resource_id}")
        store = self._store_for(resource_type)

        async with self._transactions.transaction() as tx:
            entity = await store.update(tx, entity_id, name=name, public=public)
            if entity is None:
                raise EntityNotFoundError(
                    f"{resource_type.value.capitalize()} {entity_id} not found",
                    details={"resource_id": str(entity_id)},
                )

        try:
            await self._client.sync_resource_scopes(
                str(entity.id),
                display_name_for(resource_type, entity.name),
                get_scopes_for_type(resource_type),
                build_attributes(resource_type, entity.owner_id, entity.public),
            )
        except AuthorizationServiceError as e:
            logger.warning(f"Updated {resource_type.value} {entity.id} but failed to update its resource: {e}")

        return entity
