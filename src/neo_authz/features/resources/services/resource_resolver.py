"""Resolution of opaque resource ids to their canonical resource state.

Domain resources share their UUID with a row in one of the entity stores.
Anything that is not a UUID, or that no store knows, is a Group whose state
lives only in the authorization service.
"""

import logging
from typing import Dict, Mapping, Optional, Tuple
from uuid import UUID

from ....core.exceptions import ResourceNotFoundError
from ...authorization.entities.protocols import AuthorizationClient
from ..entities.protocols import EntityStore, ResourceIndex
from ..entities.resource import (
    DomainEntity,
    ResolvedResource,
    build_attributes,
    resolved_from_entity,
)
from ..entities.resource_type import ResourceType, display_name_for, get_scopes_for_type

logger = logging.getLogger(__name__)

# Probe order for ids missing from the resource index
PROBE_ORDER: Tuple[ResourceType, ...] = (
    ResourceType.BOT,
    ResourceType.STRATEGY,
    ResourceType.EXCHANGE,
    ResourceType.RUNNER,
)


def parse_resource_id(resource_id: str) -> Optional[UUID]:
    """Parse a resource id as a UUID, returning None for non-UUID ids."""
    try:
        return UUID(str(resource_id))
    except ValueError:
        return None


class ResourceTypeResolver:
    """Works out which type owns a resource id and what its resource must look like."""

    def __init__(
        self,
        stores: Mapping[ResourceType, EntityStore],
        authorization_client: AuthorizationClient,
        resource_index: Optional[ResourceIndex] = None,
    ):
        """Initialize the resolver.

        Args:
            stores: Entity store per domain type; GROUP is never a key
            authorization_client: Client used to look up Group resources
            resource_index: Optional id -> type index consulted before probing
        """
        if ResourceType.GROUP in stores:
            raise ValueError("Group resources have no entity store")
        self._stores: Dict[ResourceType, EntityStore] = dict(stores)
        self._client = authorization_client
        self._index = resource_index

    async def resolve(self, resource_id: str) -> ResolvedResource:
        """Resolve a resource id to its type, display name, scopes and attributes.

        Raises:
            AuthorizationServiceError: If the service fails while checking Group state
        """
        entity_id = parse_resource_id(resource_id)
        if entity_id is not None:
            match = await self._find_entity(entity_id)
            if match is not None:
                resource_type, entity = match
                logger.debug(f"Resolved {resource_id} as {resource_type.value}")
                return resolved_from_entity(resource_type, entity)

        return await self._resolve_group(str(resource_id))

    async def _find_entity(self, entity_id: UUID) -> Optional[Tuple[ResourceType, DomainEntity]]:
        if self._index is not None:
            indexed_type = await self._index.get_type(entity_id)
            if indexed_type is not None:
                store = self._stores.get(indexed_type)
                if store is not None:
                    entity = await store.get(entity_id)
                    if entity is not None:
                        return indexed_type, entity
                logger.warning(f"Resource index points {entity_id} at {indexed_type.value} but no row was found")

        for resource_type in PROBE_ORDER:
            store = self._stores.get(resource_type)
            if store is None:
                continue
            entity = await store.get(entity_id)
            if entity is not None:
                return resource_type, entity
        return None

    async def _resolve_group(self, resource_id: str) -> ResolvedResource:
        owner_id = None
        try:
            existing = await self._client.get_resource(resource_id)
            owner_id = existing.owner_id
        except ResourceNotFoundError:
            logger.debug(f"Group resource {resource_id} not registered yet")

        return ResolvedResource(
            resource_type=ResourceType.GROUP,
            display_name=display_name_for(ResourceType.GROUP, resource_id),
            scopes=get_scopes_for_type(ResourceType.GROUP),
            attributes=build_attributes(ResourceType.GROUP, owner_id=owner_id),
        )
