"""Wiring of the authorization core from settings."""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .config.settings import AuthzSettings, get_settings
from .database.connection import DatabaseManager
from .features.authorization.adapters.keycloak_uma_adapter import KeycloakUMAAdapter
from .features.authorization.entities.keycloak_config import KeycloakUMAConfig
from .features.authorization.entities.protocols import SyncFailureStore
from .features.authorization.repositories.memory_sync_failure_store import MemorySyncFailureStore
from .features.authorization.repositories.redis_sync_failure_store import RedisSyncFailureStore
from .features.authorization.services.authorization_service import AuthorizationService
from .features.authorization.services.permission_verifier import PermissionVerifier
from .features.authorization.services.self_healing import SelfHealingSynchronizer
from .features.organizations.services.organization_service import OrganizationService
from .features.resources.entities.protocols import EntityStore
from .features.resources.entities.resource_type import ResourceType
from .features.resources.repositories.asyncpg_entity_store import AsyncPGEntityStore, AsyncPGResourceIndex
from .features.resources.repositories.queries import DEFAULT_ENTITY_TABLES
from .features.resources.services.lifecycle_manager import ResourceLifecycleManager
from .features.resources.services.resource_resolver import ResourceTypeResolver

logger = logging.getLogger(__name__)


@dataclass
class AuthzServices:
    """The wired service graph and the resources it owns."""

    settings: AuthzSettings
    database: DatabaseManager
    client: KeycloakUMAAdapter
    failure_store: SyncFailureStore
    resolver: ResourceTypeResolver
    lifecycle: ResourceLifecycleManager
    verifier: PermissionVerifier
    synchronizer: SelfHealingSynchronizer
    authorization: AuthorizationService
    organizations: OrganizationService

    async def close(self) -> None:
        """Release the HTTP client, the Redis connection and the database pool."""
        await self.client.close()
        if isinstance(self.failure_store, RedisSyncFailureStore):
            await self.failure_store.disconnect()
        await self.database.close_pool()
        logger.info("Authorization services closed")


async def build_authorization_service(
    settings: Optional[AuthzSettings] = None,
    entity_tables: Optional[Dict[ResourceType, str]] = None,
) -> AuthzServices:
    """Build and connect the full service graph.

    Args:
        settings: Settings to use (environment settings when omitted)
        entity_tables: Table per domain type (defaults to DEFAULT_ENTITY_TABLES)

    Returns:
        Connected AuthzServices; call ``close()`` on shutdown
    """
    settings = settings or get_settings()
    tables = entity_tables or DEFAULT_ENTITY_TABLES

    database = DatabaseManager.from_settings(settings)
    await database.create_pool()

    client: Optional[KeycloakUMAAdapter] = None
    try:
        resource_index = AsyncPGResourceIndex(database, settings.resource_index_table)
        await resource_index.ensure_schema()
        stores: Dict[ResourceType, EntityStore] = {
            resource_type: AsyncPGEntityStore(database, table) for resource_type, table in tables.items()
        }

        client = KeycloakUMAAdapter(
            KeycloakUMAConfig(
                server_url=settings.keycloak_server_url,
                realm_name=settings.keycloak_realm,
                client_id=settings.keycloak_client_id,
                client_secret=settings.keycloak_client_secret.get_secret_value() or None,
                verify=settings.keycloak_verify_ssl,
                timeout=settings.external_call_timeout,
            )
        )

        if settings.redis_url:
            failure_store: SyncFailureStore = RedisSyncFailureStore(
                settings.redis_url,
                cooldown_seconds=settings.sync_failure_cooldown,
            )
            await failure_store.connect()
        else:
            failure_store = MemorySyncFailureStore(settings.sync_failure_cooldown)
    except BaseException:
        logger.error("Failed to build authorization services, releasing acquired resources")
        if client is not None:
            await client.close()
        await database.close_pool()
        raise

    resolver = ResourceTypeResolver(stores, client, resource_index)
    verifier = PermissionVerifier(client)
    synchronizer = SelfHealingSynchronizer(
        resolver,
        client,
        failure_store=failure_store,
        cooldown_seconds=settings.sync_failure_cooldown,
    )

    logger.info(
        f"Authorization services ready for realm {settings.keycloak_realm} "
        f"(sync cooldown store: {'redis' if settings.redis_url else 'memory'})"
    )

    return AuthzServices(
        settings=settings,
        database=database,
        client=client,
        failure_store=failure_store,
        resolver=resolver,
        lifecycle=ResourceLifecycleManager(
            database,
            stores,
            client,
            resource_index=resource_index,
            external_call_timeout=settings.external_call_timeout,
        ),
        verifier=verifier,
        synchronizer=synchronizer,
        authorization=AuthorizationService(verifier, synchronizer),
        organizations=OrganizationService(client, external_call_timeout=settings.external_call_timeout),
    )
