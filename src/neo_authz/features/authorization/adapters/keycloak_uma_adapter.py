"""Keycloak UMA 2.0 adapter.

Resource registration goes through the UMA Protection API (python-keycloak's
KeycloakUMA). Permission decisions are requested directly from the realm
token endpoint with ``response_mode=decision`` so that a denial (403) can be
told apart from an unknown scope or resource (400) and from transport errors.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import httpx
from keycloak import KeycloakOpenIDConnection, KeycloakUMA
from keycloak.exceptions import KeycloakError

from ....core.exceptions import (
    AuthorizationServiceError,
    InvalidScopeError,
    ResourceNotFoundError,
)
from ...resources.entities.resource import Resource
from ..entities.keycloak_config import KeycloakUMAConfig
from ..utils.error_classification import (
    is_access_denied,
    is_invalid_resource_message,
    is_invalid_scope_message,
)

logger = logging.getLogger(__name__)

UMA_TICKET_GRANT = "urn:ietf:params:oauth:grant-type:uma-ticket"


def _response_code(error: KeycloakError) -> Optional[int]:
    return getattr(error, "response_code", None)


def _scope_names(raw_scopes: Any) -> List[str]:
    """Scopes come back either as names or as {"name": ...} objects."""
    names = []
    for scope in raw_scopes or []:
        if isinstance(scope, dict):
            name = scope.get("name")
            if name:
                names.append(name)
        else:
            names.append(str(scope))
    return names


class KeycloakUMAAdapter:
    """Adapter for Keycloak resource registration and permission evaluation."""

    def __init__(
        self,
        config: KeycloakUMAConfig,
        uma_client: Optional[KeycloakUMA] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the adapter.

        Args:
            config: Realm and client configuration
            uma_client: Pre-built KeycloakUMA client (built lazily when omitted)
            http_client: Pre-built httpx client for decision requests
        """
        self.config = config
        self._uma: Optional[KeycloakUMA] = uma_client
        self._http_client: Optional[httpx.AsyncClient] = http_client
        self._owns_http_client = http_client is None

    async def __aenter__(self):
        """Async context manager entry."""
        self._ensure_connected()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    def _ensure_connected(self) -> None:
        """Ensure the UMA and HTTP clients exist."""
        if self._uma is None:
            try:
                connection = KeycloakOpenIDConnection(
                    server_url=self.config.server_url,
                    realm_name=self.config.realm_name,
                    client_id=self.config.client_id,
                    client_secret_key=self.config.client_secret,
                    verify=self.config.verify,
                    timeout=self.config.timeout,
                )
                self._uma = KeycloakUMA(connection=connection)
                logger.info(f"Initialized UMA client for realm: {self.config.realm_name}")
            except Exception as e:
                logger.error(f"Failed to initialize Keycloak UMA client: {e}")
                raise AuthorizationServiceError(f"Cannot initialize UMA client: {e}") from e

        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.config.timeout,
                verify=self.config.verify,
            )
            self._owns_http_client = True

    async def close(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None

    def _resource_payload(
        self,
        resource_id: str,
        name: str,
        scopes: List[str],
        attributes: Dict[str, List[str]],
    ) -> Dict[str, Any]:
        # The id doubles as the unique name; the human-readable title goes to displayName
        return {
            "_id": resource_id,
            "name": resource_id,
            "displayName": name,
            "type": (attributes.get("type") or [""])[0],
            "resource_scopes": list(scopes),
            "attributes": {key: list(values) for key, values in attributes.items()},
            "ownerManagedAccess": True,
        }

    async def create_resource(
        self,
        resource_id: str,
        name: str,
        scopes: List[str],
        attributes: Dict[str, List[str]],
    ) -> None:
        """Register a new resource with its scopes and attributes."""
        self._ensure_connected()
        payload = self._resource_payload(resource_id, name, scopes, attributes)

        try:
            await self._uma.a_resource_set_create(payload)
        except KeycloakError as e:
            logger.error(f"Failed to create Keycloak resource {resource_id}: {e}")
            raise AuthorizationServiceError(f"Cannot create resource {resource_id}: {e}") from e
        except httpx.HTTPError as e:
            raise AuthorizationServiceError(f"Keycloak unreachable creating resource {resource_id}: {e}") from e

        logger.info(f"Created Keycloak resource: {resource_id} ({name}) with scopes: {scopes}")

    async def sync_resource_scopes(
        self,
        resource_id: str,
        name: str,
        scopes: List[str],
        attributes: Dict[str, List[str]],
    ) -> None:
        """Upsert a resource in place.

        An existing resource is updated rather than recreated, so UMA policies
        already attached to it survive.
        """
        self._ensure_connected()
        payload = self._resource_payload(resource_id, name, scopes, attributes)

        try:
            exists = await self._resource_exists(resource_id)
            if exists:
                await self._uma.a_resource_set_update(resource_id, payload)
                logger.info(f"Updated Keycloak resource {resource_id} scopes: {scopes}")
            else:
                await self._uma.a_resource_set_create(payload)
                logger.info(f"Registered missing Keycloak resource {resource_id} with scopes: {scopes}")
        except KeycloakError as e:
            logger.error(f"Failed to sync Keycloak resource {resource_id}: {e}")
            raise AuthorizationServiceError(f"Cannot sync resource {resource_id}: {e}") from e
        except httpx.HTTPError as e:
            raise AuthorizationServiceError(f"Keycloak unreachable syncing resource {resource_id}: {e}") from e

    async def _resource_exists(self, resource_id: str) -> bool:
        try:
            await self._uma.a_resource_set_read(resource_id)
            return True
        except KeycloakError as e:
            if _response_code(e) == 404:
                return False
            raise

    async def delete_resource(self, resource_id: str) -> None:
        """Delete a resource; an already-absent resource counts as deleted."""
        self._ensure_connected()

        try:
            await self._uma.a_resource_set_delete(resource_id)
        except KeycloakError as e:
            if _response_code(e) == 404:
                logger.debug(f"Keycloak resource {resource_id} already absent")
                return
            raise AuthorizationServiceError(f"Cannot delete resource {resource_id}: {e}") from e
        except httpx.HTTPError as e:
            raise AuthorizationServiceError(f"Keycloak unreachable deleting resource {resource_id}: {e}") from e

        logger.info(f"Deleted Keycloak resource: {resource_id}")

    async def get_resource(self, resource_id: str) -> Resource:
        """Read a resource; raises ResourceNotFoundError when it does not exist."""
        self._ensure_connected()

        try:
            data = await self._uma.a_resource_set_read(resource_id)
        except KeycloakError as e:
            if _response_code(e) == 404:
                raise ResourceNotFoundError(f"Resource with id [{resource_id}] does not exist.") from e
            raise AuthorizationServiceError(f"Cannot read resource {resource_id}: {e}") from e
        except httpx.HTTPError as e:
            raise AuthorizationServiceError(f"Keycloak unreachable reading resource {resource_id}: {e}") from e

        return Resource(
            id=data.get("_id", resource_id),
            name=data.get("displayName") or data.get("name", resource_id),
            scopes=_scope_names(data.get("resource_scopes") or data.get("scopes")),
            attributes={key: list(values) for key, values in (data.get("attributes") or {}).items()},
        )

    async def create_permission(
        self,
        resource_id: str,
        owner_id: str,
        scopes: Optional[List[str]] = None,
    ) -> None:
        """Attach a UMA policy granting the owner every scope of the resource."""
        self._ensure_connected()

        if scopes is None:
            scopes = (await self.get_resource(resource_id)).scopes

        policy = {
            "name": f"owner-{resource_id}",
            "description": f"Owner access for resource {resource_id}",
            "scopes": list(scopes),
            "users": [owner_id],
        }

        try:
            await self._uma.a_policy_resource_create(resource_id, policy)
        except KeycloakError as e:
            logger.error(f"Failed to create owner policy for resource {resource_id}: {e}")
            raise AuthorizationServiceError(f"Cannot create permission for {resource_id}: {e}") from e
        except httpx.HTTPError as e:
            raise AuthorizationServiceError(f"Keycloak unreachable creating permission for {resource_id}: {e}") from e

        logger.info(f"Granted owner {owner_id} all scopes on resource {resource_id}")

    async def check_permission(self, caller_token: str, resource_id: str, scope: str) -> bool:
        """Ask the token endpoint for a decision on ``resource_id#scope``."""
        self._ensure_connected()

        data = {
            "grant_type": UMA_TICKET_GRANT,
            "audience": self.config.client_id,
            "permission": f"{resource_id}#{scope}",
            "response_mode": "decision",
        }
        headers = {"Authorization": f"Bearer {caller_token}"}

        try:
            response = await self._http_client.post(self.config.token_url, data=data, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Permission check transport failure for {resource_id}#{scope}: {e}")
            raise AuthorizationServiceError(f"Failed to check permission: {e}") from e

        if response.status_code == 200:
            return bool(response.json().get("result", False))

        body = response.text
        message = self._error_message(body)

        if response.status_code == 400:
            if is_invalid_scope_message(message):
                raise InvalidScopeError(message, details={"resource_id": resource_id, "scope": scope})
            if is_invalid_resource_message(message):
                raise ResourceNotFoundError(message, details={"resource_id": resource_id})

        if response.status_code in (400, 403) and is_access_denied(response.status_code, body):
            return False

        raise AuthorizationServiceError(
            f"Failed to check permission: {response.status_code} {message}",
            details={"status_code": response.status_code, "resource_id": resource_id, "scope": scope},
        )

    @staticmethod
    def _error_message(body: str) -> str:
        """Render a Keycloak error body as ``error: description``."""
        try:
            parsed = json.loads(body)
        except ValueError:
            return body
        if not isinstance(parsed, dict):
            return body
        error = parsed.get("error", "")
        description = parsed.get("error_description", "")
        if error and description:
            return f"{error}: {description}"
        return error or description or body
