"""Organization service.

Organizations have no row in the transactional store, so creation cannot
lean on a database rollback. If granting the creator admin access fails,
the freshly created resource is deleted again before the error is raised.
"""

import asyncio
import logging
from typing import Optional

from ....core.exceptions import (
    AuthorizationServiceError,
    OrganizationAlreadyExistsError,
    OrganizationError,
    ResourceNotFoundError,
)
from ...authorization.entities.protocols import AuthorizationClient
from ...resources.entities.resource import build_attributes
from ...resources.entities.resource_type import ResourceType, display_name_for, get_scopes_for_type
from ..entities.organization import Organization
from ..utils.validation import OrganizationValidationRules

logger = logging.getLogger(__name__)


class OrganizationService:
    """Creates and deletes organization (Group) resources."""

    def __init__(self, authorization_client: AuthorizationClient, external_call_timeout: float = 30.0):
        """Initialize with injected dependencies.

        Args:
            authorization_client: Client for the authorization service
            external_call_timeout: Deadline in seconds for the whole create sequence
        """
        self._client = authorization_client
        self.external_call_timeout = external_call_timeout

    async def create_organization(
        self,
        title: str,
        user_id: str,
        alias: Optional[str] = None,
    ) -> Organization:
        """Create an organization and make the creating user its owner.

        Args:
            title: Human-readable title
            user_id: User who becomes owner and receives every group scope
            alias: Immutable identifier; generated from the title when omitted

        Raises:
            OrganizationValidationError: If the title or alias is invalid
            OrganizationAlreadyExistsError: If the alias is taken
            OrganizationError: If the resource or the owner grant could not be created
        """
        title = OrganizationValidationRules.validate_title(title)
        if not alias:
            alias = OrganizationValidationRules.title_to_alias(title)
        alias = OrganizationValidationRules.validate_alias(alias)

        try:
            async with asyncio.timeout(self.external_call_timeout):
                await self._ensure_alias_available(alias)
                await self._create_resource(alias, user_id)
                await self._grant_owner(alias, user_id)
        except TimeoutError as e:
            raise OrganizationError(
                f"Timed out creating organization '{alias}'",
                details={"alias": alias},
            ) from e

        logger.info(f"Created organization '{alias}' ({title}) owned by {user_id}")
        return Organization(alias=alias, title=title, owner_id=user_id)

    async def _ensure_alias_available(self, alias: str) -> None:
        try:
            await self._client.get_resource(alias)
        except ResourceNotFoundError:
            return
        except AuthorizationServiceError as e:
            # Creation below rejects duplicates anyway
            logger.warning(f"Failed to check organization alias '{alias}': {e}")
            return
        raise OrganizationAlreadyExistsError(
            f"Organization alias '{alias}' already exists",
            details={"alias": alias},
        )

    async def _create_resource(self, alias: str, user_id: str) -> None:
        try:
            await self._client.create_resource(
                alias,
                display_name_for(ResourceType.GROUP, alias),
                get_scopes_for_type(ResourceType.GROUP),
                build_attributes(ResourceType.GROUP, owner_id=user_id),
            )
        except AuthorizationServiceError as e:
            logger.error(f"Failed to create organization resource '{alias}': {e}")
            raise OrganizationError(
                f"Failed to create organization: {e}",
                details={"alias": alias},
            ) from e

    async def _grant_owner(self, alias: str, user_id: str) -> None:
        try:
            await self._client.create_permission(alias, user_id)
        except (AuthorizationServiceError, asyncio.CancelledError) as e:
            logger.error(f"Failed to grant {user_id} access to organization '{alias}': {e}")
            await self._rollback(alias)
            if isinstance(e, AuthorizationServiceError):
                raise OrganizationError(
                    f"Failed to add you as organization admin: {e}",
                    details={"alias": alias, "user_id": user_id},
                ) from e
            raise

    async def _rollback(self, alias: str) -> None:
        try:
            await self._client.delete_resource(alias)
        except AuthorizationServiceError as e:
            logger.error(f"Failed to roll back organization '{alias}': {e}")
            return
        logger.info(f"Rolled back organization '{alias}' after owner grant failure")

    async def delete_organization(self, alias: str) -> None:
        """Delete an organization's resource; an absent organization is not an error."""
        try:
            await self._client.delete_resource(alias)
        except AuthorizationServiceError as e:
            raise OrganizationError(
                f"Failed to delete organization '{alias}': {e}",
                details={"alias": alias},
            ) from e
        logger.info(f"Deleted organization '{alias}'")
