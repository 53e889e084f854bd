"""Resource and domain entity representations."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from uuid import UUID, uuid4

from .resource_type import ResourceType, display_name_for, get_scopes_for_type, supports_visibility

# Attribute keys shared with the authorization service
ATTR_TYPE = "type"
ATTR_OWNER_ID = "ownerId"
ATTR_PUBLIC = "public"


@dataclass
class DomainEntity:
    """An owned record in the transactional store (Bot, Strategy, Exchange, Runner)."""

    name: str
    owner_id: str
    public: bool = False
    id: UUID = field(default_factory=uuid4)

    @classmethod
    def from_record(cls, record) -> "DomainEntity":
        """Build an entity from a database row or mapping."""
        return cls(
            id=record["id"],
            name=record["name"],
            owner_id=record["owner_id"],
            public=bool(record["public"]),
        )


@dataclass
class Resource:
    """The authorization service's view of a protected resource."""

    id: str
    name: str
    scopes: List[str] = field(default_factory=list)
    attributes: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def owner_id(self) -> Optional[str]:
        values = self.attributes.get(ATTR_OWNER_ID)
        return values[0] if values else None

    @property
    def resource_type(self) -> Optional[ResourceType]:
        values = self.attributes.get(ATTR_TYPE)
        return ResourceType.parse(values[0]) if values else None


@dataclass(frozen=True)
class ResolvedResource:
    """Canonical state a resource must have in the authorization service."""

    resource_type: ResourceType
    display_name: str
    scopes: List[str]
    attributes: Dict[str, List[str]]


def build_attributes(
    resource_type: ResourceType,
    owner_id: Optional[str] = None,
    public: Optional[bool] = None,
) -> Dict[str, List[str]]:
    """Build the attribute map for a resource.

    ``public`` is only emitted for visibility-aware types.
    """
    attributes: Dict[str, List[str]] = {ATTR_TYPE: [resource_type.value]}
    if owner_id:
        attributes[ATTR_OWNER_ID] = [owner_id]
    if public is not None and supports_visibility(resource_type):
        attributes[ATTR_PUBLIC] = ["true" if public else "false"]
    return attributes


def resolved_from_entity(resource_type: ResourceType, entity: DomainEntity) -> ResolvedResource:
    """Canonical resource state for a domain-backed entity."""
    return ResolvedResource(
        resource_type=resource_type,
        display_name=display_name_for(resource_type, entity.name),
        scopes=get_scopes_for_type(resource_type),
        attributes=build_attributes(resource_type, entity.owner_id, entity.public),
    )
