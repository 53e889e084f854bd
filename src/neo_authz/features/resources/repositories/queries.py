"""SQL for domain entity stores and the resource index.

Table names are interpolated, so callers must pass names validated with
``validate_identifier``.
"""

import re

from ..entities.resource_type import ResourceType

_IDENTIFIER_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*(\.[a-z_][a-z0-9_]*)?$")

DEFAULT_ENTITY_TABLES = {
    ResourceType.BOT: "bots",
    ResourceType.STRATEGY: "strategies",
    ResourceType.EXCHANGE: "exchanges",
    ResourceType.RUNNER: "runners",
}


def validate_identifier(name: str) -> str:
    """Validate a (optionally schema-qualified) table name to prevent SQL injection."""
    if not _IDENTIFIER_PATTERN.match(name):
        raise ValueError(f"Invalid table name: {name}")
    return name


# Entity stores

ENTITY_GET = """
    SELECT id, name, owner_id, public
    FROM {table}
    WHERE id = $1
"""

ENTITY_INSERT = """
    INSERT INTO {table} (id, name, owner_id, public)
    VALUES ($1, $2, $3, $4)
    RETURNING id, name, owner_id, public
"""

ENTITY_UPDATE = """
    UPDATE {table}
    SET name = COALESCE($2, name),
        public = COALESCE($3, public)
    WHERE id = $1
    RETURNING id, name, owner_id, public
"""

ENTITY_DELETE = """
    DELETE FROM {table}
    WHERE id = $1
    RETURNING id
"""

# Resource index

RESOURCE_INDEX_CREATE = """
    CREATE TABLE IF NOT EXISTS {table} (
        resource_id UUID PRIMARY KEY,
        resource_type VARCHAR(32) NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
"""

RESOURCE_INDEX_PUT = """
    INSERT INTO {table} (resource_id, resource_type)
    VALUES ($1, $2)
    ON CONFLICT (resource_id) DO UPDATE SET resource_type = EXCLUDED.resource_type
"""

RESOURCE_INDEX_GET = """
    SELECT resource_type
    FROM {table}
    WHERE resource_id = $1
"""

RESOURCE_INDEX_DELETE = """
    DELETE FROM {table}
    WHERE resource_id = $1
"""
