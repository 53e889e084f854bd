"""Organization validation utilities.

An organization is a Group resource whose id is its alias. Aliases are
immutable and end up in URLs, so they are kept to lowercase alphanumerics
and single hyphens.
"""

import re
import time
import unicodedata

from ....core.exceptions import OrganizationValidationError


class OrganizationValidationRules:
    """Centralized validation rules for organization titles and aliases."""

    ALIAS_PATTERN = re.compile(r'^[a-z0-9][a-z0-9-]*[a-z0-9]$|^[a-z0-9]$')

    # Length constraints
    TITLE_MAX_LENGTH = 100
    ALIAS_MIN_LENGTH = 3
    ALIAS_MAX_LENGTH = 50

    @staticmethod
    def validate_title(title: str) -> str:
        """Validate an organization title.

        Args:
            title: Human-readable title

        Returns:
            The stripped title

        Raises:
            OrganizationValidationError: If the title is empty, too long or
                contains control characters
        """
        if not isinstance(title, str):
            raise OrganizationValidationError("Organization title must be a string")

        normalized = title.strip()
        if not normalized:
            raise OrganizationValidationError("Organization title is required")
        if len(normalized) > OrganizationValidationRules.TITLE_MAX_LENGTH:
            raise OrganizationValidationError(
                f"Organization title must be {OrganizationValidationRules.TITLE_MAX_LENGTH} characters or less"
            )
        # Control characters end up in Keycloak group names
        if any(ord(char) < 32 or ord(char) == 127 for char in normalized):
            raise OrganizationValidationError("Organization title contains invalid characters")

        return normalized

    @staticmethod
    def validate_alias(alias: str) -> str:
        """Validate an organization alias.

        Raises:
            OrganizationValidationError: If the alias is invalid
        """
        if not isinstance(alias, str):
            raise OrganizationValidationError("Organization alias must be a string")

        if len(alias) < OrganizationValidationRules.ALIAS_MIN_LENGTH:
            raise OrganizationValidationError(
                f"Organization alias must be at least {OrganizationValidationRules.ALIAS_MIN_LENGTH} characters"
            )
        if len(alias) > OrganizationValidationRules.ALIAS_MAX_LENGTH:
            raise OrganizationValidationError(
                f"Organization alias must be {OrganizationValidationRules.ALIAS_MAX_LENGTH} characters or less"
            )
        if alias in (".", "..") or "/" in alias or "\\" in alias:
            raise OrganizationValidationError("Organization alias contains invalid path characters")
        if alias.startswith("."):
            raise OrganizationValidationError("Organization alias cannot start with a dot")
        if not OrganizationValidationRules.ALIAS_PATTERN.match(alias):
            raise OrganizationValidationError(
                "Organization alias must be lowercase alphanumeric with hyphens, "
                "cannot start or end with hyphen"
            )
        if "--" in alias:
            raise OrganizationValidationError("Organization alias cannot contain consecutive hyphens")

        return alias

    @staticmethod
    def title_to_alias(title: str) -> str:
        """Generate a URL-friendly alias from a title.

        Diacritics are stripped, everything outside ``[a-z0-9]`` becomes a
        single hyphen, and the result is trimmed and truncated. Titles that
        leave fewer than three characters get an ``org-<n>`` fallback.
        """
        decomposed = unicodedata.normalize("NFD", title or "")
        stripped = "".join(char for char in decomposed if unicodedata.category(char) != "Mn")
        lowered = unicodedata.normalize("NFC", stripped).lower()

        alias = re.sub(r"[^a-z0-9]+", "-", lowered).strip("-")

        if len(alias) > OrganizationValidationRules.ALIAS_MAX_LENGTH:
            alias = alias[:OrganizationValidationRules.ALIAS_MAX_LENGTH].rstrip("-")

        if len(alias) < OrganizationValidationRules.ALIAS_MIN_LENGTH:
            alias = f"org-{time.time_ns() % 100000}"

        return alias
