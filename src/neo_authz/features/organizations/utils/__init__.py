"""Organization utilities."""

from .validation import OrganizationValidationRules

__all__ = ["OrganizationValidationRules"]
