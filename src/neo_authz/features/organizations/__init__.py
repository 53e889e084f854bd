"""Organizations feature package.

Organizations are Group resources that live only in the authorization
service, identified by an immutable alias.
"""

from .entities import Organization
from .services import OrganizationService
from .utils import OrganizationValidationRules

__all__ = [
    "Organization",
    "OrganizationService",
    "OrganizationValidationRules",
]
