"""Outcome of a single permission evaluation."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PermissionCheck:
    """Both halves of a check: the decision and any service error.

    ``granted=False, error=None`` is a legitimate denial. A non-None error
    means the service could not decide and must not be read as a denial.
    """

    resource_id: str
    scope: str
    granted: bool
    error: Optional[Exception] = None

    @property
    def denied(self) -> bool:
        return not self.granted and self.error is None
