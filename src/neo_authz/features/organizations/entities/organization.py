"""Organization entity.

Organizations are Group resources that exist only in the authorization
service; the alias is the resource id.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Organization:
    """A created organization."""

    alias: str
    title: str
    owner_id: Optional[str] = None
