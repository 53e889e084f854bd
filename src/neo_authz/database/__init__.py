"""Database access for neo-authz."""

from .connection import DatabaseManager

__all__ = ["DatabaseManager"]
