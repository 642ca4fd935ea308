"""Database access for neo-rbac."""

from .connection import DatabaseManager

__all__ = ["DatabaseManager"]
