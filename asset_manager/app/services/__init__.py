"""Service layer for the asset manager."""

from . import assets, assignments, users

__all__ = ("assets", "assignments", "users")
