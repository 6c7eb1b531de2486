"""
Database models package.

This module imports all SQLAlchemy models to ensure they are
registered with the database metadata for table creation.
"""

from lfg.models.users import User, Group, GroupStatus, joined_groups

__all__ = [
    "User",
    "Group",
    "GroupStatus",
    "joined_groups",
]
