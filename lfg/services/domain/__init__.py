"""
Domain Services

This module contains business logic services for each domain entity.
Domain services encapsulate business rules and validation, and are bound
to the request's database session.

Available Domain Services:
=========================

1. **UserService** - Account creation and sign-in
2. **GroupService** - Group lifecycle and membership
"""

from .user_service import UserService
from .group_service import GroupService

__all__ = [
    'UserService',
    'GroupService',
]
