"""
Pydantic schemas package.

This module imports all Pydantic schemas for API request/response validation
and provides a centralized place to access all schema definitions.
"""

# User and authentication schemas
from lfg.schemas.users import UserCredentials, KickRequest, UserSummary, TokenResponse

# Group schemas
from lfg.schemas.groups import (
    GroupCreate, GroupUpdate, GroupPasswordUpdate, GroupJoin, GroupResponse
)

__all__ = [
    # User schemas
    "UserCredentials", "KickRequest", "UserSummary", "TokenResponse",

    # Group schemas
    "GroupCreate", "GroupUpdate", "GroupPasswordUpdate", "GroupJoin", "GroupResponse",
]
