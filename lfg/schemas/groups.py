"""
Pydantic schemas for groups.

This module defines request/response schemas for the group endpoints.
Responses expose whether a group is private but never its password.
"""

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from lfg.models.users import GroupStatus
from lfg.schemas.users import UserSummary


# Request schemas (for creating/updating)
class GroupCreate(BaseModel):
    """Schema for creating a new group."""
    title: Optional[str] = None
    description: Optional[str] = None
    max_size: Optional[int] = None
    password: Optional[str] = None


class GroupUpdate(BaseModel):
    """Schema for updating group details. Empty fields are left unchanged."""
    title: Optional[str] = None
    description: Optional[str] = None
    max_size: Optional[int] = None


class GroupPasswordUpdate(BaseModel):
    """Schema for setting or clearing the group password."""
    password: Optional[str] = None


class GroupJoin(BaseModel):
    """Schema for joining a group; the password is needed for private groups."""
    password: Optional[str] = None


# Response schemas
class GroupResponse(BaseModel):
    """Schema for group API responses."""
    id: int
    title: str
    description: Optional[str]
    status: GroupStatus
    max_size: int
    created_at: datetime
    owner_id: int
    is_private: bool
    member_count: int
    members: List[UserSummary] = []

    @classmethod
    def from_group(cls, group) -> "GroupResponse":
        """Build the response from a Group model."""
        return cls(
            id=group.id,
            title=group.title,
            description=group.description,
            status=group.status,
            max_size=group.max_size,
            created_at=group.created_at,
            owner_id=group.owner_id,
            is_private=group.is_private(),
            member_count=group.member_count,
            members=[UserSummary.model_validate(m) for m in group.members],
        )
