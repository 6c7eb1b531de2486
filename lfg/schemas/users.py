"""
Pydantic schemas for users and authentication.

Request fields are optional at the schema level; required-ness and length
rules are enforced by the service layer so that every invalid field is
reported together.
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


# Request schemas
class UserCredentials(BaseModel):
    """Body of sign-up and sign-in requests."""
    username: Optional[str] = None
    password: Optional[str] = None


class KickRequest(BaseModel):
    """Body of a kick request: the ID of the member to remove."""
    id: int


# Response schemas
class UserSummary(BaseModel):
    """Public view of a user; never includes the password."""
    id: int
    username: str
    created_at: datetime

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """Response of sign-up and sign-in."""
    token: str
    user: UserSummary
