"""
FastAPI dependency injection functions.

This module provides dependency functions that can be injected into
FastAPI route handlers: the database session, the authenticated user
and the domain services bound to the request's session.
"""

import logging
from typing import Generator, Optional

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from lfg.core.database import get_db
from lfg.core.security import INVALID_TOKEN_MESSAGE, decode_access_token
from lfg.models.users import User
from lfg.services.base import AuthenticationError
from lfg.services.domain import GroupService, UserService

logger = logging.getLogger(__name__)


# Re-export database dependency
def get_database() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database session.

    Yields:
        Session: SQLAlchemy database session
    """
    yield from get_db()


security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    db: Session = Depends(get_database)
) -> User:
    """
    Authenticate the request from its ``Authorization: Bearer <token>`` header.

    Raises:
        AuthenticationError: the header is missing, malformed, the token is
            invalid or expired, or the user it names no longer exists.
    """
    if credentials is None:
        # HTTPBearer returns None both for a missing header and a non-bearer one
        if not request.headers.get("Authorization"):
            logger.warning("Could not authenticate request. Authorization header is missing")
            raise AuthenticationError("Authorization header is missing")
        logger.warning("Could not authenticate request. Authorization header is malformed")
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)

    payload = decode_access_token(credentials.credentials)
    user = db.get(User, payload["user_id"])
    if user is None:
        logger.warning(
            "Could not authenticate request. User does not exist",
            extra={"user_id": payload["user_id"]},
        )
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)
    return user


def get_user_service(db: Session = Depends(get_database)) -> UserService:
    return UserService(db)


def get_group_service(db: Session = Depends(get_database)) -> GroupService:
    return GroupService(db)
