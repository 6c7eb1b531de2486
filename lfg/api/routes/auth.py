"""
Authentication API endpoints.

Public endpoints for creating an account and signing in. Both return an
access token to send as ``Authorization: Bearer <token>``.
"""

import logging

from fastapi import APIRouter, Depends, status

from lfg.core.dependencies import get_user_service
from lfg.schemas.users import TokenResponse, UserCredentials
from lfg.services.domain import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/sign-up", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def sign_up(
    credentials: UserCredentials,
    service: UserService = Depends(get_user_service)
):
    """
    Create an account.

    - **username**: required, at most 50 characters, unique
    - **password**: required, 8 to 200 characters
    """
    response = service.sign_up(credentials)
    logger.info("Request successful", extra={"endpoint": "SignUp"})
    return response


@router.post("/sign-in", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def sign_in(
    credentials: UserCredentials,
    service: UserService = Depends(get_user_service)
):
    """Sign in with a username and password."""
    response = service.sign_in(credentials)
    logger.info("Request successful", extra={"endpoint": "SignIn"})
    return response
