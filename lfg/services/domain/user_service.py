"""
User Domain Service

This service handles account creation and sign-in: request validation,
password hashing, credential checks and access token issuing.
"""

import logging
from typing import List

from sqlalchemy.exc import IntegrityError

from lfg.core.security import create_access_token, hash_password, verify_password
from lfg.models.users import User
from lfg.schemas.users import TokenResponse, UserCredentials, UserSummary
from lfg.services.base import (
    BaseService, service_method, AuthenticationError, ConflictError, FieldError,
    ValidationError, FIELD_IS_REQUIRED,
)

logger = logging.getLogger(__name__)

MAX_USERNAME_LENGTH = 50
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 200

INVALID_CREDENTIALS_MESSAGE = "username or password is invalid."


def validate_for_sign_up(credentials: UserCredentials) -> None:
    """Collect every field error of a sign-up request and raise them together."""
    errors: List[FieldError] = []

    if not credentials.username:
        errors.append(FieldError("username", FIELD_IS_REQUIRED))
    elif len(credentials.username) > MAX_USERNAME_LENGTH:
        errors.append(FieldError(
            "username",
            f"This field cannot be more than {MAX_USERNAME_LENGTH} characters long",
        ))

    if not credentials.password:
        errors.append(FieldError("password", FIELD_IS_REQUIRED))
    elif not MIN_PASSWORD_LENGTH <= len(credentials.password) <= MAX_PASSWORD_LENGTH:
        errors.append(FieldError(
            "password",
            f"This field has to be {MIN_PASSWORD_LENGTH} to {MAX_PASSWORD_LENGTH} characters long",
        ))

    if errors:
        logger.warning("Request body is invalid", extra={"details": "sign up"})
        raise ValidationError("The request body contains errors", errors)


class UserService(BaseService):
    """Service for user accounts and authentication."""

    @service_method
    def sign_up(self, credentials: UserCredentials) -> TokenResponse:
        """Create an account and return an access token for it."""
        validate_for_sign_up(credentials)

        existing = self.db.query(User).filter(User.username == credentials.username).first()
        if existing:
            raise ConflictError("User already exists.")

        user = User(username=credentials.username, password=hash_password(credentials.password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent sign-up for the same username
            self.db.rollback()
            raise ConflictError("User already exists.")
        self.db.refresh(user)

        self.logger.info("Created user", extra={"user_id": user.id})
        return self._token_response(user)

    @service_method
    def sign_in(self, credentials: UserCredentials) -> TokenResponse:
        """Check a username/password pair and return an access token."""
        user = None
        if credentials.username:
            user = self.db.query(User).filter(User.username == credentials.username).first()

        if user is None or not verify_password(credentials.password, user.password):
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        self.logger.info("User signed in", extra={"user_id": user.id})
        return self._token_response(user)

    def _token_response(self, user: User) -> TokenResponse:
        token = create_access_token(user.id, user.username)
        return TokenResponse(token=token, user=UserSummary.model_validate(user))
