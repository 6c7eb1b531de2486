"""
Base Service Classes and Utilities

This module provides the foundation for all service layer implementations:
the error hierarchy raised by services (each error knows the HTTP status it
maps to), the ``service_method`` logging decorator and the ``BaseService``
class that binds a service to a database session.
"""

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred in the server"
NOT_FOUND_MESSAGE = "The requested resource could not be found"
FIELD_IS_REQUIRED = "This field is required"


@dataclass
class FieldError:
    """A single invalid field in a request body."""
    name: str
    error: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "error": self.error}


class ServiceError(Exception):
    """Base exception for service layer errors."""

    status_code: int = 500

    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE, details: Dict[str, Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> Dict[str, Any]:
        """Response body sent to the client."""
        return {"message": self.message}


class ValidationError(ServiceError):
    """Request body failed business validation."""

    status_code = 400

    def __init__(self, message: str, field_errors: List[FieldError] = None):
        super().__init__(message)
        self.field_errors = field_errors or []

    def to_response(self) -> Dict[str, Any]:
        body = super().to_response()
        if self.field_errors:
            body["field_errors"] = [e.to_dict() for e in self.field_errors]
        return body


class PermissionDenied(ServiceError):
    """A permission predicate rejected the request."""

    status_code = 400


class AuthenticationError(ServiceError):
    """Missing, malformed or invalid credentials."""

    status_code = 401


class ForbiddenError(ServiceError):
    """Credentials are valid but do not grant access."""

    status_code = 403


class NotFoundError(ServiceError):
    """Resource not found error."""

    status_code = 404

    def __init__(self, resource_type: str, identifier: Any):
        super().__init__(
            NOT_FOUND_MESSAGE,
            {"resource_type": resource_type, "identifier": identifier},
        )


class ConflictError(ServiceError):
    """Resource conflict error."""

    status_code = 400


def service_method(func: Callable) -> Callable:
    """Decorator for service methods with logging and database error mapping.

    ``ServiceError`` propagates unchanged. Database failures roll the session
    back and surface as a generic ``ServiceError`` (HTTP 500).
    """

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        method_name = f"{self.__class__.__name__}.{func.__name__}"
        logger.debug(f"[{method_name}] Starting operation")
        try:
            result = func(self, *args, **kwargs)
        except ServiceError as e:
            logger.info(
                f"[{method_name}] Rejected: {e.message}",
                extra={"details": e.details} if e.details else None,
            )
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"[{method_name}] Database error: {e}")
            raise ServiceError() from e
        logger.debug(f"[{method_name}] Operation completed")
        return result

    return wrapper


class BaseService:
    """Base class for services bound to a request-scoped database session."""

    def __init__(self, db: Session):
        self.db = db
        self.logger = logging.getLogger(f"services.{self.__class__.__name__}")
