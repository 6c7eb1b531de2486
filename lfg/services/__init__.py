"""
Service Layer

Business logic between the API routes and the ORM models.

1. **Base Services** (base.py):
   - Error hierarchy mapped to HTTP responses
   - ``service_method`` logging and database error handling
   - ``BaseService`` bound to a request-scoped session

2. **Domain Services** (domain/):
   - User accounts and authentication
   - Group lifecycle and membership

Domain services are imported from ``lfg.services.domain`` directly; this
package only re-exports the base layer so models can import the error types
without pulling in the services that depend on them.
"""

from .base import BaseService, ServiceError, service_method

__all__ = [
    'BaseService',
    'ServiceError',
    'service_method',
]
