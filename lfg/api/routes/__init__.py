"""
API routes package.

This package contains all FastAPI route modules organized by domain.
Each module provides REST endpoints for specific business functionality.
"""

# Import all route modules for easy access
from lfg.api.routes import auth, groups

__all__ = [
    "auth",
    "groups",
]
