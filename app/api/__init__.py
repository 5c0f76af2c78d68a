"""
API package.
"""
from app.api.routes import api_router
from app.api.deps import get_db_scope

__all__ = [
    "api_router",
    "get_db_scope",
]
