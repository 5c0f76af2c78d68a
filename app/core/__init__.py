"""Core module exports."""
from app.core.config import settings, get_settings
from app.core.database import (
    Base,
    DBScope,
    get_db,
    get_elevated_db,
    init_db,
    close_db,
    engine,
    elevated_engine,
    async_session_maker,
    elevated_session_maker,
)
from app.core.exceptions import (
    APIException,
    NotFoundException,
    ValidationException,
    AnalysisException,
    JobNotFoundException,
    CandidateNotFoundException,
    ApplicationNotFoundException,
    MissingIdentifierException,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "DBScope",
    "get_db",
    "get_elevated_db",
    "init_db",
    "close_db",
    "engine",
    "elevated_engine",
    "async_session_maker",
    "elevated_session_maker",
    # Exceptions
    "APIException",
    "NotFoundException",
    "ValidationException",
    "AnalysisException",
    "JobNotFoundException",
    "CandidateNotFoundException",
    "ApplicationNotFoundException",
    "MissingIdentifierException",
]
