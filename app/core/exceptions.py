"""
Custom exceptions for the application.
All API exceptions should inherit from APIException for consistent error handling.
"""
from typing import Optional, Any


class APIException(Exception):
    """
    Base exception for all API errors.
    Provides consistent error response format.
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Optional[Any] = None,
    ):
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details
        super().__init__(self.message)


class NotFoundException(APIException):
    """404 Not Found"""

    def __init__(self, message: str = "Resource not found", code: str = "NOT_FOUND"):
        super().__init__(404, code, message)


class ValidationException(APIException):
    """422 Validation Error"""

    def __init__(
        self,
        message: str = "Validation error",
        code: str = "VALIDATION_ERROR",
        details: Optional[Any] = None,
    ):
        super().__init__(422, code, message, details)


class AnalysisException(APIException):
    """
    502 Bad Gateway: the inference provider was unreachable or answered
    with a malformed / out-of-schema response. Nothing is persisted.
    """

    def __init__(
        self,
        message: str = "AI analysis failed",
        code: str = "ANALYSIS_FAILED",
        details: Optional[Any] = None,
    ):
        super().__init__(502, code, message, details)


# Resource specific exceptions
class JobNotFoundException(NotFoundException):
    """Job not found"""

    def __init__(self):
        super().__init__(message="Job not found", code="JOB_NOT_FOUND")


class CandidateNotFoundException(NotFoundException):
    """Candidate profile not found"""

    def __init__(self):
        super().__init__(message="Candidate profile not found", code="CANDIDATE_NOT_FOUND")


class ApplicationNotFoundException(NotFoundException):
    """Application not found"""

    def __init__(self):
        super().__init__(message="Application not found", code="APPLICATION_NOT_FOUND")


class MissingIdentifierException(ValidationException):
    """A required identifier was not supplied."""

    def __init__(self, field: str):
        super().__init__(
            message=f"{field} is required",
            code="MISSING_IDENTIFIER",
            details={"field": field},
        )
