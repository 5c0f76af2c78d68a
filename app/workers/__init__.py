"""
Workers package - Celery tasks and background processing.
"""
from app.workers.celery_app import celery_app
from app.workers.tasks import (
    analyze_application_compatibility,
    reanalyze_candidate_applications,
)

__all__ = [
    "celery_app",
    "analyze_application_compatibility",
    "reanalyze_candidate_applications",
]
