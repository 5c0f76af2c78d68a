"""
Celery tasks for background analysis.

ARCHITECTURE RULE: Same as routes — tasks are thin entry points.
They do exactly 3 things:
  1. Create a DB scope (since we're outside FastAPI's request cycle)
  2. Call a service method
  3. Return the result

Failures are logged and turned into an error result. Nothing is retried:
the next trigger (or on-demand read) recomputes.
"""
import asyncio
import uuid

from app.workers.celery_app import celery_app
from app.core.database import create_task_scope
from app.core.exceptions import APIException
from app.core.logging import bind_task_context, get_logger

logger = get_logger(__name__)


def run_async(coro):
    """
    Helper to run async code in sync Celery tasks.

    Celery workers are synchronous. Our services are async (because
    SQLAlchemy async requires it). This bridge creates an event loop,
    runs the coroutine, and cleans up.
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def resolve_worker_capabilities():
    """Resolve optional-table flags once per worker process."""
    return run_async(_resolve_worker_capabilities())


async def _resolve_worker_capabilities():
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import NullPool

    from app.core.capabilities import resolve_capabilities
    from app.core.config import settings

    engine = create_async_engine(settings.elevated_database_url, poolclass=NullPool)
    try:
        return await resolve_capabilities(engine)
    finally:
        await engine.dispose()


# ── Compatibility analysis ───────────────────────────────────────────────────


@celery_app.task(bind=True, max_retries=0, ignore_result=False)
def analyze_application_compatibility(self, application_id: str):
    """
    Compute (or confirm still-fresh) compatibility for one application.

    Fired after an application is submitted and, via the fan-out task,
    after a candidate profile change.
    """
    bind_task_context("analyze_application_compatibility", self.request.id, application_id=application_id)
    try:
        return run_async(_analyze_application_compatibility(application_id))
    except APIException as exc:
        logger.warning("background_analysis_failed", code=exc.code, error=exc.message)
        return {"status": "failed", "application_id": application_id, "error": exc.code}
    except Exception as exc:
        logger.exception("background_analysis_crashed", error=str(exc))
        return {"status": "failed", "application_id": application_id, "error": "INTERNAL_ERROR"}


async def _analyze_application_compatibility(application_id: str):
    """Async implementation - delegates to CompatibilityService."""
    from app.services.compatibility_service import CompatibilityService

    service = CompatibilityService()

    async with create_task_scope() as scope:
        result = await service.analyze_application(scope, uuid.UUID(application_id))

    return {
        "status": "cached" if result.cached else "analyzed",
        "application_id": application_id,
        "score": result.analysis.overall_score,
        "fit_level": result.analysis.fit_level,
    }


# ── Profile change fan-out ───────────────────────────────────────────────────


@celery_app.task(bind=True, max_retries=0, ignore_result=False)
def reanalyze_candidate_applications(self, candidate_id: str):
    """
    Queue a compatibility analysis for each of the candidate's pending and
    shortlisted applications.
    """
    bind_task_context("reanalyze_candidate_applications", self.request.id, candidate_id=candidate_id)
    try:
        return run_async(_reanalyze_candidate_applications(candidate_id))
    except Exception as exc:
        logger.exception("profile_reanalysis_crashed", error=str(exc))
        return {"status": "failed", "candidate_id": candidate_id, "error": "INTERNAL_ERROR"}


async def _reanalyze_candidate_applications(candidate_id: str):
    from app.repositories.application_repository import ApplicationRepository
    from app.services.background_service import BackgroundAnalysisDispatcher

    dispatcher = BackgroundAnalysisDispatcher(analysis_task=analyze_application_compatibility)

    async with create_task_scope() as scope:
        applications = await ApplicationRepository().find_active_for_candidate(
            scope.elevated, uuid.UUID(candidate_id)
        )

    scheduled = [
        task_id
        for task_id in (dispatcher.schedule_background_analysis(a.id) for a in applications)
        if task_id
    ]
    logger.info(
        "profile_reanalysis_fanned_out",
        applications=len(applications),
        scheduled=len(scheduled),
    )
    return {
        "status": "scheduled",
        "candidate_id": candidate_id,
        "applications": len(applications),
        "scheduled": len(scheduled),
    }
