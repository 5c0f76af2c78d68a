"""
Background analysis dispatcher - runs compatibility analysis off the
request path.

Work goes onto the Celery "analysis" queue, whose fixed worker concurrency
bounds how many analyses run at once. Delivery is at-most-once: no retries,
no ordering. A failed enqueue is logged and the caller carries on.
"""
from typing import Any, Optional
from uuid import UUID

from app.core.config import settings
from app.core.exceptions import MissingIdentifierException
from app.core.logging import get_logger

logger = get_logger(__name__)


class BackgroundAnalysisDispatcher:
    def __init__(self, analysis_task: Any = None, fanout_task: Any = None):
        self._analysis_task = analysis_task
        self._fanout_task = fanout_task

    @property
    def analysis_task(self):
        if self._analysis_task is None:
            from app.workers.tasks import analyze_application_compatibility

            self._analysis_task = analyze_application_compatibility
        return self._analysis_task

    @property
    def fanout_task(self):
        if self._fanout_task is None:
            from app.workers.tasks import reanalyze_candidate_applications

            self._fanout_task = reanalyze_candidate_applications
        return self._fanout_task

    def schedule_background_analysis(self, application_id: Optional[UUID]) -> Optional[str]:
        """
        Queue a compatibility analysis for a freshly submitted application.

        Returns the task id, or None when the queue could not be reached.
        """
        if not application_id:
            raise MissingIdentifierException("application_id")
        return self._enqueue(self.analysis_task, "application_id", application_id)

    def schedule_profile_reanalysis(self, candidate_id: Optional[UUID]) -> Optional[str]:
        """Queue re-scoring of the candidate's pending and shortlisted applications."""
        if not candidate_id:
            raise MissingIdentifierException("candidate_id")
        return self._enqueue(self.fanout_task, "candidate_id", candidate_id)

    def _enqueue(self, task, id_name: str, value: UUID) -> Optional[str]:
        try:
            result = task.apply_async(
                args=[str(value)],
                queue=settings.analysis_queue,
            )
        except Exception as exc:
            # Best effort: the triggering request must still succeed
            logger.error(
                "background_enqueue_failed",
                task=getattr(task, "name", str(task)),
                error=str(exc),
                **{id_name: str(value)},
            )
            return None

        logger.info(
            "background_analysis_scheduled",
            task=getattr(task, "name", str(task)),
            task_id=result.id,
            **{id_name: str(value)},
        )
        return result.id
