"""
tests/test_tasks.py — Celery task entry points.

Tasks are called in-process through .run(); the DB scope is replaced with
AsyncMock sessions and the service layer is patched. A failure inside a task
must come back as a "failed" result, never as a raised exception.
"""
import uuid
from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.core.database import DBScope
from app.core.exceptions import AnalysisException
from app.repositories.application_repository import ApplicationRepository
from app.services.compatibility_service import CompatibilityService
from app.workers import tasks
from tests.conftest import compatibility


@asynccontextmanager
async def fake_task_scope():
    yield DBScope(caller=AsyncMock(), elevated=AsyncMock())


@pytest.fixture(autouse=True)
def no_database():
    with patch.object(tasks, "create_task_scope", fake_task_scope):
        yield


class TestAnalyzeApplicationCompatibility:

    def test_returns_score_on_success(self):
        application_id = str(uuid.uuid4())
        outcome = SimpleNamespace(cached=False, analysis=compatibility(72.0, "Moderate Match"))

        with patch.object(CompatibilityService, "analyze_application",
                          AsyncMock(return_value=outcome)):
            result = tasks.analyze_application_compatibility.run(application_id)

        assert result == {
            "status": "analyzed",
            "application_id": application_id,
            "score": 72.0,
            "fit_level": "Moderate Match",
        }

    def test_analysis_error_becomes_failed_result(self):
        application_id = str(uuid.uuid4())

        with patch.object(CompatibilityService, "analyze_application",
                          AsyncMock(side_effect=AnalysisException())):
            result = tasks.analyze_application_compatibility.run(application_id)

        assert result == {
            "status": "failed",
            "application_id": application_id,
            "error": "ANALYSIS_FAILED",
        }

    def test_unexpected_error_becomes_failed_result(self):
        application_id = str(uuid.uuid4())

        with patch.object(CompatibilityService, "analyze_application",
                          AsyncMock(side_effect=RuntimeError("boom"))):
            result = tasks.analyze_application_compatibility.run(application_id)

        assert result == {
            "status": "failed",
            "application_id": application_id,
            "error": "INTERNAL_ERROR",
        }


class TestReanalyzeCandidateApplications:

    def test_schedules_one_analysis_per_application(self):
        candidate_id = str(uuid.uuid4())
        applications = [SimpleNamespace(id=uuid.uuid4()), SimpleNamespace(id=uuid.uuid4())]
        apply_async = MagicMock(return_value=MagicMock(id="task-1"))

        with patch.object(ApplicationRepository, "find_active_for_candidate",
                          AsyncMock(return_value=applications)), \
                patch.object(tasks.analyze_application_compatibility, "apply_async", apply_async):
            result = tasks.reanalyze_candidate_applications.run(candidate_id)

        assert result == {
            "status": "scheduled",
            "candidate_id": candidate_id,
            "applications": 2,
            "scheduled": 2,
        }
        assert apply_async.call_count == 2

    def test_unexpected_error_becomes_failed_result(self):
        candidate_id = str(uuid.uuid4())

        with patch.object(ApplicationRepository, "find_active_for_candidate",
                          AsyncMock(side_effect=RuntimeError("db gone"))):
            result = tasks.reanalyze_candidate_applications.run(candidate_id)

        assert result == {
            "status": "failed",
            "candidate_id": candidate_id,
            "error": "INTERNAL_ERROR",
        }
