"""
Interested-job service - maintains a candidate's roadmap source job set.

Any actual change to the set deletes the candidate's cached roadmap.
"""
from typing import Optional
from uuid import UUID

from app.core.database import DBScope
from app.core.exceptions import (
    CandidateNotFoundException,
    JobNotFoundException,
    MissingIdentifierException,
)
from app.core.logging import get_logger
from app.repositories.candidate_repository import CandidateRepository
from app.repositories.interested_job_repository import InterestedJobRepository
from app.repositories.job_repository import JobRepository
from app.schemas.roadmap import InterestedJobChange
from app.services.invalidation_service import InvalidationService

logger = get_logger(__name__)


class InterestedJobService:
    def __init__(
        self,
        interested_repo: Optional[InterestedJobRepository] = None,
        job_repo: Optional[JobRepository] = None,
        candidate_repo: Optional[CandidateRepository] = None,
        invalidation_service: Optional[InvalidationService] = None,
    ):
        self.interested_repo = interested_repo or InterestedJobRepository()
        self.job_repo = job_repo or JobRepository()
        self.candidate_repo = candidate_repo or CandidateRepository()
        self.invalidation_service = invalidation_service or InvalidationService()

    async def add_interested_job(
        self,
        scope: DBScope,
        candidate_id: Optional[UUID],
        job_id: Optional[UUID],
    ) -> InterestedJobChange:
        await self._validate(scope, candidate_id, job_id)
        changed = await self.interested_repo.add(scope.caller, candidate_id, job_id)
        await scope.caller.commit()
        return await self._after_change(scope, candidate_id, job_id, changed, "added")

    async def remove_interested_job(
        self,
        scope: DBScope,
        candidate_id: Optional[UUID],
        job_id: Optional[UUID],
    ) -> InterestedJobChange:
        if not candidate_id:
            raise MissingIdentifierException("candidate_id")
        if not job_id:
            raise MissingIdentifierException("job_id")
        changed = await self.interested_repo.remove(scope.caller, candidate_id, job_id)
        await scope.caller.commit()
        return await self._after_change(scope, candidate_id, job_id, changed, "removed")

    async def _validate(
        self,
        scope: DBScope,
        candidate_id: Optional[UUID],
        job_id: Optional[UUID],
    ) -> None:
        if not candidate_id:
            raise MissingIdentifierException("candidate_id")
        if not job_id:
            raise MissingIdentifierException("job_id")
        if not await self.candidate_repo.get_by_id(scope.caller, candidate_id):
            raise CandidateNotFoundException()
        if not await self.job_repo.get_by_id(scope.caller, job_id):
            raise JobNotFoundException()

    async def _after_change(
        self,
        scope: DBScope,
        candidate_id: UUID,
        job_id: UUID,
        changed: bool,
        action: str,
    ) -> InterestedJobChange:
        invalidated = False
        if changed:
            result = await self.invalidation_service.invalidate_roadmap(scope, candidate_id)
            invalidated = result.ok

        logger.info(
            f"interested_job_{action}",
            candidate_id=str(candidate_id),
            job_id=str(job_id),
            changed=changed,
        )
        return InterestedJobChange(
            candidate_id=candidate_id,
            job_id=job_id,
            changed=changed,
            roadmap_invalidated=invalidated,
        )
