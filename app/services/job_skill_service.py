"""
Job skill service - (re)extracts a job's skill list with the inference
provider, replaces the stored list with it, and fires the job invalidation
cascade. Manually entered skills reach the provider prompt and come back as
required, so the extracted list is authoritative.
"""
from typing import Any, Dict, List, Optional
from uuid import UUID

from app.core import ai
from app.core.database import DBScope
from app.core.exceptions import JobNotFoundException, MissingIdentifierException
from app.core.logging import get_logger
from app.models.job import Job
from app.models.job_skill import JobSkill
from app.repositories.job_repository import JobRepository
from app.services.invalidation_service import InvalidationService
from app.services.skill_aggregator import normalize_skill_name

logger = get_logger(__name__)

def dedupe_extracted_skills(extracted: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """First entry wins when the provider names a skill twice."""
    unique: List[Dict[str, Any]] = []
    seen = set()
    for entry in extracted:
        key = normalize_skill_name(entry["skill_name"])
        if key and key not in seen:
            seen.add(key)
            unique.append(entry)
    return unique


class JobSkillService:
    def __init__(
        self,
        provider=None,
        job_repo: Optional[JobRepository] = None,
        invalidation_service: Optional[InvalidationService] = None,
    ):
        self.provider = provider or ai
        self.job_repo = job_repo or JobRepository()
        self.invalidation_service = invalidation_service or InvalidationService()

    async def refresh_job_skills(
        self,
        scope: DBScope,
        job_id: Optional[UUID],
    ) -> List[JobSkill]:
        """
        Extract skills from the job's text, replace the stored list and
        invalidate everything computed from the old list.

        Raises:
            JobNotFoundException: job does not exist.
            AnalysisException: provider unreachable or malformed response;
                the stored list is left untouched.
        """
        if not job_id:
            raise MissingIdentifierException("job_id")

        job = await self.job_repo.get_with_skills(scope.elevated, job_id)
        if not job:
            raise JobNotFoundException()

        extracted = await self.provider.extract_job_skills(self._job_payload(job))
        skills = dedupe_extracted_skills(extracted)

        stored = await self.job_repo.replace_skills(scope.elevated, job_id, skills)
        await scope.elevated.commit()

        logger.info(
            "job_skills_refreshed",
            job_id=str(job_id),
            extracted=len(extracted),
            stored=len(stored),
        )
        await self.invalidation_service.invalidate_job(scope, job_id)
        return stored

    @staticmethod
    def _job_payload(job: Job) -> Dict[str, Any]:
        return {
            "title": job.title,
            "experience_level": job.experience_level,
            "description": job.description,
            "responsibilities": job.responsibilities,
            "qualifications": job.qualifications,
            "nice_to_have": job.nice_to_have,
            "skills": [s.skill_name for s in job.skills],
        }
