"""
Optional-table capability flags.

Deployments may run without some cache tables (older schemas, partial
migrations). Rather than probing with a failing query on every request, the
set of available tables is inspected once at startup and frozen here.
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.logging import get_logger

logger = get_logger(__name__)

SKILL_MATCH_TABLE = "job_skill_analysis"
RECOMMENDATION_TABLE = "job_skill_recommendations"
ROADMAP_TABLE = "candidate_learning_roadmaps"


@dataclass(frozen=True)
class Capabilities:
    skill_match_cache: bool = True
    recommendation_cache: bool = True
    roadmap_cache: bool = True


_capabilities: Optional[Capabilities] = None


async def resolve_capabilities(engine: AsyncEngine) -> Capabilities:
    """Inspect the schema once and record which cache tables exist."""
    async with engine.connect() as conn:
        tables = set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))

    caps = Capabilities(
        skill_match_cache=SKILL_MATCH_TABLE in tables,
        recommendation_cache=RECOMMENDATION_TABLE in tables,
        roadmap_cache=ROADMAP_TABLE in tables,
    )
    set_capabilities(caps)
    logger.info(
        "capabilities_resolved",
        skill_match_cache=caps.skill_match_cache,
        recommendation_cache=caps.recommendation_cache,
        roadmap_cache=caps.roadmap_cache,
    )
    return caps


def set_capabilities(caps: Capabilities) -> None:
    global _capabilities
    _capabilities = caps


def get_capabilities() -> Capabilities:
    """Resolved flags; everything enabled if startup has not resolved them."""
    return _capabilities or Capabilities()
