"""
Rate limiting configuration using slowapi.

Uses Redis as the backend so limits are shared across workers.
Provides pre-configured limiters for different endpoint categories.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from app.core.config import settings


def _get_candidate_or_ip(request: Request) -> str:
    """
    Rate-limit key: the candidate in the path if there is one, otherwise
    client IP.

    AI-backed endpoints are keyed per candidate so one busy profile cannot
    exhaust the provider budget of everyone behind the same address.
    """
    candidate_id = request.path_params.get("candidate_id")
    if candidate_id:
        return f"candidate:{candidate_id}"
    return get_remote_address(request)


limiter = Limiter(
    key_func=_get_candidate_or_ip,
    storage_uri=settings.redis_url,
    strategy="fixed-window",
)

# Pre-defined rate limit strings for use in route decorators:
#   @limiter.limit(RATE_AI)
RATE_AI = "30/hour"              # analyze, roadmap: OpenAI cost control
RATE_INVALIDATE = "60/minute"    # cascade triggers
