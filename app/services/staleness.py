"""
Staleness oracle - decides whether a cached analysis may be served.

Two policies:
  DEPENDENCY_TIMESTAMP  valid iff generated after every dependency's updated_at
  FIXED_TTL             valid iff younger than the configured TTL

Neither policy diffs fields; a missing record is simply invalid.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Sequence

from app.core.config import settings

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class StalenessPolicy(str, Enum):
    DEPENDENCY_TIMESTAMP = "dependency_timestamp"
    FIXED_TTL = "fixed_ttl"


def default_ttl() -> timedelta:
    return timedelta(days=settings.analysis_cache_ttl_days)


@dataclass
class StalenessContext:
    """
    Inputs a policy needs besides the record's own timestamp.

    dependency_timestamps: updated_at of every upstream entity (None = epoch)
    ttl: max age under FIXED_TTL
    now: evaluation instant, defaults to the current time
    """

    dependency_timestamps: Sequence[Optional[datetime]] = ()
    ttl: timedelta = field(default_factory=default_ttl)
    now: Optional[datetime] = None


def as_utc(value: datetime) -> datetime:
    """Naive timestamps are treated as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_valid(
    generated_at: Optional[datetime],
    policy: StalenessPolicy,
    context: Optional[StalenessContext] = None,
) -> bool:
    """Whether a record generated at `generated_at` is still valid under `policy`."""
    if generated_at is None:
        return False

    context = context or StalenessContext()
    generated = as_utc(generated_at)

    if policy is StalenessPolicy.DEPENDENCY_TIMESTAMP:
        return all(
            generated > (as_utc(ts) if ts is not None else EPOCH)
            for ts in context.dependency_timestamps
        )

    if policy is StalenessPolicy.FIXED_TTL:
        now = as_utc(context.now) if context.now else datetime.now(timezone.utc)
        return now - generated < context.ttl

    raise ValueError(f"Unknown staleness policy: {policy}")


def is_fresh_against(
    generated_at: Optional[datetime],
    *dependency_timestamps: Optional[datetime],
) -> bool:
    return is_valid(
        generated_at,
        StalenessPolicy.DEPENDENCY_TIMESTAMP,
        StalenessContext(dependency_timestamps=dependency_timestamps),
    )


def is_within_ttl(
    generated_at: Optional[datetime],
    *,
    now: Optional[datetime] = None,
    ttl: Optional[timedelta] = None,
) -> bool:
    return is_valid(
        generated_at,
        StalenessPolicy.FIXED_TTL,
        StalenessContext(now=now, ttl=ttl or default_ttl()),
    )
