"""
Celery application configuration.

This module sets up the Celery app with Redis as broker and backend.

The "analysis" queue is the bounded channel between request handlers and
background compatibility analysis; worker_concurrency is the pool size.
Delivery is at-most-once: tasks are acked on receipt and never retried.
"""
from celery import Celery
from celery.signals import worker_process_init

from app.core.config import settings

# Create Celery app
celery_app = Celery(
    "talentmatch_analysis",
    broker=settings.redis_url,
    backend=settings.redis_url,
)

# Configure Celery
celery_app.conf.update(
    # Serialization
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Routing
    task_default_queue=settings.analysis_queue,
    task_routes={"app.workers.tasks.*": {"queue": settings.analysis_queue}},

    # Task settings
    task_track_started=True,
    task_time_limit=settings.analysis_task_time_limit,
    task_soft_time_limit=settings.analysis_task_soft_time_limit,

    # Worker settings
    worker_prefetch_multiplier=1,  # Provider calls are slow; don't hoard
    task_acks_late=False,  # Ack on receipt: at-most-once
    worker_concurrency=settings.analysis_worker_concurrency,

    # Result settings
    result_expires=3600,  # Results expire after 1 hour

    # Retry settings
    task_max_retries=0,
)

# Auto-discover tasks from workers module
celery_app.autodiscover_tasks(["app.workers"])


@worker_process_init.connect
def _init_worker_process(**kwargs):
    """Per-process setup: logging and optional-table capabilities."""
    from app.core.logging import setup_logging
    from app.workers.tasks import resolve_worker_capabilities

    setup_logging()
    resolve_worker_capabilities()
