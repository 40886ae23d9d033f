"""Celery application for out-of-process notification delivery.

Only used when ``NOTIFICATION_BACKEND=celery``; run a worker with
``celery -A app.celery_app worker -Q notifications``.
"""

import math

from celery import Celery

from app.core.config import settings

celery_app = Celery(
    "teamtasks",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["app.tasks.notification_tasks"],
)

# A notice gets the same time budget as an inline delivery
notification_timeout = math.ceil(settings.notification_timeout_seconds)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_soft_time_limit=notification_timeout,
    task_time_limit=notification_timeout + 2,
    task_acks_late=False,
    task_always_eager=settings.is_testing,
    task_routes={"app.tasks.notification_tasks.*": {"queue": "notifications"}},
)
