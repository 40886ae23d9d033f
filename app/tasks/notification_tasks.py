"""Celery tasks for notifications."""

import logging
from typing import Any

from celery.exceptions import SoftTimeLimitExceeded

from app.celery_app import celery_app
from app.services.email_service import email_service

logger = logging.getLogger(__name__)


@celery_app.task(name="app.tasks.notification_tasks.send_assignment_email_task", bind=True)
def send_assignment_email_task(
    self,
    to_email: str,
    task_title: str,
    project_name: str,
    assigner_name: str,
) -> dict[str, Any]:
    """Send a task assignment email from a worker.

    Single attempt: a failure is logged and reported, never retried.

    Returns:
        Dictionary with the delivery result
    """
    logger.info(f"📧 Sending assignment notice to {to_email} (Task ID: {self.request.id})")

    try:
        result = email_service.send_task_assignment_email(
            to_email, task_title, project_name, assigner_name
        )
    except SoftTimeLimitExceeded:
        logger.warning(f"⏱️ Assignment notice to {to_email} exceeded its time limit")
        return {"success": False, "detail": "Timed out"}

    if result.get("success"):
        logger.info(f"✅ Assignment notice sent to {to_email}")
    else:
        logger.warning(f"❌ Assignment notice to {to_email} not sent: {result.get('detail')}")
    return result
