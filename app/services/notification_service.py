"""Notification dispatch for task assignments."""

import asyncio
import logging
from typing import Any, Protocol

from app.core.config import NotificationBackendEnum, settings
from app.services.email_service import email_service
from app.tasks.notification_tasks import send_assignment_email_task

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def send_task_assignment_email(
        self, to_email: str, task_title: str, project_name: str, assigner_name: str
    ) -> dict[str, Any]: ...


class NotificationDispatcher:
    """Best-effort, non-blocking delivery of assignment notices.

    ``dispatch_assignment`` returns as soon as delivery has been handed off to
    a detached asyncio task bounded by ``timeout`` seconds. On the ``inline``
    backend that task calls ``notifier`` in a worker thread; on the ``celery``
    backend it publishes to the ``notifications`` queue in a worker thread, and
    the worker then sends through the module-level ``email_service``, so a
    custom ``notifier`` only applies to ``inline``. Outcomes are only logged;
    nothing raised here ever reaches the mutation that triggered it.
    """

    def __init__(
        self,
        notifier: Notifier | None = None,
        backend: NotificationBackendEnum | str | None = None,
        timeout: float | None = None,
    ):
        """Initialize the dispatcher.

        Args:
            notifier: Object that sends the notice inline; defaults to the SMTP email service
            backend: ``inline`` or ``celery``; defaults to settings
            timeout: Upper bound in seconds for one delivery or broker publish
        """
        self.backend = NotificationBackendEnum(backend or settings.notification_backend)
        self.notifier = notifier or email_service
        self.timeout = timeout if timeout is not None else settings.notification_timeout_seconds
        self._pending: set[asyncio.Task] = set()

    async def dispatch_assignment(
        self,
        to_email: str,
        task_title: str,
        project_name: str,
        assigner_name: str,
    ) -> None:
        """Hand off an assignment notice without waiting for delivery."""
        if self.backend == NotificationBackendEnum.celery:
            handoff = self.enqueue(to_email, task_title, project_name, assigner_name)
        else:
            handoff = self.deliver(to_email, task_title, project_name, assigner_name)

        try:
            task = asyncio.get_running_loop().create_task(handoff)
        except Exception as e:
            handoff.close()
            logger.error(f"❌ Could not dispatch assignment notice to {to_email}: {str(e)}")
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def enqueue(
        self,
        to_email: str,
        task_title: str,
        project_name: str,
        assigner_name: str,
    ) -> bool:
        """Publish one notice to the Celery queue, bounded by the timeout. Never raises."""
        try:
            await asyncio.wait_for(
                asyncio.to_thread(
                    send_assignment_email_task.apply_async,
                    args=[to_email, task_title, project_name, assigner_name],
                    retry=False,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"⏱️ Queueing assignment notice for {to_email} timed out after {self.timeout}s")
            return False
        except Exception as e:
            logger.error(f"❌ Could not queue assignment notice for {to_email}: {str(e)}")
            return False

        logger.info(f"📨 Queued assignment notice for {to_email}")
        return True

    async def deliver(
        self,
        to_email: str,
        task_title: str,
        project_name: str,
        assigner_name: str,
    ) -> dict[str, Any]:
        """Deliver one notice inline, bounded by the timeout. Never raises."""
        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(
                    self.notifier.send_task_assignment_email,
                    to_email,
                    task_title,
                    project_name,
                    assigner_name,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"⏱️ Assignment notice to {to_email} timed out after {self.timeout}s")
            return {"success": False, "detail": "Timed out"}
        except Exception as e:
            logger.error(f"❌ Assignment notice to {to_email} failed: {str(e)}")
            return {"success": False, "detail": str(e)}

        if result.get("success"):
            logger.info(f"✅ Assignment notice delivered to {to_email}")
        else:
            logger.warning(f"Assignment notice to {to_email} not delivered: {result.get('detail')}")
        return result

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for in-flight deliveries and queue publishes, e.g. at shutdown."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


# Create singleton instance
notification_dispatcher = NotificationDispatcher()
