"""Email service for sending notifications."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from html import escape
from typing import Any

from app.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via SMTP.

    Public methods never raise: every failure is logged and reported in the
    return value.
    """

    def __init__(self):
        """Initialize email service with SMTP configuration."""
        self.smtp_host = settings.smtp_host
        self.smtp_port = settings.smtp_port
        self.smtp_user = settings.smtp_user
        self.smtp_password = settings.smtp_password
        self.from_email = settings.email_from or settings.smtp_user
        self.from_name = settings.email_from_name
        self.timeout = settings.notification_timeout_seconds

    def _validate_config(self) -> bool:
        """Validate email configuration."""
        if not all([self.smtp_host, self.smtp_user, self.smtp_password]):
            logger.warning("Email service not configured. SMTP_USER or SMTP_PASSWORD missing.")
            return False
        return True

    def _build_message(
        self, to_email: str, subject: str, html_content: str, text_content: str | None
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = to_email
        # Plain text must precede the HTML part
        if text_content:
            msg.attach(MIMEText(text_content, "plain"))
        msg.attach(MIMEText(html_content, "html"))
        return msg

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
    ) -> bool:
        """Deliver one message over STARTTLS.

        Returns:
            True if the relay accepted the message, False otherwise
        """
        if not self._validate_config():
            logger.error("Cannot send email - configuration invalid")
            return False

        msg = self._build_message(to_email, subject, html_content, text_content)
        logger.info(f"Sending email to {to_email} with subject: {subject}")
        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"❌ SMTP authentication failed: {str(e)}")
            return False
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"❌ Could not deliver email to {to_email}: {str(e)}")
            return False

        logger.info(f"✅ Email sent successfully to {to_email}")
        return True

    def send_task_assignment_email(
        self,
        to_email: str,
        task_title: str,
        project_name: str,
        assigner_name: str,
    ) -> dict[str, Any]:
        """Tell a user they were assigned a task.

        Returns:
            ``{"success": bool, "detail": str}``; the caller treats it as informational.
        """
        if not self._validate_config():
            logger.info(f"📧 Would have sent to: {to_email} | Task: {task_title}")
            return {"success": False, "detail": "Email service not configured"}

        subject = f"New Task Assigned: {task_title}"
        html_content = self._generate_assignment_html(task_title, project_name, assigner_name)
        text_content = self._generate_assignment_text(task_title, project_name, assigner_name)

        if self.send_email(to_email, subject, html_content, text_content):
            return {"success": True, "detail": f"Sent to {to_email}"}
        return {"success": False, "detail": "SMTP delivery failed"}

    def _generate_assignment_html(
        self, task_title: str, project_name: str, assigner_name: str
    ) -> str:
        """Generate HTML content for the assignment email."""
        app_url = self._app_url()
        return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
          <h2 style="color: #3B82F6; margin-bottom: 20px;">You've been assigned a new task!</h2>
          <p style="color: #374151; line-height: 1.6;">Hello,</p>
          <p style="color: #374151; line-height: 1.6;">
            <strong>{escape(assigner_name)}</strong> has assigned you a new task in the project
            <strong>{escape(project_name)}</strong>.
          </p>
          <div style="background-color: #F3F4F6; padding: 20px; border-radius: 8px; margin: 20px 0; border-left: 4px solid #3B82F6;">
            <h3 style="margin-top: 0; color: #1F2937;">{escape(task_title)}</h3>
          </div>
          <p style="color: #374151; line-height: 1.6;">
            Please log in to your account to view the task details and get started.
          </p>
          <p style="color: #6B7280; font-size: 13px;">{escape(app_url)}</p>
        </div>
        """

    def _generate_assignment_text(
        self, task_title: str, project_name: str, assigner_name: str
    ) -> str:
        """Generate plain text content for the assignment email."""
        text = "You've been assigned a new task!\n\n"
        text += f"{assigner_name} has assigned you a new task in the project {project_name}.\n\n"
        text += f"  {task_title}\n\n"
        text += f"Log in to view the task details: {self._app_url()}\n"
        return text

    def _app_url(self) -> str:
        origins = settings.allowed_origins_list
        return origins[0] if origins else "http://localhost:3000"


# Create singleton instance
email_service = EmailService()
