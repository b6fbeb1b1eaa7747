# aspas/services/email.py
"""
Transactional mail through the Resend API.

Every send returns an ``EmailResult`` instead of raising: callers treat mail as
best effort, so a provider outage must never fail the business operation that
triggered it.
"""
import asyncio
import logging
from dataclasses import dataclass
from html import escape

import resend

from aspas.config import settings

logger = logging.getLogger("uvicorn.error")

BRAND_NAME = "Aspas Note"


@dataclass
class EmailResult:
    success: bool
    message: str


def _layout(title: str, body: str) -> str:
    return f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h1 style="color: #333; text-align: center;">{title}</h1>
        {body}
        <p>Best regards,<br>The {BRAND_NAME} team</p>
      </div>
    """


class EmailService:
    """
    Sends the welcome and password recovery mails.

    Args:
        api_key: Resend API key; when missing, sends are skipped (logged as warnings)
        sender: Sender address, e.g. "no-reply@aspas.app"
    """

    def __init__(self, api_key: str | None = None, sender: str | None = None):
        self.api_key = api_key
        self.sender = sender

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.sender)

    async def send(self, to: str, subject: str, html: str) -> EmailResult:
        if not self.enabled:
            logger.warning("[email] Mail not configured, skipping '%s' to %s", subject, to)
            return EmailResult(False, "Email service not configured")

        params = {
            "from": f"{BRAND_NAME} <{self.sender}>",
            "to": [to],
            "subject": subject,
            "html": html,
        }
        try:
            resend.api_key = self.api_key
            # The Resend SDK is synchronous; keep the event loop free
            await asyncio.to_thread(resend.Emails.send, params)
        except Exception as e:
            logger.error("[email] Failed to send '%s' to %s: %s", subject, to, e)
            return EmailResult(False, "Could not send email")
        logger.info("[email] Sent '%s' to %s", subject, to)
        return EmailResult(True, "Email sent")

    async def send_welcome(self, name: str, email: str) -> EmailResult:
        html = _layout(
            f"Welcome to {BRAND_NAME}!",
            f"""
            <p>Hello {escape(name)},</p>
            <p>Welcome aboard! We are happy to have you in our community.</p>
            <p>If you have any questions, just reply to this email.</p>
            """,
        )
        return await self.send(email, f"Welcome to {BRAND_NAME}!", html)

    async def send_password_recovery(self, name: str, email: str, reset_link: str) -> EmailResult:
        html = _layout(
            "Password recovery",
            f"""
            <p>Hello {escape(name)},</p>
            <p>We received a request to reset your password. Click the button below to choose a new one:</p>
            <p style="text-align: center;">
              <a href="{escape(reset_link, quote=True)}"
                 style="display: inline-block; padding: 10px 20px; background-color: #4CAF50; color: white; text-decoration: none; border-radius: 5px;">Reset password</a>
            </p>
            <p>If you did not ask for this, ignore this email.</p>
            <p>The link is valid for {settings.password_reset_ttl_minutes} minutes.</p>
            """,
        )
        return await self.send(email, f"Password recovery - {BRAND_NAME}", html)


def get_email_service() -> EmailService:
    """FastAPI dependency (overridden in tests)."""
    return EmailService(api_key=settings.resend_api_key, sender=settings.email_sender)
