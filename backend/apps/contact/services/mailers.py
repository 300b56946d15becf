"""Pluggable delivery of contact notification emails."""

from __future__ import annotations

import html
from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.utils import make_msgid
from typing import Optional
from urllib.parse import urlparse

import httpx
from django.conf import settings
from django.core.mail import EmailMultiAlternatives

SENDGRID_BASE_URL = "https://api.sendgrid.com/v3"
RESEND_BASE_URL = "https://api.resend.com"
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass
class EmailMessage:
    to: str
    from_email: str
    subject: str
    html: str
    text: str
    reply_to: Optional[str] = None


@dataclass
class EmailResult:
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class EmailService(ABC):
    name: str = "email"

    @abstractmethod
    def send(self, message: EmailMessage) -> EmailResult: ...


class DjangoMailEmailService(EmailService):
    """Deliver through Django's configured ``EMAIL_BACKEND``."""

    name = "django"

    def send(self, message: EmailMessage) -> EmailResult:
        message_id = make_msgid()
        mail = EmailMultiAlternatives(
            subject=message.subject,
            body=message.text,
            from_email=message.from_email,
            to=[message.to],
            reply_to=[message.reply_to] if message.reply_to else None,
            headers={"Message-ID": message_id},
        )
        mail.attach_alternative(message.html, "text/html")
        try:
            sent = mail.send(fail_silently=False)
        except Exception as exc:
            return EmailResult(success=False, error=str(exc))
        if not sent:
            return EmailResult(success=False, error="Mail backend reported no messages sent")
        return EmailResult(success=True, message_id=message_id)


class _HTTPEmailService(EmailService):
    base_url: str = ""

    def __init__(
        self,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError(f"{type(self).__name__} requires an API key")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
            transport=self.transport,
        )


class SendGridEmailService(_HTTPEmailService):
    name = "sendgrid"
    base_url = SENDGRID_BASE_URL

    def send(self, message: EmailMessage) -> EmailResult:
        payload: dict = {
            "personalizations": [{"to": [{"email": message.to}]}],
            "from": {"email": message.from_email},
            "subject": message.subject,
            "content": [
                {"type": "text/plain", "value": message.text or message.html},
                {"type": "text/html", "value": message.html},
            ],
        }
        if message.reply_to:
            payload["reply_to"] = {"email": message.reply_to}

        try:
            with self._client() as client:
                response = client.post("/mail/send", json=payload)
        except httpx.HTTPError as exc:
            return EmailResult(success=False, error=str(exc))

        if response.is_error:
            return EmailResult(success=False, error=response.text)
        return EmailResult(success=True, message_id=response.headers.get("x-message-id"))


class ResendEmailService(_HTTPEmailService):
    name = "resend"
    base_url = RESEND_BASE_URL

    def send(self, message: EmailMessage) -> EmailResult:
        payload: dict = {
            "from": message.from_email,
            "to": message.to,
            "subject": message.subject,
            "html": message.html,
            "text": message.text,
        }
        if message.reply_to:
            payload["reply_to"] = message.reply_to

        try:
            with self._client() as client:
                response = client.post("/emails", json=payload)
        except httpx.HTTPError as exc:
            return EmailResult(success=False, error=str(exc))

        if response.is_error:
            return EmailResult(success=False, error=response.text)
        try:
            data = response.json()
        except ValueError:
            data = {}
        message_id = data.get("id") if isinstance(data, dict) else None
        return EmailResult(success=True, message_id=message_id)


def get_email_service() -> EmailService:
    """Pick a provider: SendGrid, then Resend, then Django's mail backend."""

    timeout = float(getattr(settings, "EMAIL_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))

    sendgrid_key = getattr(settings, "SENDGRID_API_KEY", None)
    if sendgrid_key:
        return SendGridEmailService(sendgrid_key, timeout=timeout)

    resend_key = getattr(settings, "RESEND_API_KEY", None)
    if resend_key:
        return ResendEmailService(resend_key, timeout=timeout)

    return DjangoMailEmailService()


def default_from_address() -> str:
    configured = getattr(settings, "CONTACT_EMAIL_FROM", None)
    if configured:
        return configured
    site_url = getattr(settings, "SITE_URL", "") or ""
    host = urlparse(site_url).netloc or site_url.replace("https://", "").replace("http://", "")
    return f"noreply@{host or 'portfolio.com'}"


def format_contact_email(
    *,
    name: str,
    email: str,
    message: str,
    recipient: str,
    from_email: Optional[str] = None,
) -> EmailMessage:
    """Render the owner notification for a contact form submission."""

    safe_name = html.escape(name)
    safe_email = html.escape(email)
    safe_message = html.escape(message).replace("\n", "<br>")

    html_body = f"""<!DOCTYPE html>
<html>
  <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
      <h2>New Contact Form Submission</h2>
      <p><strong>Name:</strong><br>{safe_name}</p>
      <p><strong>Email:</strong><br>{safe_email}</p>
      <p><strong>Message:</strong><br>{safe_message}</p>
      <p style="color: #6b7280; font-size: 12px;">
        This email was sent from your portfolio contact form.
      </p>
    </div>
  </body>
</html>
"""

    text_body = (
        "New Contact Form Submission\n\n"
        f"Name: {name}\n"
        f"Email: {email}\n\n"
        "Message:\n"
        f"{message}\n"
    )

    return EmailMessage(
        to=recipient,
        from_email=from_email or default_from_address(),
        subject=f"New Contact Form Submission from {name}",
        html=html_body,
        text=text_body,
        reply_to=email,
    )


__all__ = [
    "DjangoMailEmailService",
    "EmailMessage",
    "EmailResult",
    "EmailService",
    "ResendEmailService",
    "SendGridEmailService",
    "default_from_address",
    "format_contact_email",
    "get_email_service",
]
