"""Persist contact submissions and notify the site owner."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings

from apps.contact import models
from apps.contact.services.mailers import (
    EmailResult,
    EmailService,
    format_contact_email,
    get_email_service,
)

logger = logging.getLogger(__name__)


@dataclass
class SubmissionOutcome:
    submission: models.ContactSubmission
    email_sent: bool


def submit_contact(
    *,
    name: str,
    email: str,
    message: str,
    ip_address: Optional[str],
    email_service: Optional[EmailService] = None,
) -> SubmissionOutcome:
    """Store a validated submission, then try to email the owner.

    Persistence errors propagate to the caller. Delivery problems never do:
    they are logged and reported through ``email_sent``.
    """

    submission = models.ContactSubmission.objects.create(
        name=name,
        email=email,
        message=message,
        ip_address=ip_address,
    )
    logger.info("Contact form submission %s received from %s", submission.id, email)

    result = _notify_owner(submission, email_service)
    if result.success:
        logger.info(
            "Contact form email sent for submission %s (message id %s)",
            submission.id,
            result.message_id,
        )
    else:
        logger.warning(
            "Contact form email failed for submission %s: %s",
            submission.id,
            result.error,
        )

    return SubmissionOutcome(submission=submission, email_sent=result.success)


def _notify_owner(
    submission: models.ContactSubmission,
    email_service: Optional[EmailService],
) -> EmailResult:
    owner = getattr(settings, "SITE_OWNER", {}) or {}
    recipient = owner.get("email")
    if not recipient:
        return EmailResult(success=False, error="No site owner email configured")

    message = format_contact_email(
        name=submission.name,
        email=submission.email,
        message=submission.message,
        recipient=recipient,
    )
    try:
        service = email_service or get_email_service()
        return service.send(message)
    except Exception as exc:
        logger.exception("Email provider raised while notifying for submission %s", submission.id)
        return EmailResult(success=False, error=str(exc))


def list_submissions(limit: int = 50, offset: int = 0) -> list[models.ContactSubmission]:
    """Most recent submissions first."""

    limit = max(1, min(limit, 200))
    offset = max(0, offset)
    return list(models.ContactSubmission.objects.order_by("-created_at")[offset : offset + limit])


def mark_submission_read(submission_id) -> bool:
    """Mark a submission as read; ``False`` when it does not exist."""

    submission = models.ContactSubmission.objects.filter(pk=submission_id).first()
    if submission is None:
        return False
    submission.mark_as_read()
    return True


def delete_submission(submission_id) -> bool:
    deleted, _ = models.ContactSubmission.objects.filter(pk=submission_id).delete()
    return deleted > 0


__all__ = [
    "SubmissionOutcome",
    "delete_submission",
    "list_submissions",
    "mark_submission_read",
    "submit_contact",
]
