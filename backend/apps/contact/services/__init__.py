"""Contact service helpers."""

from .mailers import (
    DjangoMailEmailService,
    EmailMessage,
    EmailResult,
    EmailService,
    ResendEmailService,
    SendGridEmailService,
    format_contact_email,
    get_email_service,
)
from .notifier import (
    SubmissionOutcome,
    delete_submission,
    list_submissions,
    mark_submission_read,
    submit_contact,
)

__all__ = [
    "DjangoMailEmailService",
    "EmailMessage",
    "EmailResult",
    "EmailService",
    "ResendEmailService",
    "SendGridEmailService",
    "SubmissionOutcome",
    "delete_submission",
    "format_contact_email",
    "get_email_service",
    "list_submissions",
    "mark_submission_read",
    "submit_contact",
]
