"""REST API endpoints for the contact form and submission triage."""

from __future__ import annotations

import logging

from django.db import DatabaseError
from django.urls import path
from rest_framework import serializers, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.contact import models
from apps.contact.services import (
    delete_submission,
    list_submissions,
    mark_submission_read,
    submit_contact,
)
from apps.core.posthog import capture_exception
from apps.core.responses import (
    flatten_serializer_errors,
    server_error_response,
    throttled_response,
    validation_error_response,
)
from apps.core.services import (
    RateLimitConfig,
    get_client_identifier,
    get_rate_limiter,
    is_admin_request,
    rate_bucket,
    rate_limit_headers,
    sanitize_input,
    validate_contact_form,
)

app_name = "contact"

logger = logging.getLogger(__name__)

_rate_limiter = get_rate_limiter()

ADMIN_ACTIONS = ("markRead", "delete")


def _unauthorized() -> Response:
    return Response({"error": "Unauthorized"}, status=status.HTTP_401_UNAUTHORIZED)


def _int_param(request, name: str, default: int) -> int:
    try:
        return int(request.query_params.get(name, default))
    except (TypeError, ValueError):
        return default


class ContactFormSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    email = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    message = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )


class ContactSubmissionSerializer(serializers.ModelSerializer):
    ipAddress = serializers.CharField(source="ip_address", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = models.ContactSubmission
        fields = ["id", "name", "email", "message", "ipAddress", "read", "createdAt"]
        read_only_fields = fields


class AdminActionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=ADMIN_ACTIONS)
    id = serializers.UUIDField()


class ContactView(APIView):
    """Accept contact form submissions; list them for the site owner."""

    def post(self, request, *args, **kwargs):
        client_id = get_client_identifier(request)
        limit = _rate_limiter.check(
            rate_bucket("contact", client_id),
            RateLimitConfig.from_settings("contact"),
        )
        if not limit.allowed:
            logger.info("Contact rate limit exceeded for %s", client_id)
            return throttled_response(limit, "Too many requests. Please try again later.")

        serializer = ContactFormSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(flatten_serializer_errors(serializer.errors))

        name = sanitize_input(serializer.validated_data.get("name"))
        email = sanitize_input(serializer.validated_data.get("email"))
        message = sanitize_input(serializer.validated_data.get("message"))

        validation = validate_contact_form(name=name, email=email, message=message)
        if not validation.valid:
            return validation_error_response(validation.errors)

        try:
            outcome = submit_contact(
                name=name,
                email=email,
                message=message,
                ip_address=client_id,
            )
        except DatabaseError as exc:
            logger.exception("Contact submission failed to persist for client %s", client_id)
            capture_exception(exc, distinct_id=client_id, properties={"endpoint": "contact"})
            return server_error_response()

        return Response(
            {
                "success": True,
                "message": "Contact form submitted successfully",
                "submissionId": str(outcome.submission.id),
                "emailSent": outcome.email_sent,
            },
            headers=rate_limit_headers(limit),
        )

    def get(self, request, *args, **kwargs):
        if not is_admin_request(request):
            return _unauthorized()

        try:
            submissions = list_submissions(limit=_int_param(request, "limit", 10))
        except DatabaseError as exc:
            logger.exception("Failed to list contact submissions")
            capture_exception(exc, properties={"endpoint": "contact"})
            return server_error_response()

        data = ContactSubmissionSerializer(submissions, many=True).data
        return Response({"success": True, "submissions": data, "count": len(data)})


class AdminContactView(APIView):
    """Paginated listing plus read/delete actions for submissions."""

    def get(self, request, *args, **kwargs):
        if not is_admin_request(request):
            return _unauthorized()

        limit = _int_param(request, "limit", 50)
        offset = _int_param(request, "offset", 0)
        try:
            submissions = list_submissions(limit=limit, offset=offset)
            total = models.ContactSubmission.objects.count()
            unread = models.ContactSubmission.objects.filter(read=False).count()
        except DatabaseError as exc:
            logger.exception("Failed to list contact submissions for triage")
            capture_exception(exc, properties={"endpoint": "admin-contact"})
            return server_error_response()

        data = ContactSubmissionSerializer(submissions, many=True).data
        return Response(
            {
                "success": True,
                "submissions": data,
                "count": len(data),
                "total": total,
                "unread": unread,
            }
        )

    def post(self, request, *args, **kwargs):
        if not is_admin_request(request):
            return _unauthorized()

        serializer = AdminActionSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(flatten_serializer_errors(serializer.errors))

        action = serializer.validated_data["action"]
        submission_id = serializer.validated_data["id"]
        try:
            if action == "markRead":
                found = mark_submission_read(submission_id)
            else:
                found = delete_submission(submission_id)
        except DatabaseError as exc:
            logger.exception("Admin action %s failed for submission %s", action, submission_id)
            capture_exception(exc, properties={"endpoint": "admin-contact", "action": action})
            return server_error_response()

        if not found:
            return Response(
                {"error": "Submission not found"}, status=status.HTTP_404_NOT_FOUND
            )
        logger.info("Admin action %s applied to submission %s", action, submission_id)
        return Response({"success": True})


urlpatterns = [
    path("contact", ContactView.as_view(), name="contact"),
    path("admin/contact", AdminContactView.as_view(), name="admin-contact"),
]
