"""Custom exception handling to enforce the API error envelope."""

import logging
from typing import Any

from django.conf import settings
from django.db import DatabaseError, IntegrityError
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, NotAuthenticated
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from authentication.services import SigningError
from core.response import api_error

logger = logging.getLogger(__name__)


def _normalize_errors(payload: Any) -> list[Any]:
    """Convert DRF's response.data into a list for the envelope."""

    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and "detail" in payload:
        # Common DRF pattern: {"detail": "..."}
        return [payload["detail"]]
    return [payload]


def custom_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """Wrap DRF errors in `{ "data": null, "errors": [...] }` shape.

    - Uses DRF's default handler to produce the base response.
    - Normalizes common auth/permission messages.
    - Optionally exposes more detailed auth errors when DEBUG_AUTH_ERRORS is enabled.
    """

    # A token that cannot be signed means the key configuration is broken; this
    # is a server fault, never an authentication failure.
    if isinstance(exc, SigningError):
        logger.error("Session token signing failed", exc_info=exc)
        return api_error(["Unable to issue session tokens."], status.HTTP_500_INTERNAL_SERVER_ERROR)

    # A constraint violation (e.g. two concurrent registrations of one username)
    # is a conflict with stored data, not an outage.
    if isinstance(exc, IntegrityError):
        logger.info("Integrity error while handling request: %s", exc)
        return api_error(["The request conflicts with existing data."], status.HTTP_409_CONFLICT)

    # Treat database errors as a temporary service outage and still respect the
    # global envelope format instead of returning Django's HTML 500 page.
    if isinstance(exc, DatabaseError):
        logger.error("Database error while handling request", exc_info=exc)
        return api_error(["Service temporarily unavailable."], status.HTTP_503_SERVICE_UNAVAILABLE)

    response = drf_exception_handler(exc, context)

    if response is None:
        return response

    # AuthenticationFailed/NotAuthenticated (token errors included) always
    # produce 401 responses.
    if isinstance(exc, (AuthenticationFailed, NotAuthenticated)):
        response.status_code = status.HTTP_401_UNAUTHORIZED

    # Successful responses are untouched here; EnvelopeMixin handles them.
    if response.status_code >= 400:
        base_errors = response.data

        if response.status_code == status.HTTP_401_UNAUTHORIZED:
            if getattr(settings, "DEBUG_AUTH_ERRORS", False):
                # Surface the specific underlying message (e.g. "Token has expired").
                errors = _normalize_errors(base_errors)
            else:
                errors = ["Authentication credentials were not provided or are invalid."]
        elif response.status_code == status.HTTP_403_FORBIDDEN:
            errors = [
                "You do not have permission to perform this action on this resource."
            ]
        else:
            errors = _normalize_errors(base_errors)

        response.data = {"data": None, "errors": errors}

    return response
