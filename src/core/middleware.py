"""Middleware that recovers the calling principal from a bearer token."""

import logging

from django.utils.deprecation import MiddlewareMixin

from access_control.principal import ANONYMOUS, Principal
from authentication.services import ACCESS, TokenError, get_token_service

logger = logging.getLogger(__name__)


class JWTAuthMiddleware(MiddlewareMixin):
    """Verify the access token, if any, and attach ``request.principal``.

    A missing or invalid token never rejects the request here: the caller
    simply proceeds as the anonymous principal, and each protected view's
    authorization check answers 401/403 as appropriate.
    """

    def process_request(self, request):  # type: ignore[override]
        """Authenticate request using Bearer access token if present."""
        request.principal = ANONYMOUS

        token = get_bearer_token(request)
        if not token:
            return None

        try:
            principal_id, roles = get_token_service().verify(token, expected_type=ACCESS)
        except TokenError as exc:
            logger.warning("Rejected bearer token: %s", exc.detail)
            return None

        request.principal = Principal.from_claims(principal_id, roles)
        return None


def get_bearer_token(request) -> str | None:
    """Extract the Bearer token from Authorization header if present."""
    auth_header = request.META.get("HTTP_AUTHORIZATION", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return None


__all__ = ["JWTAuthMiddleware", "get_bearer_token"]
