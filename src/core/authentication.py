"""Authentication helpers that bridge JWT middleware into DRF.

DRF's ``Request.user`` normally relies on its own authentication classes.
Since this project verifies tokens in ``JWTAuthMiddleware``, this module
provides a lightweight authenticator that surfaces the principal already
attached to the underlying Django request. Views therefore see a
``Principal`` (never an ORM user) as ``request.user``.
"""

from typing import Any, Optional, Tuple

from rest_framework.authentication import BaseAuthentication


class MiddlewarePrincipalAuthentication(BaseAuthentication):
    """Expose ``request._request.principal`` (set by middleware) to DRF.

    This authenticator does *not* perform any credential parsing or token
    decoding. If the principal is anonymous or missing, authentication is
    skipped and DRF falls back to ``UNAUTHENTICATED_USER``.
    """

    def authenticate(self, request) -> Optional[Tuple[Any, None]]:
        # DRF's Request wraps the original Django HttpRequest as ``._request``.
        django_request = getattr(request, "_request", None)
        if django_request is None:
            return None

        principal = getattr(django_request, "principal", None)
        if principal is None or not principal.is_authenticated:
            return None

        return principal, None

    def authenticate_header(self, request) -> str:
        """Advertise the bearer scheme so DRF answers 401 rather than 403."""
        return 'Bearer realm="api"'


__all__ = ["MiddlewarePrincipalAuthentication"]
