"""DRF permission class that routes requests through the decision engine."""

import logging

from rest_framework import permissions

from .engine import authorize
from .policy import ActionType
from .principal import ANONYMOUS

logger = logging.getLogger(__name__)

METHOD_ACTIONS = {
    "GET": ActionType.VIEW,
    "HEAD": ActionType.VIEW,
    "OPTIONS": ActionType.VIEW,
    "POST": ActionType.CREATE,
    "PUT": ActionType.UPDATE,
    "PATCH": ActionType.UPDATE,
    "DELETE": ActionType.DELETE,
}


class ABACPermission(permissions.BasePermission):
    """Check the view's ``resource_type`` against the policy matrix.

    Collection requests (list, create) are decided without a target. Detail
    requests are deferred to ``has_object_permission``, where the view's
    object is converted to a target snapshot via its ``as_target()`` method
    so ownership and visibility predicates can be evaluated.
    """

    message = "You do not have permission to perform this action on this resource."

    def has_permission(self, request, view) -> bool:
        resource_type = getattr(view, "resource_type", None)
        if not resource_type:
            return False

        principal = _principal(request)
        if _is_detail_request(view):
            return principal.is_authenticated

        action = METHOD_ACTIONS.get(request.method)
        if action is None:
            return False
        return self._decide(principal, resource_type, action, None)

    def has_object_permission(self, request, view, obj) -> bool:
        resource_type = getattr(view, "resource_type", None)
        action = METHOD_ACTIONS.get(request.method)
        if not resource_type or action is None:
            return False

        as_target = getattr(obj, "as_target", None)
        target = as_target() if callable(as_target) else None
        return self._decide(_principal(request), resource_type, action, target)

    @staticmethod
    def _decide(principal, resource_type, action, target) -> bool:
        allowed = authorize(principal, resource_type, action, target)
        if not allowed:
            logger.info(
                "Denied %s on %s for principal %s (roles=%s)",
                action,
                resource_type,
                principal.id or "<anonymous>",
                sorted(principal.roles),
            )
        return allowed


def _principal(request):
    user = getattr(request, "user", None)
    if user is None or not hasattr(user, "roles"):
        return ANONYMOUS
    return user


def _is_detail_request(view) -> bool:
    lookup_kwarg = getattr(view, "lookup_url_kwarg", None) or getattr(view, "lookup_field", None)
    return bool(lookup_kwarg) and lookup_kwarg in getattr(view, "kwargs", {})


__all__ = ["ABACPermission", "METHOD_ACTIONS"]
