"""Read-only view of the policy matrix."""

from rest_framework.permissions import IsAuthenticated

from core.response import BaseAPIView, api_response
from .matrix import REGISTRY
from .serializers import PolicyEntrySerializer


class PolicyView(BaseAPIView):
    """List every rule in the registry.

    With ``?mine=true`` only the rows for the caller's own roles are returned,
    which clients use to decide which controls to show.
    """

    permission_classes = [IsAuthenticated]

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        entries = list(REGISTRY.entries())
        if request.query_params.get("mine", "").lower() in ("1", "true", "yes"):
            roles = request.user.roles
            entries = [entry for entry in entries if entry[0] in roles]
        return api_response(PolicyEntrySerializer(entries, many=True).data)


__all__ = ["PolicyView"]
