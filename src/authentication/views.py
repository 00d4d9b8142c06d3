"""Account endpoints: register, login, refresh, profile, and user administration."""

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from rest_framework import mixins, status, viewsets
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from access_control.permissions import ABACPermission
from access_control.policy import ResourceType
from core.response import BaseAPIView, EnvelopeMixin, api_response
from .serializers import (
    LoginSerializer,
    ProfileUpdateSerializer,
    RefreshSerializer,
    RegisterSerializer,
    UserDetailSerializer,
    UserUpdateSerializer,
)
from .services import get_token_service

User = get_user_model()

logger = logging.getLogger(__name__)


def _token_pair(access: str, refresh: str) -> dict[str, str]:
    return {"access": access, "refresh": refresh}


class RegisterView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Create an account and sign the caller in straight away."""
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        access, refresh = get_token_service().issue(user.id, user.roles)
        logger.info("Registered user %s", user.id)
        return api_response(
            {"user": UserDetailSerializer(user).data, **_token_pair(access, refresh)},
            status=status.HTTP_201_CREATED,
        )


class LoginView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Authenticate and issue access + refresh tokens."""
        serializer = LoginSerializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except AuthenticationFailed:
            logger.info("Failed login for username %r", request.data.get("username"))
            raise
        user = serializer.validated_data["user"]
        access, refresh = get_token_service().issue(user.id, user.roles)
        return api_response(_token_pair(access, refresh))


class RefreshView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Exchange a valid refresh token for new access/refresh tokens."""
        serializer = RefreshSerializer(data=request.data)
        if not serializer.is_valid():
            raise AuthenticationFailed("Refresh token required")

        access, refresh = get_token_service().refresh(serializer.validated_data["refresh"])
        return api_response(_token_pair(access, refresh))


class MeView(BaseAPIView):
    """Self-service profile endpoints for the calling principal."""

    permission_classes = [IsAuthenticated]

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        """Return the current user's profile."""
        return api_response(UserDetailSerializer(_get_current_user(request)).data)

    # noinspection PyMethodMayBeStatic
    def patch(self, request):
        """Update username/email for the current user."""
        user = _get_current_user(request)
        serializer = ProfileUpdateSerializer(user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(UserDetailSerializer(user).data)

    put = patch

    # noinspection PyMethodMayBeStatic
    def delete(self, request):
        """Delete the current account together with its reviews."""
        user = _get_current_user(request)
        user.delete()
        # 204 responses must not include a body.
        return Response(status=status.HTTP_204_NO_CONTENT)


class UserViewSet(
    EnvelopeMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Account directory and administration, gated by the user policy rows."""

    queryset = User.objects.all()
    permission_classes = [ABACPermission]
    resource_type = ResourceType.USER

    def get_serializer_class(self):
        if self.action in ("update", "partial_update"):
            return UserUpdateSerializer
        return UserDetailSerializer

    def update(self, request, *args, **kwargs):
        """Apply the update, then answer with the full profile."""
        partial = kwargs.pop("partial", False)
        user = self.get_object()
        serializer = UserUpdateSerializer(
            user, data=request.data, partial=partial, context=self.get_serializer_context()
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(UserDetailSerializer(user).data)


def _get_current_user(request) -> User:
    """Load the account behind the authenticated principal."""
    try:
        return User.objects.get(pk=request.user.id)
    except (User.DoesNotExist, ValidationError):
        raise AuthenticationFailed("User not found")


__all__ = [
    "LoginView",
    "MeView",
    "RefreshView",
    "RegisterView",
    "UserViewSet",
]
