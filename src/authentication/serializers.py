"""Serializers for authentication flows and user administration."""

from typing import cast

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed, PermissionDenied

from access_control.policy import Role
from .managers import UserManager

User = get_user_model()


class RegisterSerializer(serializers.Serializer):
    """Validate and create an account with the default ``user`` role."""

    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)

    @staticmethod
    def validate_username(value):
        """Ensure the username is free before creation."""
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError("Username already in use")
        return value

    def create(self, validated_data):
        manager = cast(UserManager, User.objects)
        try:
            with transaction.atomic():
                return manager.create_user(**validated_data)
        except IntegrityError:
            # Lost a race with a concurrent registration of the same username.
            raise serializers.ValidationError({"username": ["Username already in use"]})


class LoginSerializer(serializers.Serializer):
    """Authenticate a user via username/password using bcrypt verification."""

    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        """Authenticate credentials and attach the user to validated_data."""
        try:
            user = User.objects.get(username=attrs.get("username"))
        except User.DoesNotExist:
            raise AuthenticationFailed("Invalid credentials")

        if not UserManager.verify_password(user, attrs.get("password")):
            raise AuthenticationFailed("Invalid credentials")

        attrs["user"] = user
        return attrs


class RefreshSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class UserDetailSerializer(serializers.ModelSerializer):
    """Read-only user profile payload for responses."""

    class Meta:
        """Expose identity fields and role labels."""
        model = User
        fields = ["id", "username", "email", "roles", "date_joined"]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Patchable fields for /users/me updates."""

    class Meta:
        model = User
        fields = ["username", "email"]
        extra_kwargs = {field: {"required": False} for field in fields}

    def validate(self, attrs):
        """Reject attempts to change roles through the self-service endpoint."""
        if "roles" in getattr(self, "initial_data", {}):
            raise serializers.ValidationError("Roles cannot be updated via this endpoint")
        return super().validate(attrs)


class UserUpdateSerializer(serializers.ModelSerializer):
    """Fields editable through /users/{id}/.

    Role changes are only accepted from callers holding the admin role; the
    policy matrix decides whether the caller may update the account at all.
    """

    roles = serializers.ListField(
        child=serializers.ChoiceField(choices=Role.choices),
        allow_empty=False,
        required=False,
    )

    class Meta:
        model = User
        fields = ["username", "email", "roles"]
        extra_kwargs = {"username": {"required": False}, "email": {"required": False}}

    def validate_roles(self, value):
        principal = self.context["request"].user
        if Role.ADMIN not in principal.roles:
            raise PermissionDenied("Only administrators can change roles.")
        # Keep the stored order stable and free of duplicates.
        return list(dict.fromkeys(value))


__all__ = [
    "LoginSerializer",
    "ProfileUpdateSerializer",
    "RefreshSerializer",
    "RegisterSerializer",
    "UserDetailSerializer",
    "UserUpdateSerializer",
]
