"""Custom User model using bcrypt-hashed passwords and a role list.

Note: Django's built-in groups/permissions (PermissionsMixin) are not used;
authorization decisions come exclusively from the access_control policy
matrix, keyed by the role labels stored on the user.
"""

import uuid
from typing import ClassVar, Optional

from django.contrib.auth.models import AbstractBaseUser
from django.core.exceptions import ValidationError
from django.db import models

from access_control.policy import Role
from access_control.principal import UserTarget
from .managers import UserManager


def default_roles() -> list[str]:
    return [Role.USER.value]


def validate_roles(value) -> None:
    """Roles must be a non-empty list of known role labels."""
    if not isinstance(value, list) or not value:
        raise ValidationError("At least one role is required.")
    unknown = [role for role in value if role not in Role.values]
    if unknown:
        raise ValidationError(f"Unknown roles: {', '.join(map(str, unknown))}")


class User(AbstractBaseUser):
    """Account identified by username with bcrypt password hashes."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(max_length=150, unique=True)
    email = models.EmailField()
    password_hash = models.CharField(max_length=128)
    roles = models.JSONField(default=default_roles, validators=[validate_roles])
    date_joined = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS: ClassVar[list[str]] = ["email"]

    objects = UserManager()

    class Meta:
        """Default ordering shows newest users first."""
        ordering = ["-date_joined"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.username

    def as_target(self) -> UserTarget:
        return UserTarget(id=str(self.id))

    def set_password(self, raw_password: Optional[str]) -> None:  # type: ignore[override]
        """Override to ensure bcrypt hashing via manager utility."""

        if raw_password is None:
            self.password_hash = ""
        else:
            self.password_hash = UserManager.hash_password(raw_password)

    def check_password(self, raw_password: Optional[str]) -> bool:  # type: ignore[override]
        """Delegate to bcrypt verification helper."""

        if raw_password is None:
            return False
        return UserManager.verify_password(self, raw_password)


__all__ = ["User", "default_roles", "validate_roles"]
