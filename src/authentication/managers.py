"""Custom user manager handling bcrypt hashing and verification."""

import uuid

import bcrypt
from django.conf import settings
from django.contrib.auth.base_user import BaseUserManager

from access_control.policy import Role


class UserManager(BaseUserManager):
    """Manager to create users with bcrypt password hashes."""

    use_in_migrations = True

    def _create_user(self, username: str, email: str, password: str, **extra_fields):
        if not username:
            raise ValueError("The username must be set")
        email = self.normalize_email(email)
        user = self.model(id=uuid.uuid4(), username=username, email=email, **extra_fields)
        user.password_hash = self.hash_password(password)
        user.full_clean(exclude=["password"])
        user.save(using=self._db)
        return user

    def create_user(self, username: str, email: str, password: str | None = None, **extra_fields):
        """Create an account holding the default ``user`` role."""
        extra_fields.setdefault("roles", [Role.USER.value])
        if password is None:
            raise ValueError("Password must be provided")
        return self._create_user(username, email, password, **extra_fields)

    def create_superuser(self, username: str, email: str, password: str, **extra_fields):
        """Create an account holding the ``admin`` role."""
        extra_fields.setdefault("roles", [Role.ADMIN.value])
        if Role.ADMIN.value not in extra_fields["roles"]:
            raise ValueError("Superuser must hold the admin role.")
        return self._create_user(username, email, password, **extra_fields)

    @staticmethod
    def hash_password(raw_password: str) -> str:
        """Hash a raw password using bcrypt and return the utf-8 string."""
        salt = bcrypt.gensalt(rounds=getattr(settings, "BCRYPT_ROUNDS", 12))
        hashed = bcrypt.hashpw(raw_password.encode(), salt)
        return hashed.decode()

    @staticmethod
    def verify_password(user, raw_password: str) -> bool:
        """Verify raw password against stored bcrypt hash."""

        if not user.password_hash:
            return False
        return bcrypt.checkpw(raw_password.encode(), user.password_hash.encode("utf-8"))


__all__ = ["UserManager"]
