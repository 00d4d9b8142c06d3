"""Shared helpers for tests (accounts, authenticated clients, token services)."""

from __future__ import annotations

from datetime import timedelta
from typing import Iterable

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from access_control.policy import Role
from authentication.managers import UserManager
from authentication.services import TokenService, get_token_service
from movies.models import Movie
from reviews.models import DEFAULT_CATEGORIES, ReviewCategory

User = get_user_model()


class FakeClock:
    """Manually advanced clock for deterministic token lifetimes."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_token_service(clock=None, **overrides) -> TokenService:
    """Build a TokenService with the test settings, optionally on a fake clock."""
    options = {
        "secret": settings.JWT_SECRET,
        "access_ttl": timedelta(minutes=settings.JWT_ACCESS_TTL_MINUTES),
        "refresh_ttl": timedelta(minutes=settings.JWT_REFRESH_TTL_MINUTES),
        "issuer": settings.JWT_ISSUER,
    }
    options.update(overrides)
    if clock is not None:
        options["clock"] = clock
    return TokenService(**options)


def create_user(username: str, password: str = "Password123", roles: Iterable[Role] = (Role.USER,), **extra):
    """Create a user with a bcrypt-hashed password for tests."""

    return User.objects.create(
        username=username,
        email=extra.pop("email", f"{username}@example.com"),
        password_hash=UserManager.hash_password(password),
        roles=[Role(role).value for role in roles],
        **extra,
    )


def auth_client(user) -> APIClient:
    """Return an APIClient authenticated with a fresh access token."""
    access, _ = get_token_service().issue(user.id, user.roles)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    return client


def seed_categories() -> list:
    """Create the default review categories (migrations are skipped in tests)."""
    return [ReviewCategory.objects.get_or_create(name=name)[0] for name in DEFAULT_CATEGORIES]


def create_movie(title: str = "Solaris", year: int = 1972, **extra) -> Movie:
    return Movie.objects.create(title=title, year=year, **extra)
