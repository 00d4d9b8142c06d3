"""Settings for the test-suite: in-memory SQLite and cheap bcrypt."""

from .settings import *  # noqa: F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

BCRYPT_ROUNDS = 4
JWT_SECRET = "test-secret-key-for-session-tokens-0123456789"
JWT_ISSUER = "movie-reviews-test"
DEBUG_AUTH_ERRORS = True

for _logger in LOGGING["loggers"].values():
    _logger["level"] = "WARNING"
