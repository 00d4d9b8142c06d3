"""Token service for JWT issuance, verification, and refresh.

Tokens are stateless: validity is fully determined by the HMAC signature and
the expiry claim. Every token carries::

    {"iss", "sub", "roles", "iat", "exp", "jti", "type"}

where ``type`` is ``access`` or ``refresh``. Only the refresh kind can be
exchanged for a new pair.
"""

import binascii
import functools
import time
import uuid
from datetime import timedelta
from typing import Any, Callable, Iterable, Tuple

import jwt
from django.conf import settings
from jwt.utils import base64url_decode, base64url_encode
from rest_framework.exceptions import AuthenticationFailed

from access_control.policy import Role

ACCESS = "access"
REFRESH = "refresh"

REQUIRED_CLAIMS = ["iss", "sub", "roles", "iat", "exp"]


class TokenError(AuthenticationFailed):
    """Base class for recoverable token failures (mapped to 401)."""

    default_detail = "Invalid token"
    default_code = "invalid_token"


class MalformedToken(TokenError):
    default_detail = "Malformed token"
    default_code = "malformed_token"


class InvalidSignature(TokenError):
    default_detail = "Invalid token signature"
    default_code = "invalid_signature"


class Expired(TokenError):
    default_detail = "Token has expired"
    default_code = "token_expired"


class InvalidClaims(TokenError):
    default_detail = "Invalid token claims"
    default_code = "invalid_claims"


class SigningError(RuntimeError):
    """Raised when a token cannot be signed (broken key configuration)."""


class TokenService:
    """Issue, verify, and refresh HMAC-signed session tokens."""

    ALGORITHM = "HS256"

    def __init__(
            self,
            secret: str,
            access_ttl: timedelta,
            refresh_ttl: timedelta,
            issuer: str,
            clock: Callable[[], float] = time.time,
    ):
        self.secret = secret
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.issuer = issuer
        self._clock = clock

    def issue(self, principal_id: Any, roles: Iterable[str]) -> Tuple[str, str]:
        """Return a fresh ``(access_token, refresh_token)`` pair."""

        roles = [str(role) for role in roles]
        if not roles:
            raise ValueError("Cannot issue a token for a principal without roles")

        now = int(self._clock())
        access_payload = self._build_payload(principal_id, roles, ACCESS, now, self.access_ttl)
        refresh_payload = self._build_payload(principal_id, roles, REFRESH, now, self.refresh_ttl)
        return self._sign(access_payload), self._sign(refresh_payload)

    def _build_payload(self, principal_id, roles, token_type: str, issued_at: int, ttl: timedelta) -> dict[str, Any]:
        return {
            "iss": self.issuer,
            "sub": str(principal_id),
            "roles": list(roles),
            "iat": issued_at,
            "exp": issued_at + int(ttl.total_seconds()),
            "jti": str(uuid.uuid4()),
            "type": token_type,
        }

    def _sign(self, payload: dict[str, Any]) -> str:
        try:
            return jwt.encode(payload, self.secret, algorithm=self.ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise SigningError("Unable to sign session token") from exc

    def verify(self, token: str, expected_type: str | None = None) -> Tuple[str, Tuple[Role, ...]]:
        """Validate ``token`` and return its ``(subject, roles)``."""

        now = self._clock()
        payload = self._decode(token)

        exp = payload["exp"]
        if not _is_number(exp) or not _is_number(payload["iat"]):
            raise InvalidClaims("Token timestamps must be numeric")
        if now >= exp:
            raise Expired()

        subject = payload["sub"]
        if not isinstance(subject, str) or not subject:
            raise InvalidClaims("Token subject is missing")

        roles = payload["roles"]
        if not isinstance(roles, list) or not roles:
            raise InvalidClaims("Token roles must be a non-empty list")
        try:
            decoded_roles = tuple(Role(role) for role in roles)
        except (TypeError, ValueError) as exc:
            raise InvalidClaims("Token carries an unknown role") from exc

        if expected_type is not None and payload.get("type") != expected_type:
            raise InvalidClaims("Invalid token type")

        return subject, decoded_roles

    def _decode(self, token: str) -> dict[str, Any]:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as exc:
            raise MalformedToken() from exc

        # Reject algorithm confusion ("none", RS256 with a public key as secret, ...)
        # before the secret is ever used.
        if header.get("alg") != self.ALGORITHM:
            raise InvalidSignature("Unexpected signing algorithm")
        _check_signature_segment(token)

        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.ALGORITHM],
                issuer=self.issuer,
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
            raise InvalidSignature() from exc
        except jwt.DecodeError as exc:
            raise MalformedToken() from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidClaims(str(exc)) from exc

    def refresh(self, refresh_token: str) -> Tuple[str, str]:
        """Exchange a valid refresh token for a new token pair."""

        principal_id, roles = self.verify(refresh_token, expected_type=REFRESH)
        return self.issue(principal_id, roles)


def _check_signature_segment(token: str) -> None:
    """Reject a signature segment that is not canonical base64url.

    PyJWT reports such segments as ``DecodeError``; a damaged signature is a
    signature failure, not a malformed token.
    """
    segment = token.rsplit(".", 1)[-1]
    try:
        signature = base64url_decode(segment)
    except (binascii.Error, ValueError) as exc:
        raise InvalidSignature() from exc
    if not signature or base64url_encode(signature).decode("ascii") != segment:
        raise InvalidSignature()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@functools.lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    """Return the process-wide TokenService configured from settings."""

    return TokenService(
        secret=settings.JWT_SECRET,
        access_ttl=timedelta(minutes=settings.JWT_ACCESS_TTL_MINUTES),
        refresh_ttl=timedelta(minutes=settings.JWT_REFRESH_TTL_MINUTES),
        issuer=settings.JWT_ISSUER,
    )


__all__ = [
    "ACCESS",
    "REFRESH",
    "Expired",
    "InvalidClaims",
    "InvalidSignature",
    "MalformedToken",
    "SigningError",
    "TokenError",
    "TokenService",
    "get_token_service",
]
