"""Value types the decision engine reasons about.

``Principal`` is the authenticated actor recovered from a session token (or
the anonymous actor when there is none). Targets are frozen snapshots of the
stored entity an action is aimed at, so the engine never touches the ORM.
"""

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Optional


@dataclass(frozen=True)
class Principal:
    """Identifier plus role set of the caller."""

    id: Optional[str]
    roles: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_claims(cls, principal_id: Any, roles) -> "Principal":
        return cls(id=str(principal_id), roles=frozenset(roles))

    # DRF reads these two flags off ``request.user``.
    @property
    def is_authenticated(self) -> bool:
        return self.id is not None

    @property
    def is_anonymous(self) -> bool:
        return self.id is None

    @property
    def pk(self) -> Optional[str]:
        return self.id


ANONYMOUS = Principal(id=None)


def anonymous_principal() -> Principal:
    """Factory used as DRF's ``UNAUTHENTICATED_USER``."""
    return ANONYMOUS


@dataclass(frozen=True)
class UserTarget:
    id: str


@dataclass(frozen=True)
class ReviewTarget:
    owner_id: str
    is_private: bool = False


def same_id(left: Any, right: Any) -> bool:
    """Compare identifiers by value; ``None`` never matches anything."""
    if left is None or right is None:
        return False
    return str(left) == str(right)


__all__ = [
    "ANONYMOUS",
    "Principal",
    "ReviewTarget",
    "UserTarget",
    "anonymous_principal",
    "same_id",
]
