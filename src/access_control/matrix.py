"""The application's permission matrix.

``REGISTRY`` is built exactly once, when this module is first imported, and is
shared read-only by every request for the lifetime of the process.
"""

from .policy import (
    ActionType,
    PolicyBuilder,
    PolicyRegistry,
    ResourceType,
    ReviewRule,
    Role,
    UserRule,
)
from .principal import same_id


def _is_self(principal, target) -> bool:
    return same_id(principal.id, target.id)


def _is_review_owner(principal, target) -> bool:
    return same_id(principal.id, target.owner_id)


def _can_see_review(principal, target) -> bool:
    return not target.is_private or same_id(principal.id, target.owner_id)


IS_SELF = UserRule(check=_is_self, label="self")
IS_REVIEW_OWNER = ReviewRule(check=_is_review_owner, label="owner")
PUBLIC_OR_OWNER = ReviewRule(check=_can_see_review, label="public_or_owner")


def build_default_registry() -> PolicyRegistry:
    builder = PolicyBuilder()

    builder.allow_all(Role.ADMIN)

    builder.allow(Role.MODERATOR, ResourceType.USER, ActionType.VIEW, ActionType.UPDATE, ActionType.DELETE)
    builder.allow(Role.MODERATOR, ResourceType.MOVIE, *ActionType)
    builder.allow(Role.MODERATOR, ResourceType.REVIEW, ActionType.VIEW, ActionType.DELETE)

    builder.allow(Role.USER, ResourceType.USER, ActionType.CREATE, ActionType.VIEW)
    builder.rule(Role.USER, ResourceType.USER, ActionType.UPDATE, IS_SELF)
    builder.rule(Role.USER, ResourceType.USER, ActionType.DELETE, IS_SELF)
    builder.allow(Role.USER, ResourceType.MOVIE, ActionType.VIEW)
    builder.allow(Role.USER, ResourceType.REVIEW, ActionType.CREATE)
    builder.rule(Role.USER, ResourceType.REVIEW, ActionType.VIEW, PUBLIC_OR_OWNER)
    builder.rule(Role.USER, ResourceType.REVIEW, ActionType.UPDATE, IS_REVIEW_OWNER)
    builder.rule(Role.USER, ResourceType.REVIEW, ActionType.DELETE, IS_REVIEW_OWNER)

    return builder.build()


REGISTRY = build_default_registry()


__all__ = ["REGISTRY", "build_default_registry"]
