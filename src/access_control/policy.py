"""Policy vocabulary, permission rules, and the immutable Policy Registry.

A rule is one of three closed variants:

- ``Allow``: grants unconditionally.
- ``UserRule``: predicate over ``(principal, UserTarget)``.
- ``ReviewRule``: predicate over ``(principal, ReviewTarget)``.

Registries are assembled with ``PolicyBuilder`` and frozen by ``build()``;
after that point nothing can add, replace, or remove a rule.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterator, Mapping, Optional, Tuple, Union

from django.db import models

from .principal import Principal, ReviewTarget, UserTarget


class Role(models.TextChoices):
    ADMIN = "admin", "Admin"
    MODERATOR = "moderator", "Moderator"
    USER = "user", "User"


class ResourceType(models.TextChoices):
    USER = "user", "User"
    MOVIE = "movie", "Movie"
    REVIEW = "review", "Review"


class ActionType(models.TextChoices):
    VIEW = "view", "View"
    CREATE = "create", "Create"
    UPDATE = "update", "Update"
    DELETE = "delete", "Delete"


@dataclass(frozen=True)
class Allow:
    """Unconditional grant."""

    label: str = "allow"


@dataclass(frozen=True)
class UserRule:
    """Grant when ``check(principal, target)`` holds for a user target."""

    check: Callable[[Principal, UserTarget], bool]
    label: str


@dataclass(frozen=True)
class ReviewRule:
    """Grant when ``check(principal, target)`` holds for a review target."""

    check: Callable[[Principal, ReviewTarget], bool]
    label: str


Rule = Union[Allow, UserRule, ReviewRule]
Triple = Tuple[str, str, str]

ALLOW = Allow()

# Predicate variants are only meaningful for the resource whose target they read.
_PREDICATE_RESOURCES = {
    UserRule: ResourceType.USER,
    ReviewRule: ResourceType.REVIEW,
}


class PolicyRegistry:
    """Read-only (role, resource, action) -> rule table."""

    def __init__(self, rules: Mapping[Triple, Rule]):
        self._rules = MappingProxyType(dict(rules))

    def lookup(self, role: str, resource_type: str, action_type: str) -> Optional[Rule]:
        """Return the rule for the triple, or ``None`` when nothing is granted."""
        return self._rules.get((role, resource_type, action_type))

    def entries(self) -> Iterator[Tuple[Role, ResourceType, ActionType, Rule]]:
        """Yield every rule in role/resource/action declaration order."""
        for role in Role:
            for resource_type in ResourceType:
                for action_type in ActionType:
                    rule = self._rules.get((role.value, resource_type.value, action_type.value))
                    if rule is not None:
                        yield role, resource_type, action_type, rule

    def __len__(self) -> int:
        return len(self._rules)


class PolicyBuilder:
    """Collect rules and freeze them into a ``PolicyRegistry``.

    The builder refuses duplicate triples and predicate variants registered
    against a resource whose targets they cannot read, so a successfully built
    registry never holds ambiguous or mistyped rules.
    """

    def __init__(self):
        self._rules: dict[Triple, Rule] = {}
        self._built = False

    def allow(self, role: Role, resource_type: ResourceType, *actions: ActionType) -> "PolicyBuilder":
        """Grant ``actions`` on ``resource_type`` to ``role`` unconditionally."""
        for action in actions:
            self.rule(role, resource_type, action, ALLOW)
        return self

    def allow_all(self, role: Role) -> "PolicyBuilder":
        """Grant every action on every resource to ``role``."""
        for resource_type in ResourceType:
            self.allow(role, resource_type, *ActionType)
        return self

    def rule(self, role: Role, resource_type: ResourceType, action: ActionType, rule: Rule) -> "PolicyBuilder":
        if self._built:
            raise RuntimeError("PolicyBuilder has already been built")
        if not isinstance(rule, (Allow, UserRule, ReviewRule)):
            raise TypeError(f"Unsupported rule type: {type(rule).__name__}")

        role, resource_type, action = Role(role), ResourceType(resource_type), ActionType(action)
        expected_resource = _PREDICATE_RESOURCES.get(type(rule))
        if expected_resource is not None and expected_resource != resource_type:
            raise ValueError(
                f"{type(rule).__name__} cannot guard resource '{resource_type}' "
                f"(only '{expected_resource}')"
            )

        key = (role.value, resource_type.value, action.value)
        if key in self._rules:
            raise ValueError(f"Duplicate rule for {role}/{resource_type}/{action}")
        self._rules[key] = rule
        return self

    def build(self) -> PolicyRegistry:
        self._built = True
        return PolicyRegistry(self._rules)


__all__ = [
    "ALLOW",
    "ActionType",
    "Allow",
    "PolicyBuilder",
    "PolicyRegistry",
    "ResourceType",
    "ReviewRule",
    "Role",
    "Rule",
    "UserRule",
]
