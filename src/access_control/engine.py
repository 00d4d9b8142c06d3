"""Attribute-based authorization decisions.

``authorize`` is a pure function over the principal, the requested
(resource, action) pair, an optional target snapshot, and the immutable
registry. Roles are combined disjunctively: any role that grants wins.
"""

from typing import Optional, Union

from .matrix import REGISTRY
from .policy import Allow, PolicyRegistry, ReviewRule, Rule, UserRule
from .principal import Principal, ReviewTarget, UserTarget

Target = Union[UserTarget, ReviewTarget]


def authorize(
        principal: Principal,
        resource_type: str,
        action_type: str,
        target: Optional[Target] = None,
        registry: Optional[PolicyRegistry] = None,
) -> bool:
    """Return True if any of the principal's roles permits the action."""

    if registry is None:
        registry = REGISTRY

    for role in principal.roles:
        rule = registry.lookup(role, resource_type, action_type)
        if rule is None:
            continue
        if evaluate(rule, principal, target):
            return True
    return False


def evaluate(rule: Rule, principal: Principal, target: Optional[Target]) -> bool:
    """Evaluate a single rule; a predicate without a matching target is unsatisfied."""

    if isinstance(rule, Allow):
        return True
    if isinstance(rule, UserRule):
        return isinstance(target, UserTarget) and bool(rule.check(principal, target))
    if isinstance(rule, ReviewRule):
        return isinstance(target, ReviewTarget) and bool(rule.check(principal, target))
    return False


__all__ = ["Target", "authorize", "evaluate"]
