"""Decision-engine and policy-registry tests (no database)."""

from __future__ import annotations

import uuid
from itertools import product

from django.test import SimpleTestCase

from access_control.engine import authorize, evaluate
from access_control.matrix import IS_SELF, REGISTRY, build_default_registry
from access_control.policy import (
    ALLOW,
    ActionType,
    PolicyBuilder,
    ResourceType,
    ReviewRule,
    Role,
    UserRule,
)
from access_control.principal import ANONYMOUS, Principal, ReviewTarget, UserTarget

ALICE = "0b7c7a58-8d53-4a5c-9a43-5b0f7c6f3a11"
BOB = "5d1f0c1e-2f0e-4f63-8d0b-97a4a1b8e6c2"


def principal(principal_id: str, *roles: Role) -> Principal:
    return Principal(id=principal_id, roles=frozenset(roles))


def all_targets(principal_id: str):
    """Targets that would satisfy any predicate for ``principal_id``."""
    return [
        None,
        UserTarget(id=principal_id),
        ReviewTarget(owner_id=principal_id, is_private=False),
        ReviewTarget(owner_id=principal_id, is_private=True),
    ]


class RegistryConstructionTests(SimpleTestCase):
    """The default matrix is built once, complete, and immutable."""

    def test_registry_is_read_only(self):
        """The underlying table rejects item assignment."""
        with self.assertRaises(TypeError):
            REGISTRY._rules[("user", "movie", "delete")] = ALLOW  # type: ignore[index]

    def test_construction_is_deterministic(self):
        """Two builds expose the same triples with the same rule labels."""
        first = [(r, res, a, rule.label) for r, res, a, rule in build_default_registry().entries()]
        second = [(r, res, a, rule.label) for r, res, a, rule in build_default_registry().entries()]
        self.assertEqual(first, second)
        self.assertEqual(len(first), len(REGISTRY))

    def test_duplicate_rule_is_rejected(self):
        builder = PolicyBuilder().allow(Role.USER, ResourceType.MOVIE, ActionType.VIEW)
        with self.assertRaises(ValueError):
            builder.allow(Role.USER, ResourceType.MOVIE, ActionType.VIEW)

    def test_predicate_must_match_resource(self):
        """A user-target predicate cannot guard reviews, and vice versa."""
        with self.assertRaises(ValueError):
            PolicyBuilder().rule(Role.USER, ResourceType.REVIEW, ActionType.UPDATE, IS_SELF)
        review_rule = ReviewRule(check=lambda p, t: True, label="any")
        with self.assertRaises(ValueError):
            PolicyBuilder().rule(Role.USER, ResourceType.MOVIE, ActionType.UPDATE, review_rule)

    def test_unknown_rule_kind_is_rejected(self):
        with self.assertRaises(TypeError):
            PolicyBuilder().rule(Role.USER, ResourceType.MOVIE, ActionType.VIEW, True)  # type: ignore[arg-type]

    def test_builder_cannot_be_reused_after_build(self):
        builder = PolicyBuilder()
        builder.build()
        with self.assertRaises(RuntimeError):
            builder.allow(Role.ADMIN, ResourceType.MOVIE, ActionType.VIEW)

    def test_lookup_returns_none_for_absent_triple(self):
        self.assertIsNone(REGISTRY.lookup(Role.MODERATOR, ResourceType.REVIEW, ActionType.UPDATE))
        self.assertIsNone(REGISTRY.lookup("guest", ResourceType.MOVIE, ActionType.VIEW))
        self.assertIs(REGISTRY.lookup("admin", "movie", "delete"), ALLOW)


class DecisionEngineTests(SimpleTestCase):
    """Properties of ``authorize`` over the default matrix."""

    def test_absent_rule_denies_single_role_principal(self):
        """Every triple without a rule is denied whatever the target."""
        for role, resource_type, action in product(Role, ResourceType, ActionType):
            if REGISTRY.lookup(role, resource_type, action) is not None:
                continue
            actor = principal(ALICE, role)
            for target in all_targets(ALICE):
                with self.subTest(role=role, resource=resource_type, action=action, target=target):
                    self.assertFalse(authorize(actor, resource_type, action, target))

    def test_admin_is_allowed_everything(self):
        admin = principal(ALICE, Role.ADMIN)
        for resource_type, action in product(ResourceType, ActionType):
            for target in all_targets(BOB):
                with self.subTest(resource=resource_type, action=action, target=target):
                    self.assertTrue(authorize(admin, resource_type, action, target))

    def test_user_can_update_and_delete_only_self(self):
        user = principal(ALICE, Role.USER)
        for action in (ActionType.UPDATE, ActionType.DELETE):
            self.assertTrue(authorize(user, ResourceType.USER, action, UserTarget(id=ALICE)))
            self.assertFalse(authorize(user, ResourceType.USER, action, UserTarget(id=BOB)))

    def test_review_visibility(self):
        """Public reviews are visible to everyone; private ones to the owner only."""
        viewer = principal(BOB, Role.USER)
        owner = principal(ALICE, Role.USER)
        public = ReviewTarget(owner_id=ALICE, is_private=False)
        private = ReviewTarget(owner_id=ALICE, is_private=True)

        self.assertTrue(authorize(viewer, ResourceType.REVIEW, ActionType.VIEW, public))
        self.assertFalse(authorize(viewer, ResourceType.REVIEW, ActionType.VIEW, private))
        self.assertTrue(authorize(owner, ResourceType.REVIEW, ActionType.VIEW, public))
        self.assertTrue(authorize(owner, ResourceType.REVIEW, ActionType.VIEW, private))

    def test_review_update_and_delete_require_ownership(self):
        owner = principal(ALICE, Role.USER)
        stranger = principal(BOB, Role.USER)
        review = ReviewTarget(owner_id=ALICE)
        for action in (ActionType.UPDATE, ActionType.DELETE):
            self.assertTrue(authorize(owner, ResourceType.REVIEW, action, review))
            self.assertFalse(authorize(stranger, ResourceType.REVIEW, action, review))

    def test_moderator_matrix(self):
        moderator = principal(ALICE, Role.MODERATOR)
        other_user = UserTarget(id=BOB)
        private_review = ReviewTarget(owner_id=BOB, is_private=True)

        for action in (ActionType.VIEW, ActionType.UPDATE, ActionType.DELETE):
            self.assertTrue(authorize(moderator, ResourceType.USER, action, other_user))
        self.assertFalse(authorize(moderator, ResourceType.USER, ActionType.CREATE))
        for action in ActionType:
            self.assertTrue(authorize(moderator, ResourceType.MOVIE, action))
        self.assertTrue(authorize(moderator, ResourceType.REVIEW, ActionType.VIEW, private_review))
        self.assertTrue(authorize(moderator, ResourceType.REVIEW, ActionType.DELETE, private_review))
        self.assertFalse(authorize(moderator, ResourceType.REVIEW, ActionType.CREATE))
        self.assertFalse(authorize(moderator, ResourceType.REVIEW, ActionType.UPDATE, private_review))

    def test_roles_combine_disjunctively(self):
        """Holding a permissive role alongside a restrictive one grants access."""
        own_review = ReviewTarget(owner_id=ALICE)
        moderator_only = principal(ALICE, Role.MODERATOR)
        moderator_and_user = principal(ALICE, Role.MODERATOR, Role.USER)

        self.assertFalse(authorize(moderator_only, ResourceType.REVIEW, ActionType.UPDATE, own_review))
        self.assertTrue(authorize(moderator_and_user, ResourceType.REVIEW, ActionType.UPDATE, own_review))
        self.assertTrue(authorize(moderator_and_user, ResourceType.REVIEW, ActionType.CREATE))

    def test_predicate_without_target_is_unsatisfied(self):
        user = principal(ALICE, Role.USER)
        self.assertFalse(authorize(user, ResourceType.USER, ActionType.UPDATE))
        self.assertFalse(authorize(user, ResourceType.REVIEW, ActionType.VIEW))

    def test_predicate_with_wrong_target_shape_is_unsatisfied(self):
        user = principal(ALICE, Role.USER)
        self.assertFalse(authorize(user, ResourceType.USER, ActionType.UPDATE, ReviewTarget(owner_id=ALICE)))
        self.assertFalse(authorize(user, ResourceType.REVIEW, ActionType.UPDATE, UserTarget(id=ALICE)))

    def test_anonymous_and_unknown_roles_are_denied(self):
        guest = Principal(id=ALICE, roles=frozenset({"guest"}))
        for resource_type, action in product(ResourceType, ActionType):
            self.assertFalse(authorize(ANONYMOUS, resource_type, action))
            self.assertFalse(authorize(guest, resource_type, action))

    def test_identifiers_are_compared_by_value(self):
        """A UUID and its string form refer to the same owner."""
        owner_uuid = uuid.UUID(ALICE)
        user = Principal(id=str(owner_uuid), roles=frozenset({Role.USER}))
        self.assertTrue(authorize(user, ResourceType.REVIEW, ActionType.UPDATE, ReviewTarget(owner_id=owner_uuid)))
        self.assertTrue(authorize(user, ResourceType.USER, ActionType.DELETE, UserTarget(id=str(uuid.UUID(ALICE)))))

    def test_anonymous_principal_never_owns_anything(self):
        review = ReviewTarget(owner_id=None, is_private=True)  # type: ignore[arg-type]
        anonymous_user = Principal(id=None, roles=frozenset({Role.USER}))
        self.assertFalse(authorize(anonymous_user, ResourceType.REVIEW, ActionType.UPDATE, review))

    def test_custom_registry(self):
        registry = (
            PolicyBuilder()
            .rule(Role.USER, ResourceType.USER, ActionType.VIEW, UserRule(check=lambda p, t: False, label="never"))
            .allow(Role.MODERATOR, ResourceType.REVIEW, ActionType.CREATE)
            .build()
        )
        user = principal(ALICE, Role.USER)
        moderator = principal(ALICE, Role.MODERATOR)
        self.assertFalse(authorize(user, ResourceType.USER, ActionType.VIEW, UserTarget(id=ALICE), registry=registry))
        self.assertTrue(authorize(moderator, ResourceType.REVIEW, ActionType.CREATE, registry=registry))
        self.assertFalse(authorize(moderator, ResourceType.REVIEW, ActionType.CREATE, registry=build_default_registry()))

    def test_evaluate_allow_ignores_target(self):
        self.assertTrue(evaluate(ALLOW, ANONYMOUS, None))
        self.assertTrue(evaluate(ALLOW, ANONYMOUS, UserTarget(id=BOB)))
