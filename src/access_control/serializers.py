"""Serializers for the read-only policy endpoint."""

from rest_framework import serializers


class PolicyEntrySerializer(serializers.Serializer):
    """One (role, resource, action) row of the policy matrix.

    ``rule`` is the rule's label: ``allow`` for unconditional grants, or the
    name of the ownership/visibility predicate (``self``, ``owner``,
    ``public_or_owner``).
    """

    role = serializers.CharField()
    resource = serializers.CharField()
    action = serializers.CharField()
    rule = serializers.CharField()

    def to_representation(self, instance):
        role, resource_type, action_type, rule = instance
        return {
            "role": str(role.value),
            "resource": str(resource_type.value),
            "action": str(action_type.value),
            "rule": rule.label,
        }


__all__ = ["PolicyEntrySerializer"]
