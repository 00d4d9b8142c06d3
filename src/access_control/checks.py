"""System checks for ABAC configuration."""

from django.core.checks import Error, register

from access_control.permissions import ABACPermission
from access_control.policy import ResourceType


@register()
def abac_views_have_resource_type(app_configs, **kwargs):
    """Ensure ABAC-protected views declare a known ``resource_type``."""
    errors: list[Error] = []

    # Import here to avoid circular imports at module load time.
    from authentication.views import UserViewSet
    from movies.views import MovieViewSet
    from reviews.views import ReviewViewSet

    abac_views = [UserViewSet, MovieViewSet, ReviewViewSet]

    for view_cls in abac_views:
        permission_classes = getattr(view_cls, "permission_classes", [])
        if ABACPermission not in permission_classes:
            continue

        resource_type = getattr(view_cls, "resource_type", None)
        if not resource_type:
            errors.append(
                Error(
                    f"{view_cls.__name__} uses ABACPermission but does not "
                    f"define resource_type.",
                    obj=view_cls,
                    id="access_control.E001",
                )
            )
        elif resource_type not in ResourceType.values:
            errors.append(
                Error(
                    f"{view_cls.__name__}.resource_type '{resource_type}' is not a known resource type.",
                    obj=view_cls,
                    id="access_control.E002",
                )
            )

    return errors
