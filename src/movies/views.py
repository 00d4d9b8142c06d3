"""Movie ViewSet protected by ABACPermission."""

from access_control.permissions import ABACPermission
from access_control.policy import ResourceType
from core.response import BaseViewSet
from .models import Movie
from .serializers import MovieSerializer


class MovieViewSet(BaseViewSet):
    """Every movie rule is unconditional, so no per-object target is needed."""

    queryset = Movie.objects.all()
    serializer_class = MovieSerializer
    permission_classes = [ABACPermission]
    resource_type = ResourceType.MOVIE


__all__ = ["MovieViewSet"]
