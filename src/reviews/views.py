"""Review endpoints; every per-review decision goes through the policy engine."""

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import mixins
from rest_framework.decorators import action
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated

from access_control.engine import authorize
from access_control.permissions import ABACPermission
from access_control.policy import ActionType, ResourceType
from access_control.principal import same_id
from core.response import BaseGenericViewSet, api_response
from movies.models import Movie
from .models import Review, ReviewCategory
from .serializers import ReviewCategorySerializer, ReviewSerializer

User = get_user_model()


class ReviewViewSet(
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    BaseGenericViewSet,
):
    """Create, read, update, and delete reviews.

    Single-review actions are authorized against the review's owner and
    privacy flag. The listing actions only require an authenticated caller and
    filter their results through the same engine, so a private review never
    leaks to someone who could not open it directly.
    """

    queryset = Review.objects.select_related("movie", "category")
    serializer_class = ReviewSerializer
    permission_classes = [ABACPermission]
    resource_type = ResourceType.REVIEW

    def get_permissions(self):
        if self.action == "categories":
            return [AllowAny()]
        if self.action in ("mine", "by_movie"):
            return [IsAuthenticated()]
        return super().get_permissions()

    def perform_create(self, serializer):
        """Attach the calling principal as owner."""
        principal = self.request.user
        if not User.objects.filter(pk=principal.id).exists():
            raise AuthenticationFailed("User not found")
        serializer.save(owner_id=principal.id)

    @action(detail=False, methods=["get"], url_path="my")
    def mine(self, request):
        """Reviews written by the caller, private ones included."""
        reviews = self.get_queryset().filter(owner_id=request.user.id)
        return api_response(self.get_serializer(reviews, many=True).data)

    @action(detail=False, methods=["get"], url_path=r"movie/(?P<movie_id>[0-9]+)")
    def by_movie(self, request, movie_id=None):
        """Reviews of one movie, split into the caller's own and everyone else's."""
        movie = get_object_or_404(Movie, pk=movie_id)
        principal = request.user

        own, visible = [], []
        for review in self.get_queryset().filter(movie=movie):
            if same_id(review.owner_id, principal.id):
                own.append(review)
            elif authorize(principal, ResourceType.REVIEW, ActionType.VIEW, review.as_target()):
                visible.append(review)

        return api_response(
            {
                "own": self.get_serializer(own, many=True).data,
                "reviews": self.get_serializer(visible, many=True).data,
            }
        )

    @action(detail=False, methods=["get"])
    def categories(self, request):
        categories = ReviewCategory.objects.all()
        return api_response(ReviewCategorySerializer(categories, many=True).data)


__all__ = ["ReviewViewSet"]
