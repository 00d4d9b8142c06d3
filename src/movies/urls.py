"""Routing for the Movie viewset."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import MovieViewSet

router = SimpleRouter()
router.register(r"movies", MovieViewSet, basename="movie")

urlpatterns = [
    path("", include(router.urls)),
]
