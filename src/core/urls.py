"""Root URL configuration for the Movie Reviews API."""
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="docs"),
    path("users/", include("authentication.urls")),
    path("", include("access_control.urls")),
    path("", include("movies.urls")),
    path("", include("reviews.urls")),
]
