"""Routing for the policy endpoint."""

from django.urls import path

from .views import PolicyView

urlpatterns = [
    path("policy/", PolicyView.as_view(), name="policy"),
]
