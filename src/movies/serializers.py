"""Serializers for Movie CRUD."""

from rest_framework import serializers

from .models import Movie


class MovieSerializer(serializers.ModelSerializer):
    class Meta:
        """Expose catalogue fields; timestamps are read-only."""
        model = Movie
        fields = ["id", "title", "year", "director", "genre", "rating", "image_url", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]


__all__ = ["MovieSerializer"]
