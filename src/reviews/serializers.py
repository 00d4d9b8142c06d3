"""Serializers for reviews and review categories."""

from rest_framework import serializers

from .models import Review, ReviewCategory


class ReviewCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = ReviewCategory
        fields = ["id", "name"]
        read_only_fields = fields


class ReviewSerializer(serializers.ModelSerializer):
    """Ownership comes from the caller, never from the payload."""

    owner = serializers.PrimaryKeyRelatedField(read_only=True)
    rating = serializers.IntegerField(min_value=1, max_value=10)
    content = serializers.CharField(max_length=500, required=False, allow_blank=True)

    class Meta:
        model = Review
        fields = [
            "id",
            "movie",
            "owner",
            "category",
            "rating",
            "content",
            "is_private",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "owner", "created_at", "updated_at"]

    def validate_movie(self, value):
        """A review cannot be moved to another movie once written."""
        if self.instance is not None and value != self.instance.movie:
            raise serializers.ValidationError("The movie of an existing review cannot change.")
        return value


__all__ = ["ReviewCategorySerializer", "ReviewSerializer"]
