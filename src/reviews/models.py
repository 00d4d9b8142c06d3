"""Review and review-category models."""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from access_control.principal import ReviewTarget

DEFAULT_CATEGORIES = ["Want to rewatch", "Recommend to others", "Watch once"]


class ReviewCategory(models.Model):
    name = models.CharField(max_length=100, unique=True)

    class Meta:
        ordering = ["id"]
        verbose_name_plural = "review categories"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


class Review(models.Model):
    """A user's rating of a movie; private reviews are visible to their owner only."""

    movie = models.ForeignKey("movies.Movie", on_delete=models.CASCADE, related_name="reviews")
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reviews")
    category = models.ForeignKey(ReviewCategory, on_delete=models.PROTECT, related_name="reviews")
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(10)])
    content = models.TextField(max_length=500, blank=True)
    is_private = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Review {self.pk} of movie {self.movie_id}"

    def as_target(self) -> ReviewTarget:
        return ReviewTarget(owner_id=str(self.owner_id), is_private=self.is_private)


__all__ = ["DEFAULT_CATEGORIES", "Review", "ReviewCategory"]
