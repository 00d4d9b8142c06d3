"""Movie catalogue model."""

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Movie(models.Model):
    """A catalogue entry; managed by moderators and admins, visible to users."""

    title = models.CharField(max_length=255)
    year = models.PositiveSmallIntegerField(validators=[MinValueValidator(1870), MaxValueValidator(2100)])
    director = models.CharField(max_length=255, blank=True)
    genre = models.CharField(max_length=100, blank=True)
    rating = models.FloatField(default=0, validators=[MinValueValidator(0), MaxValueValidator(10)])
    image_url = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-year", "title"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.title} ({self.year})"


__all__ = ["Movie"]
