"""Seed demo accounts, review categories, and a few movies."""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from access_control.policy import Role
from authentication.managers import UserManager
from movies.models import Movie
from reviews.models import DEFAULT_CATEGORIES, Review, ReviewCategory

DEMO_ACCOUNTS = {
    "admin": ("admin@example.com", "adminpass", [Role.ADMIN]),
    "moderator": ("moderator@example.com", "moderatorpass", [Role.MODERATOR]),
    "user": ("user@example.com", "userpass", [Role.USER]),
}

DEMO_MOVIES = [
    {"title": "Stalker", "year": 1979, "director": "Andrei Tarkovsky", "genre": "Drama", "rating": 8.1},
    {"title": "Spirited Away", "year": 2001, "director": "Hayao Miyazaki", "genre": "Animation", "rating": 8.6},
    {"title": "Heat", "year": 1995, "director": "Michael Mann", "genre": "Crime", "rating": 8.3},
]


def create_seed_accounts() -> dict:
    """Create the demo admin/moderator/user accounts if missing."""
    User = get_user_model()
    accounts = {}
    for username, (email, password, roles) in DEMO_ACCOUNTS.items():
        user, _ = User.objects.get_or_create(
            username=username,
            defaults={
                "email": email,
                "roles": [role.value for role in roles],
                "password_hash": UserManager.hash_password(password),
            },
        )
        accounts[username] = user
    return accounts


def create_seed_categories() -> dict:
    categories = {}
    for name in DEFAULT_CATEGORIES:
        category, _ = ReviewCategory.objects.get_or_create(name=name)
        categories[name] = category
    return categories


def create_seed_movies() -> list:
    movies = []
    for data in DEMO_MOVIES:
        movie, _ = Movie.objects.get_or_create(
            title=data["title"],
            year=data["year"],
            defaults={key: value for key, value in data.items() if key not in ("title", "year")},
        )
        movies.append(movie)
    return movies


class Command(BaseCommand):
    """Management command to seed demo data."""

    help = (
        "Seed demo admin/moderator/user accounts, review categories, movies, and "
        "sample reviews. Use --reset to clear previously seeded data first."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete the demo accounts (and their reviews) and demo movies before seeding.",
        )

    def handle(self, *args, **options):
        """Entrypoint for the management command."""
        if options.get("reset"):
            self._reset_seeded_data()

        self.stdout.write("Seeding demo data...")
        accounts = create_seed_accounts()
        categories = create_seed_categories()
        movies = create_seed_movies()
        self._create_sample_reviews(accounts, categories, movies)
        self.stdout.write(self.style.SUCCESS("Demo seed completed."))

    def _reset_seeded_data(self) -> None:
        """Remove demo accounts and movies; reviews cascade with them.

        Review categories are left in place because the migrations own them.
        """
        self.stdout.write("Resetting previously seeded demo data...")
        User = get_user_model()
        User.objects.filter(username__in=list(DEMO_ACCOUNTS)).delete()
        for data in DEMO_MOVIES:
            Movie.objects.filter(title=data["title"], year=data["year"]).delete()
        self.stdout.write(self.style.WARNING("Seeded demo data cleared."))

    @staticmethod
    def _create_sample_reviews(accounts, categories, movies) -> None:
        """One public and one private review by the demo user."""
        user = accounts["user"]
        Review.objects.get_or_create(
            movie=movies[0],
            owner=user,
            defaults={
                "rating": 9,
                "content": "Slow, strange, unforgettable.",
                "category": categories[DEFAULT_CATEGORIES[0]],
            },
        )
        Review.objects.get_or_create(
            movie=movies[1],
            owner=user,
            defaults={
                "rating": 7,
                "content": "Notes to self.",
                "is_private": True,
                "category": categories[DEFAULT_CATEGORIES[2]],
            },
        )
