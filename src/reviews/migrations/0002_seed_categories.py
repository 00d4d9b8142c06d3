from django.db import migrations

CATEGORIES = ["Want to rewatch", "Recommend to others", "Watch once"]


def seed_categories(apps, schema_editor):
    ReviewCategory = apps.get_model("reviews", "ReviewCategory")
    for name in CATEGORIES:
        ReviewCategory.objects.get_or_create(name=name)


def remove_categories(apps, schema_editor):
    ReviewCategory = apps.get_model("reviews", "ReviewCategory")
    ReviewCategory.objects.filter(name__in=CATEGORIES, reviews__isnull=True).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("reviews", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_categories, remove_categories),
    ]
