"""Seed the global default categories (no owning user)."""

from django.db import migrations

DEFAULT_CATEGORIES = [
    ("Work", "#EF4444"),
    ("Personal", "#10B981"),
    ("Shopping", "#F59E0B"),
    ("Health", "#8B5CF6"),
]


def create_default_categories(apps, schema_editor):
    Category = apps.get_model("tasks", "Category")
    for name, color in DEFAULT_CATEGORIES:
        Category.objects.get_or_create(name=name, user=None, defaults={"color": color})


def remove_default_categories(apps, schema_editor):
    Category = apps.get_model("tasks", "Category")
    Category.objects.filter(
        user__isnull=True, name__in=[name for name, _ in DEFAULT_CATEGORIES]
    ).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("tasks", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(create_default_categories, remove_default_categories),
    ]
