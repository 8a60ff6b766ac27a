"""Task and Category models for the task management domain."""

from django.conf import settings
from django.db import models
from django.utils import timezone

DEFAULT_CATEGORY_COLOR = "#3B82F6"


class CategoryQuerySet(models.QuerySet):

    def visible_to(self, user):
        """The user's own categories plus the global defaults."""
        return self.filter(models.Q(user=user) | models.Q(user__isnull=True))

    def defaults(self):
        return self.filter(user__isnull=True)


class Category(models.Model):
    """
    Category for organising tasks.

    A category either belongs to a single user or, when ``user`` is NULL,
    is a global default that every user can read but nobody can modify.
    Deleting a category sets related tasks' category to NULL.
    """

    name = models.CharField(max_length=50)
    color = models.CharField(
        max_length=7,
        default=DEFAULT_CATEGORY_COLOR,
        help_text="Hex colour code, e.g. #3B82F6",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="categories",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = CategoryQuerySet.as_manager()

    class Meta:
        verbose_name_plural = "categories"
        ordering = ["created_at", "id"]
        # Ensure category names are unique per user
        constraints = [
            models.UniqueConstraint(
                fields=["name", "user"],
                name="unique_category_per_user",
            )
        ]

    def __str__(self):
        return self.name

    @property
    def is_default(self):
        return self.user_id is None


class Task(models.Model):
    """
    Core domain model: a task belonging to exactly one user.

    ``completed_at`` is non-null exactly when ``status`` is ``completed``;
    the services module maintains that on create and update.
    """

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        IN_PROGRESS = "in_progress", "In Progress"
        COMPLETED = "completed", "Completed"

    class Priority(models.TextChoices):
        LOW = "low", "Low"
        MEDIUM = "medium", "Medium"
        HIGH = "high", "High"

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    priority = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.MEDIUM,
    )
    due_date = models.DateField(null=True, blank=True)
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="tasks",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="tasks",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="task_status_idx"),
            models.Index(fields=["due_date"], name="task_due_date_idx"),
        ]

    def __str__(self):
        return self.title

    @property
    def is_overdue(self):
        """Return True if the task is past its due date and not completed."""
        if self.due_date and self.status != self.Status.COMPLETED:
            return self.due_date < timezone.localdate()
        return False
