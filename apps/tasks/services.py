"""
Task and category operations applied on behalf of a user.

Views validate input and hand the normalised data here.  Everything is
scoped by the owning user:

  - Tasks: a task that does not exist and a task owned by somebody else
    are indistinguishable; both raise "Task not found".
  - Categories: reads see the user's own categories plus the defaults;
    ownership for writes is checked by ``IsCategoryOwner`` in the view,
    and the write itself is still filtered by owner.
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone
from rest_framework.exceptions import NotFound

from apps.core.exceptions import BadRequest, ConflictError
from apps.core.patch import Patch, apply_patch

from .models import Category, Task

logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found"
CATEGORY_NOT_FOUND = "Category not found"
CATEGORY_EXISTS = "Category with this name already exists"

# Input field -> model column
TASK_COLUMNS = {
    "title": "title",
    "description": "description",
    "status": "status",
    "priority": "priority",
    "due_date": "due_date",
    "category_id": "category_id",
}
CATEGORY_COLUMNS = {
    "name": "name",
    "color": "color",
}


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------
def task_queryset(user):
    return Task.objects.filter(user=user).select_related("category")


def get_task(user, task_id):
    try:
        return task_queryset(user).get(pk=task_id)
    except Task.DoesNotExist:
        raise NotFound(TASK_NOT_FOUND)


def create_task(user, data):
    """Insert a task from validated create data (defaults already applied)."""
    completed_at = timezone.now() if data["status"] == Task.Status.COMPLETED else None
    task = Task.objects.create(
        user=user,
        title=data["title"],
        description=data["description"],
        status=data["status"],
        priority=data["priority"],
        due_date=data["due_date"],
        category_id=data["category_id"],
        completed_at=completed_at,
    )
    logger.info("User %s created task %s", user.pk, task.pk)
    return get_task(user, task.pk)


def derive_completion(patch, previous_status, now=None):
    """
    Add the implicit ``completed_at`` assignment for a status change.

    Entering ``completed`` stamps the time; re-sending ``completed`` for
    an already completed task leaves the original stamp; any other status
    clears it.
    """
    if "status" not in patch:
        return
    if patch["status"] == Task.Status.COMPLETED:
        if previous_status != Task.Status.COMPLETED:
            patch.set("completed_at", now or timezone.now())
    else:
        patch.set("completed_at", None)


def update_task(user, task_id, data):
    """Apply a partial update to one of the user's tasks."""
    scoped = Task.objects.filter(pk=task_id, user=user)
    previous_status = scoped.values_list("status", flat=True).first()
    if previous_status is None:
        raise NotFound(TASK_NOT_FOUND)

    patch = Patch.from_validated(data, TASK_COLUMNS)
    derive_completion(patch, previous_status)

    if not apply_patch(scoped, patch, touch="updated_at"):
        # Deleted between the lookup and the update
        raise NotFound(TASK_NOT_FOUND)
    return get_task(user, task_id)


def delete_task(user, task_id):
    deleted, _ = Task.objects.filter(pk=task_id, user=user).delete()
    if not deleted:
        raise NotFound(TASK_NOT_FOUND)
    logger.info("User %s deleted task %s", user.pk, task_id)


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
def category_queryset(user):
    """Own + default categories, annotated with the user's task count."""
    return (
        Category.objects.visible_to(user)
        .annotate(task_count=Count("tasks", filter=Q(tasks__user=user)))
        .order_by("created_at", "id")
    )


def get_visible_category(user, category_id):
    try:
        return category_queryset(user).get(pk=category_id)
    except Category.DoesNotExist:
        raise NotFound(CATEGORY_NOT_FOUND)


def get_category(category_id):
    """Unscoped lookup used before an ownership check (404 vs 403)."""
    try:
        return Category.objects.get(pk=category_id)
    except Category.DoesNotExist:
        raise NotFound(CATEGORY_NOT_FOUND)


def _name_taken(user, name, exclude_id=None):
    queryset = Category.objects.filter(name=name, user=user)
    if exclude_id is not None:
        queryset = queryset.exclude(pk=exclude_id)
    return queryset.exists()


def create_category(user, data):
    if _name_taken(user, data["name"]):
        raise ConflictError(CATEGORY_EXISTS)

    # unique_category_per_user catches a concurrent insert of the same name
    try:
        with transaction.atomic():
            category = Category.objects.create(user=user, name=data["name"], color=data["color"])
    except IntegrityError:
        raise ConflictError(CATEGORY_EXISTS)

    logger.info("User %s created category %s", user.pk, category.pk)
    return get_visible_category(user, category.pk)


def update_category(user, category, data):
    """Apply a partial update to a category the user owns."""
    patch = Patch.from_validated(data, CATEGORY_COLUMNS)

    if "name" in patch and _name_taken(user, patch["name"], exclude_id=category.pk):
        raise ConflictError(CATEGORY_EXISTS)

    try:
        with transaction.atomic():
            updated = apply_patch(Category.objects.filter(pk=category.pk, user=user), patch)
    except IntegrityError:
        raise ConflictError(CATEGORY_EXISTS)

    if not updated:
        raise NotFound(CATEGORY_NOT_FOUND)
    return get_visible_category(user, category.pk)


def delete_category(user, category):
    """Delete an owned category that no task references."""
    task_count = category.tasks.filter(user=user).count()
    if task_count > 0:
        raise BadRequest(
            f"Cannot delete category. It has {task_count} task(s). "
            "Please reassign or delete the tasks first."
        )

    deleted, _ = Category.objects.filter(pk=category.pk, user=user).delete()
    if not deleted:
        raise NotFound(CATEGORY_NOT_FOUND)
    logger.info("User %s deleted category %s", user.pk, category.pk)


def category_tasks(user, category):
    return task_queryset(user).filter(category=category).order_by("-created_at", "-id")
