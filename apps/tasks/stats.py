"""Per-user task aggregates for /tasks/stats and the dashboard."""

from datetime import timedelta

from django.db.models import Count, Q
from django.utils import timezone

from .models import Task


def task_stats(user, today=None):
    """
    Count the user's tasks by status, plus overdue and due-today.

    Overdue means due strictly before ``today`` and not completed;
    due-today means due on ``today`` and not completed.
    """
    today = today or timezone.localdate()
    open_tasks = ~Q(status=Task.Status.COMPLETED)
    return Task.objects.filter(user=user).aggregate(
        total_tasks=Count("id"),
        completed_tasks=Count("id", filter=Q(status=Task.Status.COMPLETED)),
        pending_tasks=Count("id", filter=Q(status=Task.Status.PENDING)),
        in_progress_tasks=Count("id", filter=Q(status=Task.Status.IN_PROGRESS)),
        overdue_tasks=Count("id", filter=Q(due_date__lt=today) & open_tasks),
        due_today_tasks=Count("id", filter=Q(due_date=today) & open_tasks),
    )


def recent_tasks(user, limit=5):
    return (
        Task.objects.filter(user=user)
        .select_related("category")
        .order_by("-created_at", "-id")[:limit]
    )


def upcoming_tasks(user, days=7, limit=5, today=None):
    """Unfinished tasks due between today and ``days`` from now, soonest first."""
    today = today or timezone.localdate()
    return (
        Task.objects.filter(
            user=user,
            due_date__range=(today, today + timedelta(days=days)),
        )
        .exclude(status=Task.Status.COMPLETED)
        .select_related("category")
        .order_by("due_date", "id")[:limit]
    )
