"""Tests for task listing: filters, ordering, pagination and stats."""

from datetime import date, timedelta

import pytest
from django.utils import timezone

from apps.core.exceptions import QueryValidationError
from apps.tasks.filters import build_task_listing
from apps.tasks.pagination import page_info, paginate
from apps.tasks.stats import task_stats, upcoming_tasks
from conftest import CategoryFactory, TaskFactory


def _titles(queryset):
    return [t.title for t in queryset]


# ===================================================================
# Filters
# ===================================================================
@pytest.mark.django_db
class TestBuildTaskListing:

    def test_scoped_to_user(self, user, other_user):
        TaskFactory(user=user, title="Mine")
        TaskFactory(user=other_user, title="Theirs")
        queryset, _ = build_task_listing(user, {})
        assert _titles(queryset) == ["Mine"]

    def test_status_and_priority(self, user):
        TaskFactory(user=user, title="A", status="pending", priority="high")
        TaskFactory(user=user, title="B", status="pending", priority="low")
        TaskFactory(user=user, title="C", status="completed", priority="high")
        queryset, _ = build_task_listing(user, {"status": "pending", "priority": "high"})
        assert _titles(queryset) == ["A"]

    def test_category(self, user, category):
        TaskFactory(user=user, title="In", category=category)
        TaskFactory(user=user, title="Out")
        queryset, _ = build_task_listing(user, {"category_id": str(category.pk)})
        assert _titles(queryset) == ["In"]

    def test_due_date_range_inclusive(self, user):
        TaskFactory(user=user, title="Before", due_date=date(2026, 1, 1))
        TaskFactory(user=user, title="Start", due_date=date(2026, 2, 1))
        TaskFactory(user=user, title="End", due_date=date(2026, 2, 28))
        TaskFactory(user=user, title="After", due_date=date(2026, 3, 1))
        TaskFactory(user=user, title="Undated", due_date=None)
        queryset, _ = build_task_listing(
            user,
            {"due_date_from": "2026-02-01", "due_date_to": "2026-02-28", "sort": "due_date", "order": "asc"},
        )
        assert _titles(queryset) == ["Start", "End"]

    def test_search_title_or_description(self, user):
        TaskFactory(user=user, title="Buy Groceries", description="")
        TaskFactory(user=user, title="Errands", description="pick up groceries too")
        TaskFactory(user=user, title="Gym", description="legs")
        queryset, _ = build_task_listing(user, {"search": "groceries", "order": "asc"})
        assert _titles(queryset) == ["Buy Groceries", "Errands"]

    def test_sort_by_title(self, user):
        for title in ["b", "c", "a"]:
            TaskFactory(user=user, title=title)
        queryset, _ = build_task_listing(user, {"sort": "title", "order": "asc"})
        assert _titles(queryset) == ["a", "b", "c"]

    def test_default_order_newest_first(self, user):
        first = TaskFactory(user=user)
        second = TaskFactory(user=user)
        queryset, params = build_task_listing(user, {})
        assert [t.pk for t in queryset] == [second.pk, first.pk]
        assert params["page"] == 1
        assert params["limit"] == 10

    def test_errors_collected_together(self, user):
        with pytest.raises(QueryValidationError) as exc:
            build_task_listing(
                user, {"status": "done", "page": "0", "due_date_from": "yesterday"}
            )
        assert set(exc.value.detail) == {"status", "page", "due_date_from"}

    def test_invalid_category_id(self, user):
        with pytest.raises(QueryValidationError) as exc:
            build_task_listing(user, {"category_id": "abc"})
        assert "category_id" in exc.value.detail

    def test_search_too_long(self, user):
        with pytest.raises(QueryValidationError):
            build_task_listing(user, {"search": "x" * 101})


# ===================================================================
# Pagination
# ===================================================================
class TestPageInfo:

    def test_middle_page(self):
        assert page_info(23, 2, 10) == {
            "currentPage": 2,
            "totalPages": 3,
            "totalTasks": 23,
            "hasNextPage": True,
            "hasPrevPage": True,
        }

    def test_last_page(self):
        info = page_info(23, 3, 10)
        assert info["hasNextPage"] is False
        assert info["hasPrevPage"] is True

    def test_empty(self):
        info = page_info(0, 1, 10)
        assert info["totalPages"] == 0
        assert info["hasNextPage"] is False
        assert info["hasPrevPage"] is False


@pytest.mark.django_db
class TestPaginate:

    def test_last_page_items(self, user):
        TaskFactory.create_batch(23, user=user)
        queryset, _ = build_task_listing(user, {})
        items, info = paginate(queryset, 3, 10)
        assert len(items) == 3
        assert info["totalPages"] == 3

    def test_past_the_end(self, user):
        TaskFactory.create_batch(3, user=user)
        queryset, _ = build_task_listing(user, {})
        items, info = paginate(queryset, 5, 10)
        assert items == []
        assert info["totalTasks"] == 3


# ===================================================================
# Stats
# ===================================================================
@pytest.mark.django_db
class TestTaskStats:

    def test_counts(self, user, other_user):
        today = timezone.localdate()
        TaskFactory(user=user, status="pending", due_date=today - timedelta(days=1))
        TaskFactory(user=user, status="in_progress", due_date=today)
        TaskFactory(user=user, status="completed", due_date=today - timedelta(days=5))
        TaskFactory(user=user, status="pending", due_date=None)
        TaskFactory(user=other_user, status="pending", due_date=today - timedelta(days=1))

        assert task_stats(user, today=today) == {
            "total_tasks": 4,
            "completed_tasks": 1,
            "pending_tasks": 2,
            "in_progress_tasks": 1,
            "overdue_tasks": 1,
            "due_today_tasks": 1,
        }

    def test_empty(self, user):
        stats = task_stats(user)
        assert all(value == 0 for value in stats.values())

    def test_upcoming_window(self, user):
        today = date(2026, 5, 10)
        TaskFactory(user=user, title="Today", due_date=today)
        TaskFactory(user=user, title="Edge", due_date=today + timedelta(days=7))
        TaskFactory(user=user, title="Too far", due_date=today + timedelta(days=8))
        TaskFactory(user=user, title="Past", due_date=today - timedelta(days=1))
        assert _titles(upcoming_tasks(user, today=today)) == ["Today", "Edge"]

    def test_upcoming_includes_category(self, user):
        cat = CategoryFactory(user=user)
        TaskFactory(user=user, title="Soon", category=cat, due_date=timezone.localdate())
        assert _titles(upcoming_tasks(user)) == ["Soon"]


@pytest.mark.django_db
class TestDueDateFilterParsing:

    def test_timestamp_bounds(self, user):
        TaskFactory(user=user, title="Before", due_date=date(2026, 1, 31))
        TaskFactory(user=user, title="Inside", due_date=date(2026, 2, 10))
        TaskFactory(user=user, title="Last day", due_date=date(2026, 2, 28))
        queryset, _ = build_task_listing(
            user,
            {
                "due_date_from": "2026-02-01T00:00:00.000Z",
                "due_date_to": "2026-02-28T23:59:59.999Z",
                "sort": "due_date",
                "order": "asc",
            },
        )
        assert _titles(queryset) == ["Inside", "Last day"]

    def test_invalid_timestamp(self, user):
        with pytest.raises(QueryValidationError) as exc:
            build_task_listing(user, {"due_date_to": "2026-02-30T00:00:00Z"})
        assert "due_date_to" in exc.value.detail
