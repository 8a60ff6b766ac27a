"""Tests for Task and Category serializers."""

from datetime import date, timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIRequestFactory

from apps.tasks.models import DEFAULT_CATEGORY_COLOR, Task
from apps.tasks.serializers import (
    CategoryCreateSerializer,
    CategoryUpdateSerializer,
    TaskCreateSerializer,
    TaskListOptionsSerializer,
    TaskSerializer,
    TaskUpdateSerializer,
)
from conftest import CategoryFactory, TaskFactory


def _context(user):
    request = APIRequestFactory().post("/api/tasks")
    request.user = user
    return {"request": request}


# ===================================================================
# Category input
# ===================================================================
class TestCategoryInput:

    def test_create_default_colour(self):
        s = CategoryCreateSerializer(data={"name": "Errands"})
        assert s.is_valid(), s.errors
        assert s.validated_data["color"] == DEFAULT_CATEGORY_COLOR

    @pytest.mark.parametrize("color", ["red", "#FFF", "#GGGGGG", "3B82F6"])
    def test_invalid_colour(self, color):
        s = CategoryCreateSerializer(data={"name": "X", "color": color})
        assert not s.is_valid()
        assert "color" in s.errors

    def test_name_too_long(self):
        s = CategoryCreateSerializer(data={"name": "x" * 51})
        assert not s.is_valid()

    def test_update_partial(self):
        s = CategoryUpdateSerializer(data={"color": "#abcdef"})
        assert s.is_valid(), s.errors
        assert dict(s.validated_data) == {"color": "#abcdef"}


# ===================================================================
# Task input
# ===================================================================
@pytest.mark.django_db
class TestTaskCreateSerializer:

    def test_defaults_applied(self, user):
        s = TaskCreateSerializer(data={"title": "Buy milk"}, context=_context(user))
        assert s.is_valid(), s.errors
        assert s.validated_data == {
            "title": "Buy milk",
            "description": "",
            "status": "pending",
            "priority": "medium",
            "due_date": None,
            "category_id": None,
        }

    def test_title_required(self, user):
        s = TaskCreateSerializer(data={}, context=_context(user))
        assert not s.is_valid()
        assert "title" in s.errors

    def test_title_too_long(self, user):
        s = TaskCreateSerializer(data={"title": "x" * 201}, context=_context(user))
        assert not s.is_valid()

    def test_invalid_enums(self, user):
        s = TaskCreateSerializer(
            data={"title": "T", "status": "done", "priority": "urgent"},
            context=_context(user),
        )
        assert not s.is_valid()
        assert set(s.errors) == {"status", "priority"}

    def test_category_id_must_be_positive(self, user):
        s = TaskCreateSerializer(data={"title": "T", "category_id": 0}, context=_context(user))
        assert not s.is_valid()
        assert "category_id" in s.errors

    def test_own_category_accepted(self, user, category):
        s = TaskCreateSerializer(
            data={"title": "T", "category_id": category.pk}, context=_context(user)
        )
        assert s.is_valid(), s.errors

    def test_default_category_accepted(self, user, default_category):
        s = TaskCreateSerializer(
            data={"title": "T", "category_id": default_category.pk}, context=_context(user)
        )
        assert s.is_valid(), s.errors

    def test_other_users_category_rejected(self, user, other_user):
        theirs = CategoryFactory(user=other_user)
        s = TaskCreateSerializer(
            data={"title": "T", "category_id": theirs.pk}, context=_context(user)
        )
        assert not s.is_valid()
        assert "category_id" in s.errors


@pytest.mark.django_db
class TestTaskUpdateSerializer:

    def test_only_sent_fields(self, user):
        s = TaskUpdateSerializer(data={"priority": "high"}, context=_context(user))
        assert s.is_valid(), s.errors
        assert dict(s.validated_data) == {"priority": "high"}

    def test_clear_category_and_due_date(self, user):
        s = TaskUpdateSerializer(
            data={"category_id": None, "due_date": None}, context=_context(user)
        )
        assert s.is_valid(), s.errors
        assert dict(s.validated_data) == {"category_id": None, "due_date": None}

    def test_empty_body_is_valid_and_empty(self, user):
        s = TaskUpdateSerializer(data={"nope": 1}, context=_context(user))
        assert s.is_valid(), s.errors
        assert dict(s.validated_data) == {}


class TestTaskListOptionsSerializer:

    def test_defaults(self):
        s = TaskListOptionsSerializer(data={})
        assert s.is_valid(), s.errors
        assert dict(s.validated_data) == {
            "page": 1, "limit": 10, "sort": "created_at", "order": "desc",
        }

    @pytest.mark.parametrize(
        "params, field",
        [
            ({"page": "0"}, "page"),
            ({"limit": "101"}, "limit"),
            ({"limit": "0"}, "limit"),
            ({"sort": "password"}, "sort"),
            ({"order": "sideways"}, "order"),
        ],
    )
    def test_invalid(self, params, field):
        s = TaskListOptionsSerializer(data=params)
        assert not s.is_valid()
        assert field in s.errors


# ===================================================================
# Task output
# ===================================================================
@pytest.mark.django_db
class TestTaskSerializer:

    def test_category_fields(self, user, category):
        task = TaskFactory(user=user, category=category)
        data = TaskSerializer(task).data
        assert data["category_id"] == category.pk
        assert data["category_name"] == category.name
        assert data["category_color"] == category.color

    def test_no_category(self, user):
        data = TaskSerializer(TaskFactory(user=user)).data
        assert data["category_id"] is None
        assert data["category_name"] is None
        assert data["category_color"] is None

    def test_is_overdue(self, user):
        task = TaskFactory(user=user, due_date=timezone.localdate() - timedelta(days=2))
        assert TaskSerializer(task).data["is_overdue"] is True

    def test_completed_at_exposed(self, user):
        task = TaskFactory(
            user=user, status=Task.Status.COMPLETED, completed_at=timezone.now()
        )
        assert TaskSerializer(task).data["completed_at"] is not None


# ===================================================================
# ISO-8601 due dates
# ===================================================================
@pytest.mark.django_db
class TestDueDateParsing:

    @pytest.mark.parametrize(
        "value",
        ["2026-10-20", "2026-10-20T00:00:00.000Z", "2026-10-20T18:30:00+02:00"],
    )
    def test_create_accepts_date_or_timestamp(self, user, value):
        s = TaskCreateSerializer(data={"title": "T", "due_date": value}, context=_context(user))
        assert s.is_valid(), s.errors
        assert s.validated_data["due_date"] == date(2026, 10, 20)

    def test_update_accepts_timestamp(self, user):
        s = TaskUpdateSerializer(
            data={"due_date": "2026-10-20T23:59:59.999Z"}, context=_context(user)
        )
        assert s.is_valid(), s.errors
        assert s.validated_data["due_date"] == date(2026, 10, 20)

    @pytest.mark.parametrize("value", ["20/10/2026", "2026-13-01T00:00:00Z", "tomorrow"])
    def test_rejects_non_iso(self, user, value):
        s = TaskCreateSerializer(data={"title": "T", "due_date": value}, context=_context(user))
        assert not s.is_valid()
        assert "due_date" in s.errors
