"""
Serializers for Task and Category.

Input serializers are the declarative validation schemas for each
operation (create / update / list options).  Create schemas declare
their defaults so ``validated_data`` is complete; update schemas have no
defaults, so ``validated_data`` holds only what the caller sent.

Output serializers shape the objects returned inside the envelope.
"""

from rest_framework import serializers

from apps.core.dates import calendar_date

from .models import DEFAULT_CATEGORY_COLOR, Category, Task

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"
HEX_COLOR_ERROR = "Color must be a valid hex code, e.g. #3B82F6."

SORT_FIELDS = ["created_at", "updated_at", "title", "due_date", "priority"]
SORT_ORDERS = ["asc", "desc"]


class IsoDateField(serializers.DateField):
    """``DateField`` that also takes a full ISO-8601 timestamp and keeps its date."""

    def to_internal_value(self, value):
        date = calendar_date(value)
        if date is not None:
            return date
        return super().to_internal_value(value)


# ---------------------------------------------------------------------------
# Category
# ---------------------------------------------------------------------------
class CategorySerializer(serializers.ModelSerializer):
    """
    Read serializer for Category.

    ``task_count`` comes from a queryset annotation counting the
    requesting user's tasks in the category.
    """

    task_count = serializers.IntegerField(read_only=True, default=0)
    is_default = serializers.BooleanField(read_only=True)

    class Meta:
        model = Category
        fields = ["id", "name", "color", "is_default", "task_count", "created_at"]
        read_only_fields = fields


class CategoryCreateSerializer(serializers.Serializer):

    name = serializers.CharField(min_length=1, max_length=50)
    color = serializers.RegexField(
        HEX_COLOR_PATTERN,
        default=DEFAULT_CATEGORY_COLOR,
        error_messages={"invalid": HEX_COLOR_ERROR},
    )


class CategoryUpdateSerializer(serializers.Serializer):

    name = serializers.CharField(min_length=1, max_length=50, required=False)
    color = serializers.RegexField(
        HEX_COLOR_PATTERN,
        required=False,
        error_messages={"invalid": HEX_COLOR_ERROR},
    )


# ---------------------------------------------------------------------------
# Task (output)
# ---------------------------------------------------------------------------
class TaskSerializer(serializers.ModelSerializer):
    """
    Full task representation.

    Read-only computed fields:
      - ``is_overdue``: True when due_date < today and status ≠ completed
      - ``category_name`` / ``category_color``: from the related Category
    """

    category_id = serializers.IntegerField(read_only=True, allow_null=True)
    category_name = serializers.CharField(source="category.name", read_only=True, default=None)
    category_color = serializers.CharField(source="category.color", read_only=True, default=None)
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = Task
        fields = [
            "id",
            "title",
            "description",
            "status",
            "priority",
            "due_date",
            "category_id",
            "category_name",
            "category_color",
            "is_overdue",
            "created_at",
            "updated_at",
            "completed_at",
        ]
        read_only_fields = fields


class TaskSummarySerializer(serializers.ModelSerializer):
    """Compact task shape used on the dashboard."""

    category_name = serializers.CharField(source="category.name", read_only=True, default=None)
    category_color = serializers.CharField(source="category.color", read_only=True, default=None)

    class Meta:
        model = Task
        fields = [
            "id",
            "title",
            "status",
            "priority",
            "due_date",
            "category_name",
            "category_color",
            "created_at",
        ]
        read_only_fields = fields


# ---------------------------------------------------------------------------
# Task (input)
# ---------------------------------------------------------------------------
class _TaskFieldsMixin:
    """Shared field-level validation for task create and update."""

    def validate_category_id(self, value):
        """The category must exist and be visible to the requesting user."""
        if value is None:
            return value
        request = self.context.get("request")
        queryset = Category.objects.filter(pk=value)
        if request is not None:
            queryset = queryset.visible_to(request.user)
        if not queryset.exists():
            raise serializers.ValidationError("Category does not exist.")
        return value


class TaskCreateSerializer(_TaskFieldsMixin, serializers.Serializer):

    title = serializers.CharField(min_length=1, max_length=200)
    description = serializers.CharField(
        max_length=1000, allow_blank=True, default=""
    )
    status = serializers.ChoiceField(
        choices=Task.Status.choices, default=Task.Status.PENDING
    )
    priority = serializers.ChoiceField(
        choices=Task.Priority.choices, default=Task.Priority.MEDIUM
    )
    due_date = IsoDateField(allow_null=True, default=None)
    category_id = serializers.IntegerField(
        min_value=1, allow_null=True, default=None
    )


class TaskUpdateSerializer(_TaskFieldsMixin, serializers.Serializer):
    """Partial update: absent fields stay absent from ``validated_data``."""

    title = serializers.CharField(min_length=1, max_length=200, required=False)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=Task.Status.choices, required=False)
    priority = serializers.ChoiceField(choices=Task.Priority.choices, required=False)
    due_date = IsoDateField(required=False, allow_null=True)
    category_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class TaskListOptionsSerializer(serializers.Serializer):
    """Pagination and ordering options for ``GET /tasks``."""

    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=10)
    sort = serializers.ChoiceField(choices=SORT_FIELDS, default="created_at")
    order = serializers.ChoiceField(choices=SORT_ORDERS, default="desc")


# ---------------------------------------------------------------------------
# Task Statistics (read-only aggregate)
# ---------------------------------------------------------------------------
class TaskStatsSerializer(serializers.Serializer):
    """Read-only serializer for the /tasks/stats endpoint."""

    total_tasks = serializers.IntegerField()
    completed_tasks = serializers.IntegerField()
    pending_tasks = serializers.IntegerField()
    in_progress_tasks = serializers.IntegerField()
    overdue_tasks = serializers.IntegerField()
    due_today_tasks = serializers.IntegerField()
