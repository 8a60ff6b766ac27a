"""
django-filter FilterSet for the task list.

Supports filtering by:
  - status / priority (exact match)
  - category_id
  - due_date range (inclusive lower / upper bound)
  - free-text search over title and description (case-insensitive)

Absent parameters contribute no condition at all; present ones are
AND-combined.  Invalid values are reported as field errors through the
FilterSet's form, alongside the pagination option errors.
"""

from django import forms
from django.db.models import Q
from django_filters import rest_framework as filters

from apps.core.dates import calendar_date
from apps.core.exceptions import QueryValidationError

from .models import Task
from .serializers import TaskListOptionsSerializer


class PositiveIntegerFilter(filters.NumberFilter):
    field_class = forms.IntegerField


class IsoDateFormField(forms.DateField):

    def to_python(self, value):
        date = calendar_date(value)
        if date is not None:
            return date
        return super().to_python(value)


class IsoDateFilter(filters.DateFilter):
    """Date filter accepting ``YYYY-MM-DD`` or a full ISO-8601 timestamp."""

    field_class = IsoDateFormField


class TaskFilter(filters.FilterSet):
    """
    Filterable fields exposed as query parameters on GET /tasks.

    Examples:
        ?status=pending
        ?priority=high
        ?category_id=3
        ?due_date_from=2026-01-01&due_date_to=2026-12-31
        ?search=groceries
    """

    status = filters.ChoiceFilter(choices=Task.Status.choices)
    priority = filters.ChoiceFilter(choices=Task.Priority.choices)
    category_id = PositiveIntegerFilter(field_name="category_id", min_value=1)
    due_date_from = IsoDateFilter(field_name="due_date", lookup_expr="gte")
    due_date_to = IsoDateFilter(field_name="due_date", lookup_expr="lte")
    search = filters.CharFilter(method="filter_search", max_length=100)

    class Meta:
        model = Task
        fields = ["status", "priority", "category_id", "due_date_from", "due_date_to", "search"]

    def filter_search(self, queryset, name, value):
        """Case-insensitive substring match on title OR description."""
        return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))


def build_task_listing(user, query_params):
    """
    Validate list parameters and return ``(queryset, options)``.

    The queryset is scoped to ``user``, filtered and ordered; ``options``
    carries the validated ``page``/``limit``/``sort``/``order``.  Errors
    from both the options and the filters are raised together.
    """
    options = TaskListOptionsSerializer(data=query_params)
    filterset = TaskFilter(
        query_params,
        queryset=Task.objects.filter(user=user).select_related("category"),
    )

    errors = {}
    if not options.is_valid():
        errors.update(options.errors)
    if not filterset.is_valid():
        for field, messages in filterset.errors.get_json_data().items():
            errors[field] = [message["message"] for message in messages]
    if errors:
        raise QueryValidationError(errors)

    params = options.validated_data
    prefix = "-" if params["order"] == "desc" else ""
    # sort is restricted to the serializer's allow-list
    queryset = filterset.qs.order_by(f"{prefix}{params['sort']}", f"{prefix}id")
    return queryset, params
