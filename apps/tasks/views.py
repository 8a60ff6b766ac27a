"""
ViewSets for Task and Category CRUD, plus the Task statistics endpoint.

  - Every task query is scoped to request.user; another user's task is a 404.
  - Categories: own + default are readable; writes on a category that
    exists but is not the caller's are a 403 (IsCategoryOwner).
  - Updates are partial (PUT with only the fields to change).
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from apps.core.responses import envelope
from apps.core.validation import validate_body

from . import services
from .filters import build_task_listing
from .pagination import paginate
from .permissions import IsCategoryOwner
from .serializers import (
    CategoryCreateSerializer,
    CategorySerializer,
    CategoryUpdateSerializer,
    TaskCreateSerializer,
    TaskSerializer,
    TaskStatsSerializer,
    TaskUpdateSerializer,
)
from .stats import task_stats


# ---------------------------------------------------------------------------
# Category ViewSet
# ---------------------------------------------------------------------------
class CategoryViewSet(viewsets.ViewSet):
    """
    list    → GET    /api/categories
    create  → POST   /api/categories
    read    → GET    /api/categories/{id}
    update  → PUT    /api/categories/{id}
    delete  → DELETE /api/categories/{id}
    tasks   → GET    /api/categories/{id}/tasks
    """

    permission_classes = [IsAuthenticated, IsCategoryOwner]
    http_method_names = ["get", "post", "put", "delete", "head", "options"]
    lookup_value_regex = r"[0-9]+"

    def list(self, request):
        categories = services.category_queryset(request.user)
        return envelope(CategorySerializer(categories, many=True).data)

    def retrieve(self, request, pk=None):
        category = services.get_visible_category(request.user, pk)
        return envelope(CategorySerializer(category).data)

    def create(self, request):
        data = validate_body(CategoryCreateSerializer, request.data)
        category = services.create_category(request.user, data)
        return envelope(
            CategorySerializer(category).data,
            message="Category created successfully",
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, pk=None):
        category = services.get_category(pk)
        self.check_object_permissions(request, category)
        data = validate_body(CategoryUpdateSerializer, request.data)
        category = services.update_category(request.user, category, data)
        return envelope(
            CategorySerializer(category).data,
            message="Category updated successfully",
        )

    def destroy(self, request, pk=None):
        category = services.get_category(pk)
        self.check_object_permissions(request, category)
        services.delete_category(request.user, category)
        return envelope(message="Category deleted successfully")

    @action(detail=True, methods=["get"], url_path="tasks")
    def tasks(self, request, pk=None):
        category = services.get_visible_category(request.user, pk)
        tasks = services.category_tasks(request.user, category)
        return envelope(
            {
                "category": {"id": category.id, "name": category.name, "color": category.color},
                "tasks": TaskSerializer(tasks, many=True).data,
            }
        )


# ---------------------------------------------------------------------------
# Task ViewSet
# ---------------------------------------------------------------------------
class TaskViewSet(viewsets.ViewSet):
    """
    list    → GET    /api/tasks           (filterable, searchable, sortable)
    create  → POST   /api/tasks
    read    → GET    /api/tasks/{id}
    update  → PUT    /api/tasks/{id}
    delete  → DELETE /api/tasks/{id}
    stats   → GET    /api/tasks/stats

    Query parameters for list:
      ?status=pending                   filter by status
      ?priority=high                    filter by priority
      ?category_id=3                    filter by category
      ?due_date_from=2026-01-01         due date range (inclusive)
      ?due_date_to=2026-12-31
      ?search=keyword                   search title + description
      ?sort=due_date&order=asc          sort (allow-listed fields)
      ?page=1&limit=10                  pagination
    """

    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "post", "put", "delete", "head", "options"]
    lookup_value_regex = r"[0-9]+"

    def list(self, request):
        queryset, options = build_task_listing(request.user, request.query_params)
        tasks, pagination = paginate(queryset, options["page"], options["limit"])
        return envelope(
            {
                "tasks": TaskSerializer(tasks, many=True).data,
                "pagination": pagination,
            }
        )

    def retrieve(self, request, pk=None):
        task = services.get_task(request.user, pk)
        return envelope(TaskSerializer(task).data)

    def create(self, request):
        data = validate_body(TaskCreateSerializer, request.data, context={"request": request})
        task = services.create_task(request.user, data)
        return envelope(
            TaskSerializer(task).data,
            message="Task created successfully",
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, pk=None):
        data = validate_body(TaskUpdateSerializer, request.data, context={"request": request})
        task = services.update_task(request.user, pk, data)
        return envelope(TaskSerializer(task).data, message="Task updated successfully")

    def destroy(self, request, pk=None):
        services.delete_task(request.user, pk)
        return envelope(message="Task deleted successfully")

    # ----- Custom action: stats -----
    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request):
        """
        GET /api/tasks/stats

        Aggregate counts for the authenticated user's tasks: total, per
        status, overdue and due today.
        """
        serializer = TaskStatsSerializer(task_stats(request.user))
        return envelope(serializer.data)
