"""
Tasks app URL configuration.

Uses DRF Routers for automatic URL generation from ViewSets.
All endpoints are mounted under /api/ by the root URL config.
"""

from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import CategoryViewSet, TaskViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r"tasks", TaskViewSet, basename="task")
router.register(r"categories", CategoryViewSet, basename="category")

urlpatterns = [
    path("", include(router.urls)),
]
