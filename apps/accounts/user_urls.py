"""
Account management URL configuration for the authenticated user.

Mounted under /api/users/ by the root URL config.
"""

from django.urls import path

from .views import (
    ProfileView,
    ChangePasswordView,
    DeleteAccountView,
    DashboardView,
)

urlpatterns = [
    path("profile", ProfileView.as_view(), name="users-profile"),
    path("password", ChangePasswordView.as_view(), name="users-password"),
    path("account", DeleteAccountView.as_view(), name="users-account"),
    path("dashboard", DashboardView.as_view(), name="users-dashboard"),
]
