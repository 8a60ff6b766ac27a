"""
Authentication URL configuration.

Mounted under /api/auth/ by the root URL config.
"""

from django.urls import path

from .views import (
    RegisterView,
    LoginView,
    LogoutView,
    TokenRefreshEnvelopeView,
)

urlpatterns = [
    path("register", RegisterView.as_view(), name="auth-register"),
    path("login", LoginView.as_view(), name="auth-login"),
    path("logout", LogoutView.as_view(), name="auth-logout"),
    path("token/refresh", TokenRefreshEnvelopeView.as_view(), name="auth-token-refresh"),
]
