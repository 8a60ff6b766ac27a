"""
Views for authentication (register, login, token refresh, logout) and
for the authenticated user's own account (profile, password, account
deletion, dashboard).

Token generation/refresh is handled by djangorestframework-simplejwt.
Every response goes through the shared envelope; failures are raised
and rendered by ``apps.core.exceptions.api_exception_handler``.
"""

import logging

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.models import update_last_login
from django.db import IntegrityError, transaction

from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from apps.core.exceptions import BadRequest, ConflictError
from apps.core.patch import Patch, apply_patch
from apps.core.responses import envelope
from apps.core.validation import validate_body
from apps.tasks.serializers import TaskSummarySerializer
from apps.tasks.stats import recent_tasks, task_stats, upcoming_tasks

from .authentication import OptionalBearerTokenAuthentication
from .serializers import (
    RegisterSerializer,
    LoginSerializer,
    UserProfileSerializer,
    ProfileUpdateSerializer,
    ChangePasswordSerializer,
    DeleteAccountSerializer,
)

User = get_user_model()
logger = logging.getLogger(__name__)

EMAIL_TAKEN_MESSAGE = "User with this email already exists"

# Profile input field -> User column
PROFILE_COLUMNS = {
    "name": "name",
    "email": "email",
    "avatar_url": "avatar_url",
}


def issue_tokens(user):
    """Return a fresh access/refresh pair for ``user``."""
    refresh = RefreshToken.for_user(user)
    return {"token": str(refresh.access_token), "refresh": str(refresh)}


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------
class RegisterView(APIView):
    """
    POST /api/auth/register

    Creates a new account and returns the profile plus JWT tokens so the
    user is logged in immediately.  409 if the email is taken.
    """

    authentication_classes = [OptionalBearerTokenAuthentication]
    permission_classes = [AllowAny]

    def post(self, request):
        data = validate_body(RegisterSerializer, request.data)

        if User.objects.filter(email=data["email"]).exists():
            raise ConflictError(EMAIL_TAKEN_MESSAGE)

        # The unique index is the backstop for concurrent registrations
        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    email=data["email"],
                    password=data["password"],
                    name=data["name"],
                )
        except IntegrityError:
            raise ConflictError(EMAIL_TAKEN_MESSAGE)

        logger.info("Registered user %s", user.pk)
        return envelope(
            {"user": UserProfileSerializer(user).data, **issue_tokens(user)},
            message="User registered successfully",
            status=status.HTTP_201_CREATED,
        )


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------
class LoginView(APIView):
    """
    POST /api/auth/login

    Authenticates email + password and returns a JWT access token, a
    refresh token and the user profile.  401 on bad credentials.
    """

    authentication_classes = [OptionalBearerTokenAuthentication]
    permission_classes = [AllowAny]

    def post(self, request):
        data = validate_body(LoginSerializer, request.data)

        user = authenticate(request, email=data["email"], password=data["password"])
        if user is None:
            logger.info("Failed login for %s", data["email"])
            raise AuthenticationFailed("Invalid email or password")

        update_last_login(None, user)
        return envelope(
            {"user": UserProfileSerializer(user).data, **issue_tokens(user)},
            message="Login successful",
        )


# ---------------------------------------------------------------------------
# Token refresh / logout
# ---------------------------------------------------------------------------
class TokenRefreshEnvelopeView(TokenRefreshView):
    """POST /api/auth/token/refresh: SimpleJWT refresh, enveloped."""

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        data = {"token": response.data["access"]}
        if "refresh" in response.data:
            data["refresh"] = response.data["refresh"]
        return envelope(data)


class LogoutView(APIView):
    """
    POST /api/auth/logout

    Blacklists the supplied refresh token so it can no longer be used.
    """

    permission_classes = [IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get("refresh")
        if not refresh_token:
            raise BadRequest("Refresh token is required")
        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError:
            raise BadRequest("Invalid or expired token")

        logger.info("User %s logged out", request.user.pk)
        return envelope(message="Successfully logged out")


# ---------------------------------------------------------------------------
# Profile: GET / PUT
# ---------------------------------------------------------------------------
class ProfileView(APIView):
    """
    GET /api/users/profile  → current user's profile
    PUT /api/users/profile  → partial update of name / email / avatar_url
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        return envelope(UserProfileSerializer(request.user).data)

    def put(self, request):
        data = validate_body(ProfileUpdateSerializer, request.data)
        patch = Patch.from_validated(data, PROFILE_COLUMNS)
        user_id = request.user.pk

        if "email" in patch and User.objects.filter(email=patch["email"]).exclude(pk=user_id).exists():
            raise ConflictError("Email is already taken")

        try:
            with transaction.atomic():
                apply_patch(User.objects.filter(pk=user_id), patch, touch="updated_at")
        except IntegrityError:
            raise ConflictError("Email is already taken")

        user = User.objects.get(pk=user_id)
        return envelope(
            UserProfileSerializer(user).data,
            message="Profile updated successfully",
        )


# ---------------------------------------------------------------------------
# Change Password
# ---------------------------------------------------------------------------
class ChangePasswordView(APIView):
    """
    PUT /api/users/password

    Requires the current password; sets a new one.
    """

    permission_classes = [IsAuthenticated]

    def put(self, request):
        data = validate_body(ChangePasswordSerializer, request.data)
        user = request.user

        if not user.check_password(data["currentPassword"]):
            raise AuthenticationFailed("Current password is incorrect")

        user.set_password(data["newPassword"])
        user.save(update_fields=["password", "updated_at"])

        logger.info("User %s changed their password", user.pk)
        return envelope(message="Password updated successfully")


# ---------------------------------------------------------------------------
# Delete Account
# ---------------------------------------------------------------------------
class DeleteAccountView(APIView):
    """
    DELETE /api/users/account

    Requires the password.  Owned tasks and categories go with the
    account (cascading foreign keys).
    """

    permission_classes = [IsAuthenticated]

    def delete(self, request):
        data = validate_body(DeleteAccountSerializer, request.data)
        user = request.user

        if not user.check_password(data["password"]):
            raise AuthenticationFailed("Password is incorrect")

        user_id = user.pk
        user.delete()
        logger.info("Deleted account %s", user_id)
        return envelope(message="Account deleted successfully")


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------
class DashboardView(APIView):
    """
    GET /api/users/dashboard

    Task statistics plus the five most recent tasks and up to five
    unfinished tasks due within the next seven days.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = request.user
        return envelope(
            {
                "stats": task_stats(user),
                "recentTasks": TaskSummarySerializer(recent_tasks(user), many=True).data,
                "upcomingTasks": TaskSummarySerializer(upcoming_tasks(user), many=True).data,
            }
        )
