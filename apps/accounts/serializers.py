"""
Serializers for registration, login, profile management, password
change and account deletion.

Input serializers only validate shape and bounds; uniqueness and
credential checks that map to 401/409 live in the views so they are not
reported as field-level 400s.
"""

from django.contrib.auth import get_user_model
from rest_framework import serializers

User = get_user_model()


def normalise_email(value):
    return value.lower().strip()


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------
class RegisterSerializer(serializers.Serializer):
    """Accepts name, email and password for a new account."""

    name = serializers.CharField(min_length=2, max_length=100)
    email = serializers.EmailField(max_length=255)
    password = serializers.CharField(write_only=True, min_length=6, max_length=128)

    def validate_email(self, value):
        return normalise_email(value)


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------
class LoginSerializer(serializers.Serializer):

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_email(self, value):
        return normalise_email(value)


# ---------------------------------------------------------------------------
# User Profile (read / update)
# ---------------------------------------------------------------------------
class UserProfileSerializer(serializers.ModelSerializer):
    """Public profile fields, i.e. what gets attached to responses."""

    class Meta:
        model = User
        fields = ["id", "name", "email", "avatar_url", "created_at", "updated_at"]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.Serializer):
    """Partial profile update; every field is optional."""

    name = serializers.CharField(min_length=2, max_length=100, required=False)
    email = serializers.EmailField(max_length=255, required=False)
    avatar_url = serializers.URLField(max_length=500, required=False, allow_blank=True)

    def validate_email(self, value):
        return normalise_email(value)


# ---------------------------------------------------------------------------
# Change Password
# ---------------------------------------------------------------------------
class ChangePasswordSerializer(serializers.Serializer):

    currentPassword = serializers.CharField(write_only=True, trim_whitespace=False)
    newPassword = serializers.CharField(
        write_only=True, min_length=6, max_length=128, trim_whitespace=False
    )


# ---------------------------------------------------------------------------
# Delete Account
# ---------------------------------------------------------------------------
class DeleteAccountSerializer(serializers.Serializer):

    password = serializers.CharField(write_only=True, trim_whitespace=False)
