"""
Bearer-token authentication built on SimpleJWT.

``BearerTokenAuthentication`` is the required-auth path (paired with the
``IsAuthenticated`` permission): a missing token yields no identity and DRF
answers 401 "Authentication required"; a bad token or an unknown user is
rejected here.

``OptionalBearerTokenAuthentication`` runs the same resolution but treats
every failure as anonymous, for endpoints that work with or without a
logged-in user.
"""

import logging

from django.contrib.auth import get_user_model
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.settings import api_settings

logger = logging.getLogger(__name__)

INVALID_TOKEN_MESSAGE = "Invalid or expired token"
USER_NOT_FOUND_MESSAGE = "User not found"


class BearerTokenAuthentication(JWTAuthentication):

    def authenticate(self, request):
        header = self.get_header(request)
        if header is None:
            return None

        # A header without exactly one token part counts as no token
        try:
            raw_token = self.get_raw_token(header)
        except AuthenticationFailed:
            return None
        if raw_token is None:
            return None

        try:
            validated_token = self.get_validated_token(raw_token)
        except (InvalidToken, TokenError) as exc:
            logger.warning("Rejected bearer token: %s", exc)
            raise AuthenticationFailed(INVALID_TOKEN_MESSAGE, code="token_not_valid")

        return self.get_user(validated_token), validated_token

    def get_user(self, validated_token):
        """Resolve the token's ``user_id`` claim to an active user."""
        try:
            user_id = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError:
            raise AuthenticationFailed(INVALID_TOKEN_MESSAGE, code="token_not_valid")

        User = get_user_model()
        try:
            user = User.objects.get(**{api_settings.USER_ID_FIELD: user_id})
        except User.DoesNotExist:
            logger.warning("Token for unknown user id %s", user_id)
            raise AuthenticationFailed(USER_NOT_FOUND_MESSAGE, code="user_not_found")

        if not user.is_active:
            raise AuthenticationFailed(USER_NOT_FOUND_MESSAGE, code="user_not_found")
        return user


class OptionalBearerTokenAuthentication(BearerTokenAuthentication):

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except AuthenticationFailed:
            return None
