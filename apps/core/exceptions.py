"""
Error taxonomy and the single DRF exception handler.

Every failure raised anywhere in a view ends up here and is rendered
into the standard envelope::

    {"success": false, "message": "...", "errors": [{"field", "message"}]}

Storage constraint violations (``IntegrityError``) are translated into
409/400 responses so raw database text never reaches the client.
"""

import logging
import math
import traceback

from django.conf import settings
from django.db import DatabaseError, IntegrityError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------
class BadRequest(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request."
    default_code = "bad_request"


class NoFieldsToUpdate(BadRequest):
    """Raised when a partial update carries no recognised field."""

    default_detail = "No valid fields to update"
    default_code = "no_fields_to_update"


class ConflictError(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"
    default_code = "conflict"


class QueryValidationError(exceptions.ValidationError):
    """Validation failure on query-string parameters rather than the body."""

    envelope_message = "Query validation error"


# ---------------------------------------------------------------------------
# Storage error translation
# ---------------------------------------------------------------------------
def _sqlstate(exc):
    cause = exc.__cause__
    # psycopg 3 exposes ``sqlstate``, psycopg2 ``pgcode``
    return getattr(cause, "sqlstate", None) or getattr(cause, "pgcode", None)


def translate_integrity_error(exc):
    """
    Map an ``IntegrityError`` to an API exception.

    Uses the SQLSTATE code on PostgreSQL and falls back to the message
    text for SQLite.  Returns ``None`` for violations with no mapping.
    """
    code = _sqlstate(exc)
    text = str(exc).lower()
    if code == UNIQUE_VIOLATION or "unique" in text:
        return ConflictError()
    if code == FOREIGN_KEY_VIOLATION or "foreign key" in text:
        return BadRequest("Referenced resource does not exist")
    if code == NOT_NULL_VIOLATION or "not null" in text:
        return BadRequest("Required field is missing")
    return None


# ---------------------------------------------------------------------------
# Envelope helpers
# ---------------------------------------------------------------------------
def flatten_errors(detail, path=""):
    """Yield ``{"field", "message"}`` pairs from a DRF error structure."""
    if isinstance(detail, dict):
        for key, value in detail.items():
            child = f"{path}.{key}" if path else str(key)
            yield from flatten_errors(value, child)
    elif isinstance(detail, (list, tuple)):
        for item in detail:
            yield from flatten_errors(item, path)
    else:
        yield {"field": path or "non_field_errors", "message": str(detail)}


def _message_for(exc, response):
    if isinstance(exc, exceptions.NotAuthenticated):
        return "Authentication required"
    if isinstance(exc, exceptions.Throttled):
        return "Too many requests, please try again later"
    detail = response.data.get("detail") if isinstance(response.data, dict) else None
    return str(detail) if detail else "Request failed"


def _unexpected_error_response(exc):
    logger.exception("Unhandled error: %s", exc)
    set_rollback()

    body = {"success": False, "message": "Internal Server Error"}
    if settings.DEBUG:
        fallback = "Database error occurred" if isinstance(exc, DatabaseError) else body["message"]
        body["message"] = str(exc) or fallback
        body["stack"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


# ---------------------------------------------------------------------------
# Handler (REST_FRAMEWORK["EXCEPTION_HANDLER"])
# ---------------------------------------------------------------------------
def api_exception_handler(exc, context):
    """Render any exception raised by a view into the response envelope."""
    if isinstance(exc, IntegrityError):
        translated = translate_integrity_error(exc)
        if translated is None:
            return _unexpected_error_response(exc)
        logger.info("Integrity error translated to %s: %s", translated.status_code, exc)
        exc = translated

    # DRF handles APIException, Http404 and Django's PermissionDenied, and
    # sets WWW-Authenticate / Retry-After headers for us.
    response = exception_handler(exc, context)
    if response is None:
        return _unexpected_error_response(exc)

    if isinstance(exc, exceptions.ValidationError):
        body = {
            "success": False,
            "message": getattr(exc, "envelope_message", "Validation error"),
            "errors": list(flatten_errors(exc.detail)),
        }
    else:
        body = {"success": False, "message": _message_for(exc, response)}
        if isinstance(exc, exceptions.Throttled):
            body["retryAfter"] = math.ceil(exc.wait) if exc.wait is not None else None

    response.data = body
    return response
