"""Success envelope shared by every view: ``{success, message?, data?}``."""

from rest_framework import status as http_status
from rest_framework.response import Response


def envelope(data=None, *, message=None, status=http_status.HTTP_200_OK):
    """Wrap ``data`` in the standard success envelope."""
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return Response(body, status=status)
