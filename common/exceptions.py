"""DRF exception handler producing ``{"error": ..., "details"?: [...], "code"?: ...}``."""
import logging

from django.core.exceptions import ImproperlyConfigured
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"
CONFIGURATION_ERROR = "Server configuration error. Contact administrator."


def _flatten(detail) -> list[str]:
    """Field messages are full sentences, so field names are dropped."""
    if isinstance(detail, dict):
        messages = []
        for value in detail.values():
            messages.extend(_flatten(value))
        return messages
    if isinstance(detail, (list, tuple)):
        messages = []
        for item in detail:
            messages.extend(_flatten(item))
        return messages
    return [str(detail)]


def error_body(message: str, details=None, code=None) -> dict:
    body = {"error": message}
    if details:
        body["details"] = list(details)
    if code:
        body["code"] = code
    return body


def portal_exception_handler(exc, context):
    response = exception_handler(exc, context)
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "-"

    if response is None:
        if isinstance(exc, ImproperlyConfigured):
            logger.critical("Configuration error in %s: %s", view_name, exc)
            return Response(error_body(CONFIGURATION_ERROR), status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        logger.error("Unhandled error in %s", view_name, exc_info=exc)
        return Response(error_body(GENERIC_SERVER_ERROR), status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, exceptions.NotAuthenticated):
        response.data = error_body("Authorization token missing.")
    elif isinstance(exc, exceptions.ValidationError):
        response.data = error_body("Invalid input data", _flatten(exc.detail))
    elif isinstance(exc, exceptions.Throttled):
        response.data = error_body("Too many requests, please try again later.")
    elif isinstance(exc, exceptions.APIException):
        response.data = error_body(
            " ".join(_flatten(exc.detail)),
            code=getattr(exc, "error_code", None),
        )
    else:
        # Http404 / django PermissionDenied converted by DRF.
        response.data = error_body(" ".join(_flatten(response.data.get("detail", "Error"))))
    return response
