"""Single translation point from exceptions to {"error": ...} responses."""

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from donations.exceptions import DonationError

logger = logging.getLogger(__name__)


def _first_message(detail):
    if isinstance(detail, dict):
        for key, value in detail.items():
            message = _first_message(value)
            return message if key == "non_field_errors" else f"{key}: {message}"
    if isinstance(detail, list) and detail:
        return _first_message(detail[0])
    return str(detail)


def api_exception_handler(exc, context):
    """
    Render every failure as {"error": <message>}.

    Domain errors keep their own status, DRF errors keep DRF's (401, 403,
    400 for serializer validation, 404, 405), and anything unexpected is
    logged with its traceback and answered with a generic 500.
    """
    if isinstance(exc, DonationError):
        return Response({"error": exc.message}, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is not None:
        if isinstance(exc, exceptions.ValidationError):
            response.data = {"error": _first_message(exc.detail), "details": exc.detail}
        elif isinstance(exc, exceptions.NotAuthenticated):
            response.data = {"error": "Unauthorized"}
        elif isinstance(exc, exceptions.PermissionDenied):
            response.data = {"error": "Forbidden"}
        else:
            response.data = {"error": _first_message(exc.detail)}
        return response

    view = context.get("view")
    logger.exception(f"Unhandled error in {type(view).__name__ if view else 'request'}: {str(exc)}")
    return Response(
        {"error": "Internal server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )
