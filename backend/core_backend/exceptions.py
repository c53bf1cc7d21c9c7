"""
API exception handling.

Order assembly failures are answered with their own code and message.
DRF's own exceptions keep DRF's status codes but share the same envelope.
Everything else is logged server-side and reported as a generic internal
error so no stack detail leaks to clients.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler
from django_ratelimit.exceptions import Ratelimited

from orders.exceptions import OrderAssemblyError
from core_backend.utils import get_client_ip

logger = logging.getLogger(__name__)

DRF_ERROR_CODES = {
    400: "VALIDATION_ERROR",
    401: "NOT_AUTHENTICATED",
    403: "PERMISSION_DENIED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    429: "RATE_LIMITED",
}


def api_exception_handler(exc, context):
    """
    DRF ``EXCEPTION_HANDLER`` used by every API view.
    """
    request = context.get("request")
    path = request.path if request is not None else "unknown"

    if isinstance(exc, OrderAssemblyError):
        logger.info(f"Order request rejected on {path}: {exc.code} {exc.message}")
        return Response(exc.to_dict(), status=exc.status_code)

    if isinstance(exc, Ratelimited):
        logger.warning(f"Rate limit exceeded on {path} from {get_client_ip(None, request)}")
        return Response(
            {
                "success": False,
                "error": "RATE_LIMITED",
                "message": "Too many requests. Please slow down.",
            },
            status=status.HTTP_429_TOO_MANY_REQUESTS,
        )

    response = exception_handler(exc, context)
    if response is not None:
        response.data = {
            "success": False,
            "error": DRF_ERROR_CODES.get(response.status_code, "REQUEST_ERROR"),
            "message": _first_message(response.data),
            "details": response.data,
        }
        return response

    client_ip = get_client_ip(None, request) if request is not None else None
    logger.exception(
        f"Unhandled error on {path} from {client_ip}: {exc.__class__.__name__}"
    )
    return Response(
        {
            "success": False,
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred. Please try again.",
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _first_message(data):
    """Pull a single readable message out of DRF's nested error payload."""
    if isinstance(data, dict):
        if "detail" in data:
            return str(data["detail"])
        for key, value in data.items():
            return f"{key}: {_first_message(value)}"
        return "Invalid request."
    if isinstance(data, list) and data:
        return _first_message(data[0])
    return str(data)
