"""
API error middleware - turns exceptions from /api/ views into JSON errors.
"""

import logging
from collections.abc import Callable

from django.core.exceptions import BadRequest, PermissionDenied
from django.http import Http404, HttpRequest, HttpResponse

from .http import error_response

logger = logging.getLogger(__name__)


class JsonErrorMiddleware:
    """
    Middleware that renders API exceptions in the standard error shape.

    Mapping:
    1. BadRequest -> 400 with the exception message
    2. PermissionDenied -> 403
    3. Http404 -> 404
    4. Anything else -> 500 with a generic message (details are only logged)

    Non-API paths (admin) keep Django's default handling.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        return self.get_response(request)

    def process_exception(
        self, request: HttpRequest, exception: Exception
    ) -> HttpResponse | None:
        if not request.path.startswith("/api/"):
            return None

        if isinstance(exception, BadRequest):
            return error_response(str(exception) or "Bad request", status=400)
        if isinstance(exception, PermissionDenied):
            return error_response(str(exception) or "Access denied", status=403)
        if isinstance(exception, Http404):
            return error_response(str(exception) or "Not found", status=404)

        logger.exception(
            "Unhandled error on %s %s: %s", request.method, request.path, exception
        )
        return error_response("Internal server error", status=500)
