"""
Account API views - registration and session login for the ordering SPA.

Sessions are Django's database-backed sessions; the session cookie is what
identifies the caller on every other API endpoint. Register and login are
the only CSRF-exempt writes; every session-authenticated write must echo
the csrftoken cookie in the X-CSRFToken header.
"""

import logging
from typing import TYPE_CHECKING

from django.contrib.auth import authenticate, login, logout
from django.db import IntegrityError
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt, ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from pydantic import ValidationError as PydanticValidationError

from .http import (
    dump,
    error_response,
    json_response,
    load_json,
    validation_error_response,
)
from .permissions import require_access
from .serializers import LoginRequest, RegisterRequest, UserSchema

if TYPE_CHECKING:
    from apps.web.restaurant.storage import RestaurantStore

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
@require_access("auth:register")
def register(request: HttpRequest, storage: "RestaurantStore") -> JsonResponse:
    """
    POST /api/register

    Create a customer account and start a session for it.
    Registration never grants admin rights.

    Response: UserSchema (201), or 400 for invalid data / taken username
    """
    try:
        data = RegisterRequest.model_validate(load_json(request))
    except PydanticValidationError as e:
        return validation_error_response("Invalid registration data", e)

    if storage.get_user_by_username(data.username) is not None:
        return error_response("Username already exists", status=400)

    try:
        user = storage.create_user(
            username=data.username,
            password=data.password,
            name=data.name,
        )
    except IntegrityError:
        # Lost a race with a concurrent registration of the same username
        return error_response("Username already exists", status=400)

    login(request, user, backend="django.contrib.auth.backends.ModelBackend")
    logger.info("Registered user %s (id=%s)", user.username, user.pk)

    return json_response(dump(UserSchema.model_validate(user)), status=201)


@csrf_exempt
@require_POST
@require_access("auth:login")
def login_view(request: HttpRequest, storage: "RestaurantStore") -> JsonResponse:
    """
    POST /api/login

    Response: UserSchema (200) or 401 for bad credentials
    """
    try:
        data = LoginRequest.model_validate(load_json(request))
    except PydanticValidationError as e:
        return validation_error_response("Invalid login data", e)

    user = authenticate(request, username=data.username, password=data.password)
    if user is None:
        logger.info("Failed login for %s", data.username)
        return error_response("Invalid username or password", status=401)

    login(request, user)
    return json_response(dump(UserSchema.model_validate(user)))


@require_POST
@require_access("auth:logout")
def logout_view(request: HttpRequest, storage: "RestaurantStore") -> JsonResponse:
    """
    POST /api/logout

    Ends the session. Safe to call without one.
    """
    logout(request)
    return json_response({"message": "Logged out"})


@ensure_csrf_cookie
@require_GET
@require_access("auth:user")
def current_user(request: HttpRequest, storage: "RestaurantStore") -> JsonResponse:
    """
    GET /api/user

    Response: UserSchema for the session's user, or 401. Always sets the
    csrftoken cookie the client echoes back in X-CSRFToken on writes.
    """
    return json_response(dump(UserSchema.model_validate(request.user)))


def csrf_failure(request: HttpRequest, reason: str = "") -> JsonResponse:
    """CSRF_FAILURE_VIEW: report a missing or bad CSRF token as a JSON 403."""
    logger.info("CSRF check failed on %s %s: %s", request.method, request.path, reason)
    return error_response("CSRF verification failed", status=403)
