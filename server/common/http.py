"""Helpers shared by the JSON API views.

``api_endpoint`` authenticates the request and turns domain exceptions
into JSON error responses, so views only deal with the success path.
"""

import functools
import json
import logging
from collections.abc import Callable, Iterable
from typing import Any, Final

from django.core.exceptions import (
    ObjectDoesNotExist,
    PermissionDenied,
    ValidationError,
)
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from server.apps.accounts.exceptions import AuthenticationFailedError
from server.apps.accounts.logic.token_operations import authenticate_request

logger = logging.getLogger(__name__)

_View = Callable[..., HttpResponse]

_STATUS_BAD_REQUEST: Final = 400
_STATUS_UNAUTHORIZED: Final = 401
_STATUS_FORBIDDEN: Final = 403
_STATUS_NOT_FOUND: Final = 404
_STATUS_NOT_ALLOWED: Final = 405


def error_response(message: str, status: int) -> JsonResponse:
    """Build a JSON error response.

    Args:
        message: Human-readable error.
        status: HTTP status code.

    Returns:
        JsonResponse with a ``message`` key.
    """
    return JsonResponse({'message': message}, status=status)


def parse_json_body(request: HttpRequest) -> dict[str, Any]:
    """Decode a JSON object request body.

    Args:
        request: Incoming request.

    Returns:
        Decoded object (empty for an empty body).

    Raises:
        ValidationError: If the body is not a JSON object.
    """
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (UnicodeDecodeError, json.JSONDecodeError) as error:
        raise ValidationError('Request body is not valid JSON') from error
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    return payload


def _not_found_message(error: ObjectDoesNotExist) -> str:
    # 'File.DoesNotExist' -> 'File not found'
    model_name = type(error).__qualname__.split('.')[0]
    if model_name == ObjectDoesNotExist.__name__:
        return 'Not found'
    return f'{model_name} not found'


def api_endpoint(methods: Iterable[str]) -> Callable[[_View], _View]:
    """Decorate a view as an authenticated JSON API endpoint.

    The wrapped view receives the authenticated user as ``user``
    keyword argument.

    Error mapping:
        AuthenticationFailedError -> 401
        ObjectDoesNotExist -> 404
        PermissionDenied (incl. expired, view-only) -> 403
        ValidationError -> 400

    Args:
        methods: Allowed HTTP methods.

    Returns:
        View decorator.
    """
    allowed = frozenset(method.upper() for method in methods)

    def decorator(view: _View) -> _View:
        @functools.wraps(view)
        def wrapper(
            request: HttpRequest,
            *args: Any,
            **kwargs: Any,
        ) -> HttpResponse:
            if request.method not in allowed:
                response = error_response(
                    'Method not allowed',
                    _STATUS_NOT_ALLOWED,
                )
                response['Allow'] = ', '.join(sorted(allowed))
                return response

            try:
                user = authenticate_request(request)
            except AuthenticationFailedError as exc:
                return error_response(str(exc), _STATUS_UNAUTHORIZED)

            try:
                return view(request, *args, user=user, **kwargs)
            except ObjectDoesNotExist as exc:
                return error_response(
                    _not_found_message(exc),
                    _STATUS_NOT_FOUND,
                )
            except PermissionDenied as exc:
                logger.warning(
                    'Denied %s %s for user %s: %s',
                    request.method,
                    request.path,
                    user.username,
                    exc,
                )
                return error_response(
                    str(exc) or 'Access denied',
                    _STATUS_FORBIDDEN,
                )
            except ValidationError as exc:
                return error_response(
                    '; '.join(exc.messages),
                    _STATUS_BAD_REQUEST,
                )

        return csrf_exempt(wrapper)

    return decorator
