"""Bearer token issuing and verification.

Tokens are HS256 JWTs signed with the Django secret key and carrying
the user's primary key.
"""

import logging
from datetime import timedelta
from typing import TYPE_CHECKING, Final

import jwt
from django.conf import settings
from django.contrib.auth import get_user_model
from django.http import HttpRequest
from django.utils import timezone

from server.apps.accounts.exceptions import AuthenticationFailedError

if TYPE_CHECKING:
    from django.contrib.auth.models import User

logger = logging.getLogger(__name__)

_BEARER_PREFIX: Final = 'Bearer '
_USER_ID_CLAIM: Final = 'user_id'


def get_token_lifetime() -> int:
    """Get bearer token lifetime in seconds.

    Returns:
        Lifetime from settings or default of 7 days.
    """
    return getattr(settings, 'DOCUFLOW_TOKEN_LIFETIME', 7 * 24 * 60 * 60)


def get_token_algorithm() -> str:
    """Get JWT signing algorithm.

    Returns:
        Algorithm from settings or HS256.
    """
    return getattr(settings, 'DOCUFLOW_TOKEN_ALGORITHM', 'HS256')


def issue_token(user: 'User', lifetime: int | None = None) -> str:
    """Issue a bearer token for a user.

    Args:
        user: User the token identifies.
        lifetime: Seconds until expiry, defaults to the configured one.

    Returns:
        Encoded JWT.
    """
    now = timezone.now()
    expires = now + timedelta(seconds=lifetime or get_token_lifetime())
    payload = {
        _USER_ID_CLAIM: user.pk,
        'iat': now,
        'exp': expires,
    }
    token = jwt.encode(
        payload,
        settings.SECRET_KEY,
        algorithm=get_token_algorithm(),
    )
    logger.info('Issued token for user %s', user.username)
    return token


def authenticate_token(token: str) -> 'User':
    """Verify a bearer token and load its user.

    Args:
        token: Encoded JWT.

    Returns:
        Active user identified by the token.

    Raises:
        AuthenticationFailedError: If the token is invalid or expired,
            or its user is unknown or inactive.
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[get_token_algorithm()],
        )
    except jwt.ExpiredSignatureError as error:
        raise AuthenticationFailedError('Token has expired') from error
    except jwt.InvalidTokenError as error:
        raise AuthenticationFailedError('Token is not valid') from error

    user = get_user_model().objects.filter(
        pk=payload.get(_USER_ID_CLAIM),
    ).first()
    if user is None:
        raise AuthenticationFailedError('User not found')
    if not user.is_active:
        logger.warning('Inactive user presented a token: %s', user.username)
        raise AuthenticationFailedError('User is inactive')
    return user


def get_request_token(request: HttpRequest) -> str | None:
    """Extract the bearer credential from a request.

    The ``Authorization: Bearer`` header is preferred. The ``token``
    query parameter is accepted for inline previews loaded by
    ``<img>`` or ``<iframe>`` tags, which cannot send headers.

    Args:
        request: Incoming request.

    Returns:
        Token string or None.
    """
    header = request.headers.get('Authorization', '')
    if header.startswith(_BEARER_PREFIX):
        return header.removeprefix(_BEARER_PREFIX).strip() or None
    return request.GET.get('token') or None


def authenticate_request(request: HttpRequest) -> 'User':
    """Resolve the verified user of a request.

    Args:
        request: Incoming request.

    Returns:
        Authenticated user.

    Raises:
        AuthenticationFailedError: If no valid credential is present.
    """
    token = get_request_token(request)
    if token is None:
        raise AuthenticationFailedError('No token, authorization denied')
    return authenticate_token(token)
