"""Signed browser session carried in the session cookie."""

from django.conf import settings
from rest_framework_simplejwt.tokens import Token


class SessionToken(Token):
    """
    HMAC-signed token stored in the session cookie.

    Claims: user_id, email, name, exp. Signature and expiry are checked on
    construction from a string.
    """

    token_type = 'session'
    lifetime = settings.TIPJAR_SESSION_LIFETIME

    @classmethod
    def for_user(cls, user):
        token = super().for_user(user)
        token['email'] = user.email
        token['name'] = user.get_display_name()
        return token


def set_session_cookie(response, user):
    """Issue a session token for user and attach it to response."""
    token = SessionToken.for_user(user)
    response.set_cookie(
        settings.TIPJAR_SESSION_COOKIE,
        str(token),
        max_age=int(settings.TIPJAR_SESSION_LIFETIME.total_seconds()),
        path='/',
        secure=settings.SESSION_COOKIE_SECURE,
        httponly=True,
        samesite='Lax',
    )
    return response


def clear_session_cookie(response):
    response.delete_cookie(settings.TIPJAR_SESSION_COOKIE, path='/', samesite='Lax')
    return response
