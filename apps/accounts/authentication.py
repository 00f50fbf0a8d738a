import logging

from django.conf import settings
from rest_framework import exceptions
from rest_framework.authentication import CSRFCheck
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError

from .tokens import SessionToken

logger = logging.getLogger(__name__)


class SessionCookieAuthentication(JWTAuthentication):
    """
    Authenticate browser requests from the signed session cookie.

    A missing, tampered or expired cookie leaves the request anonymous
    instead of failing it. Unsafe methods must pass the CSRF check.
    """

    def authenticate(self, request):
        raw_token = request.COOKIES.get(settings.TIPJAR_SESSION_COOKIE)
        if not raw_token:
            return None

        try:
            token = SessionToken(raw_token)
            user = self.get_user(token)
        except (TokenError, InvalidToken, AuthenticationFailed) as e:
            logger.debug("Ignoring invalid session cookie: %s", e)
            return None

        self.enforce_csrf(request)
        return user, token

    def enforce_csrf(self, request):
        def dummy_get_response(request):
            return None

        check = CSRFCheck(dummy_get_response)
        check.process_request(request)
        reason = check.process_view(request, None, (), {})
        if reason:
            raise exceptions.PermissionDenied(f'CSRF Failed: {reason}')
