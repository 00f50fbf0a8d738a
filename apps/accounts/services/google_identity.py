"""Google OAuth 2.0 client: authorization URL, code exchange and ID token verification."""

from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlencode
import logging
import secrets

from django.conf import settings
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
import requests

from .exceptions import IdentityProviderError

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = 'https://accounts.google.com/o/oauth2/v2/auth'
GOOGLE_TOKEN_URL = 'https://oauth2.googleapis.com/token'
GOOGLE_ISSUERS = ('accounts.google.com', 'https://accounts.google.com')
GOOGLE_SCOPES = ('openid', 'email', 'profile')


@dataclass(frozen=True)
class GoogleIdentity:
    """Verified identity claims of a Google account."""

    google_id: str
    email: str
    name: str = ''
    picture: str = ''
    email_verified: bool = False


def generate_state() -> str:
    """Random value round-tripped through the OAuth redirect to bind it to the browser."""
    return secrets.token_urlsafe(32)


class GoogleIdentityClient:
    """
    Thin wrapper around Google's OAuth endpoints.

    Credentials default to GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET and
    GOOGLE_REDIRECT_URI from settings.
    """

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        timeout: int = 10,
    ):
        self.client_id = client_id or settings.GOOGLE_CLIENT_ID
        self.client_secret = client_secret or settings.GOOGLE_CLIENT_SECRET
        self.redirect_uri = redirect_uri or settings.GOOGLE_REDIRECT_URI
        self.timeout = timeout

    def build_authorization_url(self, state: str) -> str:
        params = {
            'client_id': self.client_id,
            'redirect_uri': self.redirect_uri,
            'response_type': 'code',
            'scope': ' '.join(GOOGLE_SCOPES),
            'state': state,
            'access_type': 'offline',
        }
        return f'{GOOGLE_AUTH_URL}?{urlencode(params)}'

    def exchange_code(self, code: str) -> GoogleIdentity:
        """
        Exchange an authorization code for tokens and verify the returned ID token.

        Args:
            code: Authorization code from the OAuth callback

        Returns:
            Verified GoogleIdentity

        Raises:
            IdentityProviderError: If the exchange fails or the ID token is invalid
        """
        try:
            response = requests.post(
                GOOGLE_TOKEN_URL,
                data={
                    'code': code,
                    'client_id': self.client_id,
                    'client_secret': self.client_secret,
                    'redirect_uri': self.redirect_uri,
                    'grant_type': 'authorization_code',
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Failed to exchange OAuth code: %s", e)
            raise IdentityProviderError(f"Failed to exchange code for token: {e}")

        raw_id_token = payload.get('id_token')
        if not raw_id_token:
            raise IdentityProviderError("Token response did not include an ID token")

        return self.verify_id_token(raw_id_token)

    def verify_id_token(self, token: str) -> GoogleIdentity:
        """
        Verify a Google ID token and extract the identity claims.

        Raises:
            IdentityProviderError: If verification fails
        """
        if not self.client_id:
            raise IdentityProviderError("GOOGLE_CLIENT_ID is not configured")

        try:
            idinfo = id_token.verify_oauth2_token(
                token,
                google_requests.Request(),
                self.client_id,
            )
        except ValueError as e:
            logger.error("Google ID token verification failed: %s", e)
            raise IdentityProviderError(f"Token verification failed: {e}")

        return self._identity_from_claims(idinfo)

    @staticmethod
    def _identity_from_claims(idinfo: Dict[str, Any]) -> GoogleIdentity:
        if idinfo.get('iss') not in GOOGLE_ISSUERS:
            raise IdentityProviderError("Invalid token issuer")

        email = idinfo.get('email')
        if not email:
            raise IdentityProviderError("Google account has no email address")

        return GoogleIdentity(
            google_id=idinfo['sub'],
            email=email,
            name=idinfo.get('name') or '',
            picture=idinfo.get('picture') or '',
            email_verified=bool(idinfo.get('email_verified', False)),
        )
