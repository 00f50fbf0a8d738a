"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    IdentityProviderError,
    InactiveAccountError,
    AccountLinkError,
)
from .google_identity import GoogleIdentity, GoogleIdentityClient, generate_state
from .sign_in import sign_in_with_identity

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'IdentityProviderError',
    'InactiveAccountError',
    'AccountLinkError',
    # Google identity
    'GoogleIdentity',
    'GoogleIdentityClient',
    'generate_state',
    # Services
    'sign_in_with_identity',
]
