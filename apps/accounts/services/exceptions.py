"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class IdentityProviderError(AccountsServiceError):
    """Raised when Google rejects a code or an ID token cannot be verified."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass


class AccountLinkError(AccountsServiceError):
    """Raised when an email is already bound to a different Google account."""
    pass
