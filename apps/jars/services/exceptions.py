"""
Domain-specific exceptions for jars app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class JarsServiceError(Exception):
    """Base exception for all jars service errors."""
    pass


class JarNotFoundError(JarsServiceError):
    """Raised when a jar does not exist."""
    pass


class InviteCodeConflictError(JarsServiceError):
    """Raised when a requested invite code is already taken."""
    pass


class AlreadyMemberError(JarsServiceError):
    """Raised when a user tries to join a jar they're already in."""
    pass


class NotMemberError(JarsServiceError):
    """Raised when a user tries to perform an action requiring membership."""
    pass


class InsufficientPermissionsError(JarsServiceError):
    """Raised when a user lacks required permissions for an action."""
    pass
