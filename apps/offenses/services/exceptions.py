"""
Domain-specific exceptions for offenses app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class OffensesServiceError(Exception):
    """Base exception for all offenses service errors."""
    pass


class OffenseTypeNotFoundError(OffensesServiceError):
    """Raised when an offense type does not exist."""
    pass


class OffenseNotFoundError(OffensesServiceError):
    """Raised when an offense does not exist."""
    pass


class PaymentNotFoundError(OffensesServiceError):
    """Raised when a payment does not exist."""
    pass


class InvalidStatusTransitionError(OffensesServiceError):
    """Raised when an offense cannot move from its current status to the requested one."""
    pass
