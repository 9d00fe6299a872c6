"""
Domain-specific exception hierarchy for the business days application.
"""


class BusinessDaysError(Exception):
    """Base class for all application-level errors."""


class InvalidInputError(BusinessDaysError):
    """Raised when request parameters cannot be turned into a valid query."""

    def __init__(self, message: str, code: str = "InvalidParameters"):
        super().__init__(message)
        self.code = code
        self.message = message


class CalendarSourceUnavailableError(BusinessDaysError):
    """Raised when holiday data cannot be fetched or parsed."""


class CalendarExhaustedError(BusinessDaysError):
    """Raised when no working day is found within the configured search window."""
