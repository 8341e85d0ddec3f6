"""Custom exception hierarchy for the Paddy Calculator.

The computation and rendering core never raises; these exceptions cover the
collaborators around it (session storage, printing, configuration).
"""


class PaddyCalcError(Exception):
    """Base exception for all Paddy Calculator errors."""

    pass


# Persistence-related exceptions
class PersistenceError(PaddyCalcError):
    """Base exception for session persistence errors."""

    pass


class SessionStateError(PersistenceError):
    """Raised when a stored session blob cannot be decoded."""

    pass


# Print-related exceptions
class PrintError(PaddyCalcError):
    """Base exception for print subsystem errors."""

    pass


class PrintUnavailableError(PrintError):
    """Raised when no usable print target exists."""

    pass

