"""
Domain exceptions for the booking core.
Raised by the availability store, ledger, engine and state machine; caught
in views and turned into JSON errors with the class's status_code.
"""


class BookingEngineError(Exception):
    """Base exception for all booking core errors."""
    status_code = 400


class NotFoundError(BookingEngineError):
    """Unknown barber, service or appointment."""
    status_code = 404


class ValidationError(BookingEngineError):
    """Malformed input, booking outside availability, past-dated booking."""
    status_code = 400


class ConflictError(BookingEngineError):
    """The requested slot is no longer free. Caller should re-fetch slots."""
    status_code = 409


class InvalidTransitionError(BookingEngineError):
    """Illegal appointment status or payment change."""
    status_code = 409


class UnauthorizedError(BookingEngineError):
    """The acting principal lacks the role or ownership for this action."""
    status_code = 403
