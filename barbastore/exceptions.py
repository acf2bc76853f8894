# barbastore/exceptions.py


class BookingError(Exception):
    """Base class for every scheduling and booking failure."""


class InvalidDuration(BookingError):
    """Raised when an interval or slot step is not a positive number of minutes."""


class InvalidBusinessHours(BookingError):
    """Raised when business hours close at or before they open."""


class InvalidDraft(BookingError):
    """Raised when a booking submission is incomplete or refers to unknown entries."""


class SlotConflict(BookingError):
    """Raised when the requested interval is already taken for that barber."""

    def __init__(self, message: str, conflicting_id: str | None = None) -> None:
        super().__init__(message)
        self.conflicting_id = conflicting_id


class AppointmentNotFound(BookingError):
    pass


class IllegalTransition(BookingError):
    """Raised when a status change is not permitted from the current status."""


class BackendUnavailable(BookingError):
    """Raised when a collaborator is unreachable or fails on its side (5xx). Safe to retry."""


class InvalidFlowStep(BookingError):
    """Raised when a booking flow operation is called from the wrong step."""


class BackendRejected(BookingError):
    """Raised when the booking API refuses a request (bad credentials, no permission, unknown entry).

    Retrying the same request will fail the same way.
    """

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code
