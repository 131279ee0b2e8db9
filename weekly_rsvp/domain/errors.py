"""Error kinds raised by the reservation core.

Business-rule errors are expected outcomes of a single request and carry a
user-safe message. Routes translate them into HTTP responses.
"""

from enum import Enum


class ErrorCode(Enum):
    NO_ACTIVE_EVENT = "NO_ACTIVE_EVENT"
    INVALID_INPUT = "INVALID_INPUT"
    ELIGIBILITY_VIOLATION = "ELIGIBILITY_VIOLATION"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    NOT_FOUND = "NOT_FOUND"
    RESERVATION_BUSY = "RESERVATION_BUSY"


class RsvpError(Exception):
    """Base exception for all service errors."""

    status_code: int = 400

    def __init__(self, message: str, code: ErrorCode):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class BusinessRuleError(RsvpError):
    """A rejected operation that is part of normal service behaviour."""


class NoActiveEventError(BusinessRuleError):
    status_code = 404

    def __init__(self):
        super().__init__(
            "There is no event with on-going registration. Please create a new event.",
            ErrorCode.NO_ACTIVE_EVENT,
        )


class InvalidInputError(BusinessRuleError):
    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, ErrorCode.INVALID_INPUT)
        self.field = field


class EligibilityViolationError(BusinessRuleError):
    status_code = 403

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.ELIGIBILITY_VIOLATION)


class CapacityExceededError(BusinessRuleError):
    status_code = 409

    def __init__(self, message: str, volunteer: bool):
        super().__init__(message, ErrorCode.CAPACITY_EXCEEDED)
        self.volunteer = volunteer


class NotFoundError(BusinessRuleError):
    status_code = 404

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.NOT_FOUND)


class ReservationBusyError(RsvpError):
    """The capacity lock could not be acquired in time."""

    status_code = 503

    def __init__(self):
        super().__init__(
            "Could not acquire lock, please try again.",
            ErrorCode.RESERVATION_BUSY,
        )
