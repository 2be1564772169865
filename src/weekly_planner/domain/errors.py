"""Error types raised by the planned week domain and services."""

from enum import Enum


class PlanErrorKind(str, Enum):
    """Structured failure kinds carried up to the HTTP layer."""

    INVALID_DATE = "INVALID_DATE"
    MISALIGNED_WEEK_START = "MISALIGNED_WEEK_START"
    DAY_NOT_FOUND = "DAY_NOT_FOUND"
    SNAPSHOT_PRECONDITION = "SNAPSHOT_PRECONDITION"
    WEEK_NOT_FOUND = "WEEK_NOT_FOUND"
    WEEK_ALREADY_EXISTS = "WEEK_ALREADY_EXISTS"
    STALE_WRITE = "STALE_WRITE"
    INVALID_WEEK_START_DAY = "INVALID_WEEK_START_DAY"


class PlanError(Exception):
    """Base error for planned week failures."""

    kind: PlanErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidDateError(PlanError):
    """Raised when a date string is not a well-formed calendar date."""

    kind = PlanErrorKind.INVALID_DATE


class MisalignedWeekStartError(PlanError):
    """Raised when a starting date does not fall on the week start day."""

    kind = PlanErrorKind.MISALIGNED_WEEK_START


class DayNotFoundError(PlanError):
    """Raised when a date is not part of the planned week."""

    kind = PlanErrorKind.DAY_NOT_FOUND


class SnapshotPreconditionError(PlanError):
    """Raised when a persistent identifier is missing or reassigned."""

    kind = PlanErrorKind.SNAPSHOT_PRECONDITION


class PlannedWeekNotFoundError(PlanError):
    """Raised when a planned week does not exist for the tenant."""

    kind = PlanErrorKind.WEEK_NOT_FOUND


class PlannedWeekExistsError(PlanError):
    """Raised when the tenant already has a week for the start date."""

    kind = PlanErrorKind.WEEK_ALREADY_EXISTS


class StaleWriteError(PlanError):
    """Raised when a save targets an outdated version of a planned week."""

    kind = PlanErrorKind.STALE_WRITE


class InvalidWeekStartDayError(PlanError):
    """Raised when a week start day is not one of the seven weekdays."""

    kind = PlanErrorKind.INVALID_WEEK_START_DAY
