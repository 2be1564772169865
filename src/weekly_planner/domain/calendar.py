"""Calendar enums, lookup tables and ISO date helpers."""

import re
from datetime import date, timedelta
from enum import Enum

from weekly_planner.domain.errors import InvalidDateError, InvalidWeekStartDayError

_ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class WeekStartDay(str, Enum):
    """Tenant convention for the first day of a planned week."""

    SUNDAY = "SUNDAY"
    MONDAY = "MONDAY"
    SATURDAY = "SATURDAY"


class DayOfWeek(str, Enum):
    """Long weekday label."""

    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"


class ShortDay(str, Enum):
    """Short weekday label."""

    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"


class MealSlot(str, Enum):
    """Meal slots available on a day plan."""

    LUNCH = "lunch"
    DINNER = "dinner"


# Weekday indexes count from Sunday (0) to Saturday (6).
WEEK_START_DAY_INDEX: dict[WeekStartDay, int] = {
    WeekStartDay.SUNDAY: 0,
    WeekStartDay.MONDAY: 1,
    WeekStartDay.SATURDAY: 6,
}

LONG_DAY_LOOKUP: tuple[DayOfWeek, ...] = (
    DayOfWeek.SUNDAY,
    DayOfWeek.MONDAY,
    DayOfWeek.TUESDAY,
    DayOfWeek.WEDNESDAY,
    DayOfWeek.THURSDAY,
    DayOfWeek.FRIDAY,
    DayOfWeek.SATURDAY,
)

SHORT_DAY_LOOKUP: tuple[ShortDay, ...] = (
    ShortDay.SUN,
    ShortDay.MON,
    ShortDay.TUE,
    ShortDay.WED,
    ShortDay.THU,
    ShortDay.FRI,
    ShortDay.SAT,
)


def parse_iso_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string into a date."""
    if not isinstance(value, str) or not _ISO_DATE_PATTERN.match(value):
        raise InvalidDateError(f"starting date must be a valid ISO date: {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidDateError(
            f"starting date must be a valid ISO date: {value!r}"
        ) from exc


def parse_week_start_day(value: object) -> WeekStartDay:
    try:
        return WeekStartDay(value)
    except ValueError as exc:
        raise InvalidWeekStartDayError(
            f"week start day must be a weekday name: {value!r}"
        ) from exc


def is_valid_iso_date(value: str) -> bool:
    """Return True when the value is a well-formed calendar date."""
    try:
        parse_iso_date(value)
    except InvalidDateError:
        return False
    return True


def weekday_index(day: date) -> int:
    """Return the weekday index with Sunday as 0."""
    return (day.weekday() + 1) % 7


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def format_iso_date(day: date) -> str:
    return day.isoformat()
