"""Weekly plan aggregate and its value objects."""

from dataclasses import dataclass, replace
from uuid import UUID

from weekly_planner.domain.calendar import (
    LONG_DAY_LOOKUP,
    SHORT_DAY_LOOKUP,
    WEEK_START_DAY_INDEX,
    DayOfWeek,
    MealSlot,
    ShortDay,
    WeekStartDay,
    add_days,
    format_iso_date,
    parse_iso_date,
    parse_week_start_day,
    weekday_index,
)
from weekly_planner.domain.errors import (
    DayNotFoundError,
    MisalignedWeekStartError,
    SnapshotPreconditionError,
)

DAYS_IN_WEEK = 7


@dataclass(frozen=True)
class MealAssignment:
    """A meal chosen for a slot, with dinner leftover metadata."""

    meal_id: str
    makes_lunch: bool = False

    def to_dict(self) -> dict[str, object]:
        return {"meal_id": self.meal_id, "makes_lunch": self.makes_lunch}

    @classmethod
    def from_dict(cls, item: dict[str, object]) -> "MealAssignment":
        return cls(
            meal_id=str(item["meal_id"]),
            makes_lunch=bool(item.get("makes_lunch", False)),
        )


@dataclass(frozen=True)
class DayPlanState:
    """Lunch and dinner choices for one calendar day."""

    date: str
    long_day: DayOfWeek
    short_day: ShortDay
    lunch_meal_id: str | None = None
    dinner_meal_id: str | None = None
    is_leftover: bool = False

    def to_dict(self) -> dict[str, object]:
        return {
            "date": self.date,
            "long_day": self.long_day.value,
            "short_day": self.short_day.value,
            "lunch_meal_id": self.lunch_meal_id,
            "dinner_meal_id": self.dinner_meal_id,
            "is_leftover": self.is_leftover,
        }

    @classmethod
    def from_dict(cls, row: dict[str, object]) -> "DayPlanState":
        return cls(
            date=str(row["date"]),
            long_day=DayOfWeek(row["long_day"]),
            short_day=ShortDay(row["short_day"]),
            lunch_meal_id=_optional_str(row.get("lunch_meal_id")),
            dinner_meal_id=_optional_str(row.get("dinner_meal_id")),
            is_leftover=bool(row.get("is_leftover", False)),
        )


@dataclass(frozen=True)
class PlannedWeekSnapshot:
    """Flattened, immutable view of a weekly plan for persistence."""

    id: UUID
    tenant_id: str
    starting_date: str
    week_start_day: WeekStartDay
    day_plans: tuple[DayPlanState, ...]
    dinner_assignments: dict[str, MealAssignment] | None = None
    version: int = 0

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""
        assignments = None
        if self.dinner_assignments is not None:
            assignments = {
                day: item.to_dict() for day, item in self.dinner_assignments.items()
            }
        return {
            "id": str(self.id),
            "tenant_id": self.tenant_id,
            "starting_date": self.starting_date,
            "week_start_day": self.week_start_day.value,
            "day_plans": [plan.to_dict() for plan in self.day_plans],
            "dinner_assignments": assignments,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "PlannedWeekSnapshot":
        """Build a snapshot from its dict representation."""
        raw_assignments = payload.get("dinner_assignments")
        assignments = None
        if isinstance(raw_assignments, dict):
            assignments = {
                str(day): MealAssignment.from_dict(item)
                for day, item in raw_assignments.items()
            }
        return cls(
            id=UUID(str(payload["id"])),
            tenant_id=str(payload["tenant_id"]),
            starting_date=str(payload["starting_date"]),
            week_start_day=WeekStartDay(payload["week_start_day"]),
            day_plans=tuple(
                DayPlanState.from_dict(row) for row in payload.get("day_plans") or []
            ),
            dinner_assignments=assignments,
            version=int(payload.get("version") or 0),
        )


class WeeklyPlan:
    """A tenant's 7-day meal calendar.

    Build new weeks with :meth:`create` and stored ones with :meth:`rehydrate`;
    the constructor does no validation. Day plans are immutable values that
    are replaced on every mutation, and ``dinner_assignments`` mirrors the
    dinner slots with the ``makes_lunch`` flag the day plan does not carry.
    """

    def __init__(  # noqa: PLR0913
        self,
        *,
        tenant_id: str,
        starting_date: str,
        week_start_day: WeekStartDay,
        day_plans: list[DayPlanState],
        dinner_assignments: dict[str, MealAssignment],
        id: UUID | None = None,  # noqa: A002
        version: int = 0,
    ) -> None:
        self._id = id
        self._tenant_id = tenant_id
        self._starting_date = starting_date
        self._week_start_day = week_start_day
        self._day_plans = day_plans
        self._dinner_assignments = dinner_assignments
        self._version = version

    @classmethod
    def create(
        cls, tenant_id: str, starting_date: str, week_start_day: WeekStartDay
    ) -> "WeeklyPlan":
        """Create an empty week after validating the start date."""
        start = parse_iso_date(starting_date)
        week_start_day = parse_week_start_day(week_start_day)
        if weekday_index(start) != WEEK_START_DAY_INDEX[week_start_day]:
            raise MisalignedWeekStartError(
                "starting date must align with configured week start day "
                f"({starting_date} is not a {week_start_day.value})"
            )
        day_plans = []
        for offset in range(DAYS_IN_WEEK):
            day = add_days(start, offset)
            index = weekday_index(day)
            day_plans.append(
                DayPlanState(
                    date=format_iso_date(day),
                    long_day=LONG_DAY_LOOKUP[index],
                    short_day=SHORT_DAY_LOOKUP[index],
                )
            )
        return cls(
            tenant_id=tenant_id,
            starting_date=format_iso_date(start),
            week_start_day=week_start_day,
            day_plans=day_plans,
            dinner_assignments={},
        )

    @classmethod
    def rehydrate(cls, snapshot: PlannedWeekSnapshot) -> "WeeklyPlan":
        """Rebuild a week from trusted persisted state.

        Snapshots written before the dinner assignment map existed carry
        ``None``; the map is then rebuilt from the dinner slots with
        ``makes_lunch`` set to False. The original flag cannot be recovered.
        """
        day_plans = list(snapshot.day_plans)
        if snapshot.dinner_assignments is not None:
            assignments = dict(snapshot.dinner_assignments)
        else:
            assignments = {
                plan.date: MealAssignment(meal_id=plan.dinner_meal_id)
                for plan in day_plans
                if plan.dinner_meal_id
            }
        return cls(
            id=snapshot.id,
            tenant_id=snapshot.tenant_id,
            starting_date=snapshot.starting_date,
            week_start_day=snapshot.week_start_day,
            day_plans=day_plans,
            dinner_assignments=assignments,
            version=snapshot.version,
        )

    @property
    def id(self) -> UUID | None:
        return self._id

    @property
    def tenant_id(self) -> str:
        return self._tenant_id

    @property
    def starting_date(self) -> str:
        return self._starting_date

    @property
    def week_start_day(self) -> WeekStartDay:
        return self._week_start_day

    @property
    def version(self) -> int:
        return self._version

    @property
    def day_plans(self) -> tuple[DayPlanState, ...]:
        return tuple(self._day_plans)

    @property
    def dinner_assignments(self) -> dict[str, MealAssignment]:
        return dict(self._dinner_assignments)

    def assign_id(self, plan_id: UUID) -> None:
        """Attach the persistent identifier chosen by the store."""
        if self._id is not None and self._id != plan_id:
            raise SnapshotPreconditionError(
                f"planned week already has identifier {self._id}"
            )
        self._id = plan_id

    def mark_saved(self, version: int) -> None:
        """Record the version the store persisted."""
        self._version = version

    def assign_meal(
        self, date: str, slot: MealSlot, assignment: MealAssignment
    ) -> None:
        """Assign a meal to a slot.

        A manual lunch always clears the leftover flag.
        """
        index = self._index_of(date)
        day_plan = self._day_plans[index]
        if MealSlot(slot) is MealSlot.LUNCH:
            self._day_plans[index] = replace(
                day_plan, lunch_meal_id=assignment.meal_id, is_leftover=False
            )
            return
        self._day_plans[index] = replace(day_plan, dinner_meal_id=assignment.meal_id)
        self._dinner_assignments[date] = MealAssignment(
            meal_id=assignment.meal_id,
            makes_lunch=bool(assignment.makes_lunch),
        )

    def remove_meal(self, date: str, slot: MealSlot) -> None:
        """Clear a slot.

        Removing a dinner leaves any lunch already derived from it in place.
        """
        index = self._index_of(date)
        day_plan = self._day_plans[index]
        if MealSlot(slot) is MealSlot.LUNCH:
            self._day_plans[index] = replace(
                day_plan, lunch_meal_id=None, is_leftover=False
            )
            return
        self._day_plans[index] = replace(day_plan, dinner_meal_id=None)
        self._dinner_assignments.pop(date, None)

    def populate_leftovers(self) -> list[str]:
        """Fill empty lunches from the previous day's ``makes_lunch`` dinner.

        The first day has no predecessor inside the week and never becomes a
        leftover. Lunches that are already set are left untouched. Returns the
        dates whose lunch was filled.
        """
        filled: list[str] = []
        for index, day_plan in enumerate(self._day_plans):
            if index == 0:
                self._day_plans[0] = replace(day_plan, is_leftover=False)
                continue
            if day_plan.lunch_meal_id:
                continue
            previous = self._day_plans[index - 1]
            dinner = self._dinner_assignments.get(previous.date)
            if dinner and dinner.makes_lunch:
                self._day_plans[index] = replace(
                    day_plan, lunch_meal_id=dinner.meal_id, is_leftover=True
                )
                filled.append(day_plan.date)
            else:
                self._day_plans[index] = replace(day_plan, is_leftover=False)
        return filled

    def get_day_plan(self, date: str) -> DayPlanState:
        """Return the day plan for an exact date string."""
        return self._day_plans[self._index_of(date)]

    def to_snapshot(self) -> PlannedWeekSnapshot:
        """Return an immutable copy of the aggregate state."""
        if self._id is None:
            raise SnapshotPreconditionError(
                "Cannot create snapshot without persistent identifier"
            )
        return PlannedWeekSnapshot(
            id=self._id,
            tenant_id=self._tenant_id,
            starting_date=self._starting_date,
            week_start_day=self._week_start_day,
            day_plans=tuple(self._day_plans),
            dinner_assignments=dict(self._dinner_assignments),
            version=self._version,
        )

    def _index_of(self, date: str) -> int:
        for index, day_plan in enumerate(self._day_plans):
            if day_plan.date == date:
                return index
        raise DayNotFoundError(f"No day plan exists for date {date}")


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
