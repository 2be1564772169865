"""Tests for the weekly plan aggregate."""

from dataclasses import replace
from uuid import uuid4

import pytest

from weekly_planner.domain.calendar import DayOfWeek, MealSlot, ShortDay, WeekStartDay
from weekly_planner.domain.errors import (
    DayNotFoundError,
    InvalidDateError,
    InvalidWeekStartDayError,
    MisalignedWeekStartError,
    PlanErrorKind,
    SnapshotPreconditionError,
)
from weekly_planner.domain.planned_weeks import (
    MealAssignment,
    PlannedWeekSnapshot,
    WeeklyPlan,
)


def _monday_week() -> WeeklyPlan:
    plan = WeeklyPlan.create("tenant-a", "2024-01-01", WeekStartDay.MONDAY)
    plan.assign_id(uuid4())
    return plan


def test_create_generates_seven_empty_consecutive_days() -> None:
    plan = WeeklyPlan.create("tenant-a", "2024-01-01", WeekStartDay.MONDAY)

    assert plan.id is None
    assert [day.date for day in plan.day_plans] == [
        "2024-01-01",
        "2024-01-02",
        "2024-01-03",
        "2024-01-04",
        "2024-01-05",
        "2024-01-06",
        "2024-01-07",
    ]
    assert plan.day_plans[0].long_day is DayOfWeek.MONDAY
    assert plan.day_plans[0].short_day is ShortDay.MON
    assert plan.day_plans[6].long_day is DayOfWeek.SUNDAY
    assert plan.day_plans[6].short_day is ShortDay.SUN
    assert all(day.lunch_meal_id is None for day in plan.day_plans)
    assert all(day.dinner_meal_id is None for day in plan.day_plans)
    assert not any(day.is_leftover for day in plan.day_plans)
    assert plan.dinner_assignments == {}


@pytest.mark.parametrize(
    ("starting_date", "week_start_day", "first_label", "last_date"),
    [
        ("2023-12-31", WeekStartDay.SUNDAY, DayOfWeek.SUNDAY, "2024-01-06"),
        ("2024-01-06", WeekStartDay.SATURDAY, DayOfWeek.SATURDAY, "2024-01-12"),
        ("2024-02-26", WeekStartDay.MONDAY, DayOfWeek.MONDAY, "2024-03-03"),
    ],
)
def test_create_respects_each_week_start_day(
    starting_date: str,
    week_start_day: WeekStartDay,
    first_label: DayOfWeek,
    last_date: str,
) -> None:
    plan = WeeklyPlan.create("tenant-a", starting_date, week_start_day)

    assert len(plan.day_plans) == 7
    assert plan.day_plans[0].long_day is first_label
    assert plan.day_plans[-1].date == last_date


def test_create_rejects_misaligned_start() -> None:
    with pytest.raises(MisalignedWeekStartError) as exc_info:
        WeeklyPlan.create("tenant-a", "2024-01-03", WeekStartDay.MONDAY)

    assert exc_info.value.kind is PlanErrorKind.MISALIGNED_WEEK_START


@pytest.mark.parametrize("starting_date", ["not-a-date", "2024-02-30", "20240101", ""])
def test_create_rejects_invalid_dates(starting_date: str) -> None:
    with pytest.raises(InvalidDateError):
        WeeklyPlan.create("tenant-a", starting_date, WeekStartDay.MONDAY)


def test_create_rejects_unknown_week_start_day() -> None:
    with pytest.raises(InvalidWeekStartDayError) as exc_info:
        WeeklyPlan.create("tenant-a", "2024-01-01", "FUNDAY")

    assert exc_info.value.kind is PlanErrorKind.INVALID_WEEK_START_DAY


def test_assign_lunch_clears_leftover_flag() -> None:
    plan = _monday_week()
    plan.assign_meal(
        "2024-01-01", MealSlot.DINNER, MealAssignment("dinnerA", makes_lunch=True)
    )
    plan.populate_leftovers()
    assert plan.get_day_plan("2024-01-02").is_leftover is True

    plan.assign_meal("2024-01-02", MealSlot.LUNCH, MealAssignment("m1"))

    day = plan.get_day_plan("2024-01-02")
    assert day.lunch_meal_id == "m1"
    assert day.is_leftover is False


def test_assign_dinner_records_assignment() -> None:
    plan = _monday_week()

    plan.assign_meal("2024-01-03", MealSlot.DINNER, MealAssignment("dinnerB"))

    assert plan.get_day_plan("2024-01-03").dinner_meal_id == "dinnerB"
    assert plan.dinner_assignments == {
        "2024-01-03": MealAssignment("dinnerB", makes_lunch=False)
    }


def test_remove_dinner_drops_assignment_but_keeps_derived_lunch() -> None:
    plan = _monday_week()
    plan.assign_meal(
        "2024-01-01", MealSlot.DINNER, MealAssignment("dinnerA", makes_lunch=True)
    )
    plan.populate_leftovers()

    plan.remove_meal("2024-01-01", MealSlot.DINNER)

    assert plan.get_day_plan("2024-01-01").dinner_meal_id is None
    assert plan.dinner_assignments == {}
    leftover = plan.get_day_plan("2024-01-02")
    assert leftover.lunch_meal_id == "dinnerA"
    assert leftover.is_leftover is True


def test_remove_lunch_clears_slot() -> None:
    plan = _monday_week()
    plan.assign_meal("2024-01-04", MealSlot.LUNCH, MealAssignment("m1"))

    plan.remove_meal("2024-01-04", MealSlot.LUNCH)

    day = plan.get_day_plan("2024-01-04")
    assert day.lunch_meal_id is None
    assert day.is_leftover is False


def test_populate_leftovers_fills_next_day_lunch() -> None:
    plan = _monday_week()
    plan.assign_meal(
        "2024-01-01", MealSlot.DINNER, MealAssignment("dinnerA", makes_lunch=True)
    )

    filled = plan.populate_leftovers()

    assert filled == ["2024-01-02"]
    day = plan.get_day_plan("2024-01-02")
    assert day.lunch_meal_id == "dinnerA"
    assert day.is_leftover is True


def test_populate_leftovers_ignores_dinners_without_makes_lunch() -> None:
    plan = _monday_week()
    plan.assign_meal("2024-01-01", MealSlot.DINNER, MealAssignment("dinnerA"))

    assert plan.populate_leftovers() == []
    assert plan.get_day_plan("2024-01-02").lunch_meal_id is None


def test_populate_leftovers_never_overwrites_lunch_and_is_idempotent() -> None:
    plan = _monday_week()
    plan.assign_meal("2024-01-02", MealSlot.LUNCH, MealAssignment("manual"))
    plan.assign_meal(
        "2024-01-01", MealSlot.DINNER, MealAssignment("dinnerA", makes_lunch=True)
    )
    plan.assign_meal(
        "2024-01-02", MealSlot.DINNER, MealAssignment("dinnerB", makes_lunch=True)
    )

    plan.populate_leftovers()
    first = plan.to_snapshot()
    plan.populate_leftovers()
    second = plan.to_snapshot()

    assert first == second
    assert plan.get_day_plan("2024-01-02").lunch_meal_id == "manual"
    assert plan.get_day_plan("2024-01-02").is_leftover is False
    assert plan.get_day_plan("2024-01-03").lunch_meal_id == "dinnerB"


def test_populate_leftovers_never_marks_first_day() -> None:
    plan = _monday_week()
    snapshot = plan.to_snapshot()
    first_day = replace(snapshot.day_plans[0], lunch_meal_id="old", is_leftover=True)
    tampered = replace(
        snapshot,
        day_plans=(first_day, *snapshot.day_plans[1:]),
        dinner_assignments={
            "2023-12-31": MealAssignment("previous-week", makes_lunch=True),
            "2024-01-07": MealAssignment("sunday", makes_lunch=True),
        },
    )
    rehydrated = WeeklyPlan.rehydrate(tampered)

    rehydrated.populate_leftovers()

    assert rehydrated.get_day_plan("2024-01-01").is_leftover is False
    assert rehydrated.get_day_plan("2024-01-01").lunch_meal_id == "old"


def test_get_day_plan_outside_week_fails() -> None:
    plan = _monday_week()

    with pytest.raises(DayNotFoundError):
        plan.get_day_plan("2024-01-09")
    with pytest.raises(DayNotFoundError):
        plan.assign_meal("2024-01-09", MealSlot.LUNCH, MealAssignment("m1"))
    with pytest.raises(DayNotFoundError):
        plan.remove_meal("garbage", MealSlot.DINNER)


def test_to_snapshot_requires_identifier() -> None:
    plan = WeeklyPlan.create("tenant-a", "2024-01-01", WeekStartDay.MONDAY)

    with pytest.raises(SnapshotPreconditionError):
        plan.to_snapshot()


def test_assign_id_rejects_a_different_identifier() -> None:
    plan = _monday_week()

    with pytest.raises(SnapshotPreconditionError):
        plan.assign_id(uuid4())


def test_rehydrate_reproduces_snapshot() -> None:
    plan = _monday_week()
    plan.assign_meal(
        "2024-01-01", MealSlot.DINNER, MealAssignment("dinnerA", makes_lunch=True)
    )
    plan.assign_meal("2024-01-05", MealSlot.LUNCH, MealAssignment("lunchB"))
    plan.populate_leftovers()
    snapshot = plan.to_snapshot()

    restored = WeeklyPlan.rehydrate(snapshot)

    assert restored.day_plans == plan.day_plans
    assert restored.dinner_assignments == plan.dinner_assignments
    assert restored.to_snapshot() == snapshot


def test_snapshot_dict_round_trip() -> None:
    plan = _monday_week()
    plan.assign_meal(
        "2024-01-03", MealSlot.DINNER, MealAssignment("dinnerC", makes_lunch=True)
    )
    snapshot = plan.to_snapshot()

    payload = snapshot.to_dict()

    assert payload["dinner_assignments"] == {
        "2024-01-03": {"meal_id": "dinnerC", "makes_lunch": True}
    }
    assert PlannedWeekSnapshot.from_dict(payload) == snapshot


def test_rehydrate_legacy_snapshot_rebuilds_assignments() -> None:
    plan = _monday_week()
    plan.assign_meal(
        "2024-01-02", MealSlot.DINNER, MealAssignment("dinnerA", makes_lunch=True)
    )
    legacy = replace(plan.to_snapshot(), dinner_assignments=None)

    restored = WeeklyPlan.rehydrate(legacy)

    assert restored.dinner_assignments == {
        "2024-01-02": MealAssignment("dinnerA", makes_lunch=False)
    }
    assert restored.populate_leftovers() == []


def test_snapshot_is_isolated_from_later_mutations() -> None:
    plan = _monday_week()
    snapshot = plan.to_snapshot()

    plan.assign_meal("2024-01-01", MealSlot.DINNER, MealAssignment("dinnerA"))

    assert snapshot.day_plans[0].dinner_meal_id is None
    assert snapshot.dinner_assignments == {}
