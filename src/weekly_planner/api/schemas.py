"""Pydantic models for planned week request and response payloads."""

from pydantic import BaseModel, model_validator

from weekly_planner.domain.calendar import WeekStartDay
from weekly_planner.domain.planned_weeks import DayPlanState, WeeklyPlan


class CreatePlannedWeekRequest(BaseModel):
    """Body for creating a planned week."""

    starting_date: str


class UpdateDayPlanRequest(BaseModel):
    """Body for changing a day's meals.

    Omitted fields are left alone; an explicit null clears the slot.
    """

    lunch_meal_id: str | None = None
    dinner_meal_id: str | None = None
    makes_lunch: bool | None = None

    @model_validator(mode="after")
    def validate_changes(self) -> "UpdateDayPlanRequest":
        """Require at least one change and a dinner for ``makes_lunch``."""
        if not self.model_fields_set:
            raise ValueError(
                "at least one of lunch_meal_id, dinner_meal_id or makes_lunch "
                "must be provided"
            )
        if "makes_lunch" in self.model_fields_set and self.dinner_meal_id is None:
            raise ValueError("makes_lunch requires dinner_meal_id")
        return self


class WeekStartDayPayload(BaseModel):
    """Tenant week start day setting."""

    week_start_day: WeekStartDay


class DayPlanResponse(BaseModel):
    """Day plan as returned by the API."""

    id: str
    planned_week_id: str
    date: str
    long_day: str
    short_day: str
    lunch_meal_id: str | None
    dinner_meal_id: str | None
    makes_lunch: bool
    is_leftover: bool

    @classmethod
    def from_domain(cls, plan: WeeklyPlan, day_plan: DayPlanState) -> "DayPlanResponse":
        assignment = plan.dinner_assignments.get(day_plan.date)
        return cls(
            id=f"{plan.id}:{day_plan.date}",
            planned_week_id=str(plan.id),
            date=day_plan.date,
            long_day=day_plan.long_day.value,
            short_day=day_plan.short_day.value,
            lunch_meal_id=day_plan.lunch_meal_id,
            dinner_meal_id=day_plan.dinner_meal_id,
            makes_lunch=bool(assignment and assignment.makes_lunch),
            is_leftover=day_plan.is_leftover,
        )


class PlannedWeekResponse(BaseModel):
    """Planned week as returned by the API."""

    id: str
    tenant_id: str
    starting_date: str
    week_start_day: str
    version: int
    day_plans: list[DayPlanResponse]

    @classmethod
    def from_domain(cls, plan: WeeklyPlan) -> "PlannedWeekResponse":
        snapshot = plan.to_snapshot()
        return cls(
            id=str(snapshot.id),
            tenant_id=snapshot.tenant_id,
            starting_date=snapshot.starting_date,
            week_start_day=snapshot.week_start_day.value,
            version=snapshot.version,
            day_plans=[
                DayPlanResponse.from_domain(plan, day_plan)
                for day_plan in snapshot.day_plans
            ],
        )


class PaginationResponse(BaseModel):
    """Pagination metadata for list responses."""

    offset: int
    limit: int
    total: int
    has_more: bool


class PlannedWeekListResponse(BaseModel):
    """A page of planned weeks."""

    data: list[PlannedWeekResponse]
    pagination: PaginationResponse
