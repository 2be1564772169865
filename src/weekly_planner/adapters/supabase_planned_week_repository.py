"""Supabase implementation for planned weeks."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from weekly_planner.domain.errors import StaleWriteError
from weekly_planner.domain.pagination import PaginatedResult, PaginationOptions
from weekly_planner.domain.planned_weeks import (
    DayPlanState,
    PlannedWeekSnapshot,
    WeeklyPlan,
)
from weekly_planner.services.planned_weeks import (
    PlannedWeekFilters,
    PlannedWeekRepository,
)

_logger = logging.getLogger(__name__)

_WEEKS_TABLE = "planned_weeks"
_DAYS_TABLE = "day_plans"


@dataclass
class SupabasePlannedWeekRepository(PlannedWeekRepository):
    """Supabase-backed repository for planned weeks.

    Each save bumps ``version`` only when the stored row still carries the
    version that was loaded, so interleaved load/mutate/save cycles on the
    same week fail with :class:`StaleWriteError` instead of overwriting.
    """

    client: Client

    def create(self, plan: WeeklyPlan) -> WeeklyPlan:
        """Insert the week and its seven day plans.

        The week row is removed again when the day rows cannot be inserted.
        """
        response = (
            self.client.table(_WEEKS_TABLE)
            .insert(
                {
                    "tenant_id": plan.tenant_id,
                    "starting_date": plan.starting_date,
                    "week_start_day": plan.week_start_day.value,
                    "dinner_assignments": {
                        day: item.to_dict()
                        for day, item in plan.dinner_assignments.items()
                    },
                    "version": 1,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create planned week")
        week_id = UUID(str(response.data[0]["id"]))
        days_response = (
            self.client.table(_DAYS_TABLE)
            .insert([_day_row(week_id, day_plan) for day_plan in plan.day_plans])
            .execute()
        )
        if not days_response.data:
            _logger.error(
                "Day plan insert failed, removing planned week: week=%s", week_id
            )
            self.client.table(_WEEKS_TABLE).delete().eq("id", str(week_id)).eq(
                "tenant_id", plan.tenant_id
            ).execute()
            raise RuntimeError("Failed to create day plans for planned week")
        plan.assign_id(week_id)
        plan.mark_saved(1)
        return plan

    def save(self, plan: WeeklyPlan) -> WeeklyPlan:
        """Persist day plans and dinner assignments for an existing week."""
        snapshot = plan.to_snapshot()
        payload = snapshot.to_dict()
        next_version = snapshot.version + 1
        response = (
            self.client.table(_WEEKS_TABLE)
            .update(
                {
                    "dinner_assignments": payload["dinner_assignments"] or {},
                    "version": next_version,
                }
            )
            .eq("id", str(snapshot.id))
            .eq("tenant_id", snapshot.tenant_id)
            .eq("version", snapshot.version)
            .execute()
        )
        if not response.data:
            _logger.warning(
                "Rejected stale planned week save: week=%s version=%s",
                snapshot.id,
                snapshot.version,
            )
            raise StaleWriteError(
                f"planned week {snapshot.id} was modified by another request"
            )
        self.client.table(_DAYS_TABLE).upsert(
            [_day_row(snapshot.id, day_plan) for day_plan in snapshot.day_plans],
            on_conflict="planned_week_id,date",
        ).execute()
        plan.mark_saved(next_version)
        return plan

    def find_by_id(self, week_id: UUID, tenant_id: str) -> WeeklyPlan | None:
        """Return a tenant's week by id, if present."""
        response = (
            self.client.table(_WEEKS_TABLE)
            .select("*")
            .eq("id", str(week_id))
            .eq("tenant_id", tenant_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return self._load(response.data[0])

    def find_by_tenant_and_start_date(
        self, tenant_id: str, starting_date: str
    ) -> WeeklyPlan | None:
        """Return a tenant's week starting on a date, if present."""
        response = (
            self.client.table(_WEEKS_TABLE)
            .select("*")
            .eq("tenant_id", tenant_id)
            .eq("starting_date", starting_date)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return self._load(response.data[0])

    def find_all(
        self,
        tenant_id: str,
        filters: PlannedWeekFilters | None = None,
        pagination: PaginationOptions | None = None,
    ) -> PaginatedResult[WeeklyPlan]:
        """Return a page of a tenant's weeks ordered by starting date."""
        page = pagination or PaginationOptions()
        query = (
            self.client.table(_WEEKS_TABLE)
            .select("*", count="exact")
            .eq("tenant_id", tenant_id)
        )
        if filters and filters.start_date:
            query = query.gte("starting_date", filters.start_date)
        if filters and filters.end_date:
            query = query.lte("starting_date", filters.end_date)
        response = (
            query.order("starting_date")
            .range(page.offset, page.offset + page.limit - 1)
            .execute()
        )
        rows = response.data or []
        days_by_week = self._list_days([row["id"] for row in rows])
        items = [
            WeeklyPlan.rehydrate(_parse_snapshot(row, days_by_week.get(row["id"], [])))
            for row in rows
        ]
        total = response.count if response.count is not None else len(items)
        return PaginatedResult(
            items=items, total=total, limit=page.limit, offset=page.offset
        )

    def delete(self, week_id: UUID, tenant_id: str) -> None:
        """Delete a tenant's week and its day plans."""
        response = (
            self.client.table(_WEEKS_TABLE)
            .delete()
            .eq("id", str(week_id))
            .eq("tenant_id", tenant_id)
            .execute()
        )
        if not response.data:
            return
        self.client.table(_DAYS_TABLE).delete().eq(
            "planned_week_id", str(week_id)
        ).execute()

    def _load(self, row: dict[str, object]) -> WeeklyPlan:
        days = self._list_days([row["id"]]).get(row["id"], [])
        return WeeklyPlan.rehydrate(_parse_snapshot(row, days))

    def _list_days(self, week_ids: list[object]) -> dict[object, list[dict]]:
        if not week_ids:
            return {}
        response = (
            self.client.table(_DAYS_TABLE)
            .select("*")
            .in_("planned_week_id", [str(week_id) for week_id in week_ids])
            .order("date")
            .execute()
        )
        grouped: dict[object, list[dict]] = {}
        for day_row in response.data or []:
            grouped.setdefault(day_row["planned_week_id"], []).append(day_row)
        return grouped


def _parse_snapshot(
    row: dict[str, object], day_rows: list[dict[str, object]]
) -> PlannedWeekSnapshot:
    """Parse a planned week row and its day rows into a snapshot."""
    if not isinstance(row.get("dinner_assignments"), dict):
        _logger.warning(
            "Planned week without dinner assignments, makes_lunch defaults to "
            "False: week=%s",
            row["id"],
        )
    return PlannedWeekSnapshot.from_dict(
        {**row, "day_plans": sorted(day_rows, key=lambda day_row: day_row["date"])}
    )


def _day_row(week_id: UUID | None, day_plan: DayPlanState) -> dict[str, object]:
    return {"planned_week_id": str(week_id), **day_plan.to_dict()}
