"""Planned week use cases."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from weekly_planner.domain.calendar import MealSlot, parse_iso_date
from weekly_planner.domain.errors import (
    PlannedWeekExistsError,
    PlannedWeekNotFoundError,
)
from weekly_planner.domain.pagination import PaginatedResult, PaginationOptions
from weekly_planner.domain.planned_weeks import (
    DayPlanState,
    MealAssignment,
    WeeklyPlan,
)
from weekly_planner.services.tenant_settings import TenantSettingsService

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedWeekFilters:
    """Optional bounds on a week's starting date, both inclusive."""

    start_date: str | None = None
    end_date: str | None = None


class PlannedWeekRepository(Protocol):
    """Persistence interface for planned weeks."""

    def create(self, plan: WeeklyPlan) -> WeeklyPlan:
        """Persist a new week and assign its identifier."""

    def save(self, plan: WeeklyPlan) -> WeeklyPlan:
        """Persist changes to an existing week."""

    def find_by_id(self, week_id: UUID, tenant_id: str) -> WeeklyPlan | None:
        """Return a tenant's week by id, if present."""

    def find_by_tenant_and_start_date(
        self, tenant_id: str, starting_date: str
    ) -> WeeklyPlan | None:
        """Return a tenant's week starting on a date, if present."""

    def find_all(
        self,
        tenant_id: str,
        filters: PlannedWeekFilters | None = None,
        pagination: PaginationOptions | None = None,
    ) -> PaginatedResult[WeeklyPlan]:
        """Return a page of a tenant's weeks ordered by starting date."""

    def delete(self, week_id: UUID, tenant_id: str) -> None:
        """Delete a tenant's week."""


@dataclass
class PlannedWeekService:
    """Application service that loads, mutates and saves weekly plans."""

    repository: PlannedWeekRepository
    tenant_settings_service: TenantSettingsService

    def create_week(self, tenant_id: str, starting_date: str) -> WeeklyPlan:
        """Create the tenant's week starting on a date."""
        week_start_day = self.tenant_settings_service.get_week_start_day(tenant_id)
        plan = WeeklyPlan.create(tenant_id, starting_date, week_start_day)
        existing = self.repository.find_by_tenant_and_start_date(
            tenant_id, plan.starting_date
        )
        if existing is not None:
            raise PlannedWeekExistsError(
                "planned week already exists for this start date"
            )
        created = self.repository.create(plan)
        created.populate_leftovers()
        saved = self.repository.save(created)
        _logger.info(
            "Planned week created: tenant=%s week=%s start=%s",
            tenant_id,
            saved.id,
            saved.starting_date,
        )
        return saved

    def get_week(self, tenant_id: str, week_id: UUID) -> WeeklyPlan:
        """Return a tenant's week or raise when it does not exist."""
        plan = self.repository.find_by_id(week_id, tenant_id)
        if plan is None:
            raise PlannedWeekNotFoundError(f"planned week not found: {week_id}")
        return plan

    def list_weeks(
        self,
        tenant_id: str,
        filters: PlannedWeekFilters | None = None,
        pagination: PaginationOptions | None = None,
    ) -> PaginatedResult[WeeklyPlan]:
        """Return a page of the tenant's weeks."""
        if filters is not None:
            for bound in (filters.start_date, filters.end_date):
                if bound is not None:
                    parse_iso_date(bound)
        return self.repository.find_all(
            tenant_id, filters, pagination or PaginationOptions()
        )

    def delete_week(self, tenant_id: str, week_id: UUID) -> None:
        """Delete a tenant's week."""
        self.get_week(tenant_id, week_id)
        self.repository.delete(week_id, tenant_id)
        _logger.info("Planned week deleted: tenant=%s week=%s", tenant_id, week_id)

    def assign_meal(
        self,
        tenant_id: str,
        week_id: UUID,
        date: str,
        slot: MealSlot,
        assignment: MealAssignment | None,
    ) -> WeeklyPlan:
        """Assign a meal to a slot, or clear it when no assignment is given."""
        return self.update_day(tenant_id, week_id, date, {slot: assignment})

    def update_day(
        self,
        tenant_id: str,
        week_id: UUID,
        date: str,
        changes: Mapping[MealSlot, MealAssignment | None],
    ) -> WeeklyPlan:
        """Apply slot changes to one day and save the week once.

        Slots missing from ``changes`` are left alone; a ``None`` value clears
        the slot. Any dinner change re-runs leftover population before saving.
        """
        plan = self.get_week(tenant_id, week_id)
        plan.get_day_plan(date)
        for slot, assignment in changes.items():
            if assignment is None:
                plan.remove_meal(date, MealSlot(slot))
            else:
                plan.assign_meal(date, MealSlot(slot), assignment)
        if MealSlot.DINNER in changes:
            filled = plan.populate_leftovers()
            if filled:
                _logger.info(
                    "Leftover lunches derived: week=%s dates=%s", week_id, filled
                )
        saved = self.repository.save(plan)
        _logger.info(
            "Day plan updated: tenant=%s week=%s date=%s slots=%s",
            tenant_id,
            week_id,
            date,
            {
                MealSlot(slot).value: assignment.meal_id if assignment else None
                for slot, assignment in changes.items()
            },
        )
        return saved

    def populate_leftovers(self, tenant_id: str, week_id: UUID) -> WeeklyPlan:
        """Derive leftover lunches for a week and save it."""
        plan = self.get_week(tenant_id, week_id)
        filled = plan.populate_leftovers()
        _logger.info("Leftover lunches derived: week=%s dates=%s", week_id, filled)
        return self.repository.save(plan)

    def get_day_plan(self, tenant_id: str, week_id: UUID, date: str) -> DayPlanState:
        """Return one day of a tenant's week."""
        return self.get_week(tenant_id, week_id).get_day_plan(date)
