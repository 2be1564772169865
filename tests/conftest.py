"""Shared test fixtures."""

from dataclasses import dataclass, field
from uuid import UUID, uuid4

import pytest

from weekly_planner.config import Settings
from weekly_planner.containers import AppContainer
from weekly_planner.domain.errors import StaleWriteError
from weekly_planner.domain.pagination import PaginatedResult, PaginationOptions
from weekly_planner.domain.planned_weeks import PlannedWeekSnapshot, WeeklyPlan
from weekly_planner.services.planned_weeks import (
    PlannedWeekFilters,
    PlannedWeekRepository,
    PlannedWeekService,
)
from weekly_planner.services.tenant_settings import (
    TenantSettingsRepository,
    TenantSettingsService,
)

TENANT_ID = "tenant-a"
OTHER_TENANT_ID = "tenant-b"
API_TOKEN = "token-a"
OTHER_API_TOKEN = "token-b"


@dataclass
class InMemoryPlannedWeekRepository(PlannedWeekRepository):
    """In-memory planned week repository for tests.

    Stores snapshots so every load returns a fresh aggregate, like a real store.
    """

    weeks: dict[UUID, PlannedWeekSnapshot] = field(default_factory=dict)
    saves: int = 0

    def create(self, plan: WeeklyPlan) -> WeeklyPlan:
        plan.assign_id(uuid4())
        plan.mark_saved(1)
        self.weeks[plan.id] = plan.to_snapshot()
        return plan

    def save(self, plan: WeeklyPlan) -> WeeklyPlan:
        snapshot = plan.to_snapshot()
        stored = self.weeks.get(snapshot.id)
        if stored is None or stored.version != snapshot.version:
            raise StaleWriteError(f"planned week {snapshot.id} is stale")
        plan.mark_saved(snapshot.version + 1)
        self.weeks[snapshot.id] = plan.to_snapshot()
        self.saves += 1
        return plan

    def find_by_id(self, week_id: UUID, tenant_id: str) -> WeeklyPlan | None:
        snapshot = self.weeks.get(week_id)
        if snapshot is None or snapshot.tenant_id != tenant_id:
            return None
        return WeeklyPlan.rehydrate(snapshot)

    def find_by_tenant_and_start_date(
        self, tenant_id: str, starting_date: str
    ) -> WeeklyPlan | None:
        for snapshot in self.weeks.values():
            if (
                snapshot.tenant_id == tenant_id
                and snapshot.starting_date == starting_date
            ):
                return WeeklyPlan.rehydrate(snapshot)
        return None

    def find_all(
        self,
        tenant_id: str,
        filters: PlannedWeekFilters | None = None,
        pagination: PaginationOptions | None = None,
    ) -> PaginatedResult[WeeklyPlan]:
        page = pagination or PaginationOptions()
        matches = sorted(
            (
                snapshot
                for snapshot in self.weeks.values()
                if snapshot.tenant_id == tenant_id
                and (
                    not filters
                    or not filters.start_date
                    or snapshot.starting_date >= filters.start_date
                )
                and (
                    not filters
                    or not filters.end_date
                    or snapshot.starting_date <= filters.end_date
                )
            ),
            key=lambda snapshot: snapshot.starting_date,
        )
        window = matches[page.offset : page.offset + page.limit]
        return PaginatedResult(
            items=[WeeklyPlan.rehydrate(snapshot) for snapshot in window],
            total=len(matches),
            limit=page.limit,
            offset=page.offset,
        )

    def delete(self, week_id: UUID, tenant_id: str) -> None:
        snapshot = self.weeks.get(week_id)
        if snapshot is not None and snapshot.tenant_id == tenant_id:
            del self.weeks[week_id]


@dataclass
class InMemoryTenantSettingsRepository(TenantSettingsRepository):
    """In-memory tenant settings repository for tests."""

    week_start_days: dict[str, str] = field(default_factory=dict)

    def get_week_start_day(self, tenant_id: str) -> str | None:
        return self.week_start_days.get(tenant_id)

    def set_week_start_day(self, tenant_id: str, week_start_day: str) -> None:
        self.week_start_days[tenant_id] = week_start_day


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        api_tokens=f"{API_TOKEN}={TENANT_ID},{OTHER_API_TOKEN}={OTHER_TENANT_ID}",
    )


@pytest.fixture
def planned_week_repository() -> InMemoryPlannedWeekRepository:
    return InMemoryPlannedWeekRepository()


@pytest.fixture
def tenant_settings_service() -> TenantSettingsService:
    return TenantSettingsService(InMemoryTenantSettingsRepository())


@pytest.fixture
def planned_week_service(
    planned_week_repository: InMemoryPlannedWeekRepository,
    tenant_settings_service: TenantSettingsService,
) -> PlannedWeekService:
    return PlannedWeekService(
        repository=planned_week_repository,
        tenant_settings_service=tenant_settings_service,
    )


@pytest.fixture
def container(
    settings: Settings,
    planned_week_service: PlannedWeekService,
    tenant_settings_service: TenantSettingsService,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        planned_week_service=planned_week_service,
        tenant_settings_service=tenant_settings_service,
    )
