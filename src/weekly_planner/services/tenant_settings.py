"""Tenant settings service."""

from dataclasses import dataclass
from typing import Protocol

from weekly_planner.domain.calendar import WeekStartDay


class TenantSettingsRepository(Protocol):
    """Persistence interface for tenant settings."""

    def get_week_start_day(self, tenant_id: str) -> str | None:
        """Return the tenant's week start day if set."""

    def set_week_start_day(self, tenant_id: str, week_start_day: str) -> None:
        """Update the tenant's week start day."""


@dataclass
class TenantSettingsService:
    """Service for tenant settings."""

    repository: TenantSettingsRepository
    default_week_start_day: WeekStartDay = WeekStartDay.MONDAY

    def get_week_start_day(self, tenant_id: str) -> WeekStartDay:
        """Return the tenant's week start day or the default if unset."""
        stored = self.repository.get_week_start_day(tenant_id)
        if stored is None:
            return self.default_week_start_day
        return WeekStartDay(stored)

    def set_week_start_day(self, tenant_id: str, week_start_day: WeekStartDay) -> None:
        """Persist a tenant's week start day."""
        self.repository.set_week_start_day(
            tenant_id, WeekStartDay(week_start_day).value
        )
