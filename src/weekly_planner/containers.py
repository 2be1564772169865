"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from weekly_planner.adapters.supabase_planned_week_repository import (
    SupabasePlannedWeekRepository,
)
from weekly_planner.adapters.supabase_tenant_settings_repository import (
    SupabaseTenantSettingsRepository,
)
from weekly_planner.config import Settings
from weekly_planner.domain.calendar import WeekStartDay
from weekly_planner.services.planned_weeks import PlannedWeekService
from weekly_planner.services.tenant_settings import TenantSettingsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    planned_week_service: PlannedWeekService
    tenant_settings_service: TenantSettingsService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    planned_week_repository = SupabasePlannedWeekRepository(supabase_client)
    tenant_settings_repository = SupabaseTenantSettingsRepository(supabase_client)
    tenant_settings_service = TenantSettingsService(
        repository=tenant_settings_repository,
        default_week_start_day=WeekStartDay(resolved_settings.default_week_start_day),
    )
    planned_week_service = PlannedWeekService(
        repository=planned_week_repository,
        tenant_settings_service=tenant_settings_service,
    )

    return AppContainer(
        settings=resolved_settings,
        planned_week_service=planned_week_service,
        tenant_settings_service=tenant_settings_service,
    )
