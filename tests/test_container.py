"""Tests for container wiring."""

from weekly_planner.adapters.supabase_planned_week_repository import (
    SupabasePlannedWeekRepository,
)
from weekly_planner.containers import build_container
from weekly_planner.domain.calendar import WeekStartDay


def test_build_container_creates_services(settings) -> None:
    settings.default_week_start_day = "SATURDAY"

    container = build_container(settings)

    service = container.planned_week_service
    assert isinstance(service.repository, SupabasePlannedWeekRepository)
    assert (
        container.tenant_settings_service.default_week_start_day
        is WeekStartDay.SATURDAY
    )
