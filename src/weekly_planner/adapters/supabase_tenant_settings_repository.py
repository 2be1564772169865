"""Supabase repository for tenant settings."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from weekly_planner.services.tenant_settings import TenantSettingsRepository


@dataclass
class SupabaseTenantSettingsRepository(TenantSettingsRepository):
    """Supabase implementation for tenant settings."""

    client: Client

    def get_week_start_day(self, tenant_id: str) -> str | None:
        """Return the stored week start day for a tenant."""
        response = (
            self.client.table("user_settings")
            .select("week_start_day")
            .eq("tenant_id", tenant_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("week_start_day")

    def set_week_start_day(self, tenant_id: str, week_start_day: str) -> None:
        """Create or update the tenant's week start day."""
        self.client.table("user_settings").upsert(
            {
                "tenant_id": tenant_id,
                "week_start_day": week_start_day,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="tenant_id",
        ).execute()
