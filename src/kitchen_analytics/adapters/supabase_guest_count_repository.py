"""Supabase repository for recorded guest counts."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from kitchen_analytics.domain.forecast import PaxObservation
from kitchen_analytics.services.forecast import GuestCountRepository


@dataclass
class SupabaseGuestCountRepository(GuestCountRepository):
    """Supabase implementation for guest-count history."""

    client: Client

    def list_observations(
        self, location_id: int | None, start: date, end: date
    ) -> list[PaxObservation]:
        """Return guest counts between two dates inclusive."""
        query = (
            self.client.table("guest_counts")
            .select("date, meal, location_id, adults, children")
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
        )
        if location_id is not None:
            query = query.eq("location_id", location_id)
        response = query.order("date", desc=False).execute()
        return [
            PaxObservation(
                date=date.fromisoformat(str(row["date"])[:10]),
                meal=str(row.get("meal") or ""),
                location_id=row.get("location_id"),
                adults=int(row.get("adults") or 0),
                children=int(row.get("children") or 0),
            )
            for row in response.data or []
        ]
