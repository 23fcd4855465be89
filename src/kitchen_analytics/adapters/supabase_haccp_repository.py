"""Supabase repository for refrigeration units and HACCP logs."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from kitchen_analytics.domain.haccp import (
    RefrigerationUnit,
    SafeRange,
    TemperatureReading,
)
from kitchen_analytics.services.compliance import HaccpRepository


@dataclass
class SupabaseHaccpRepository(HaccpRepository):
    """Supabase implementation for HACCP queries."""

    client: Client

    def list_units(self, location_id: int | None) -> list[RefrigerationUnit]:
        """Return fridges, optionally restricted to a location."""
        query = self.client.table("fridges").select(
            "id, name, location_id, temp_min, temp_max"
        )
        if location_id is not None:
            query = query.eq("location_id", location_id)
        response = query.order("id", desc=False).execute()
        return [
            RefrigerationUnit(
                id=int(row["id"]),
                name=str(row.get("name") or ""),
                safe_range=SafeRange(
                    min=float(row["temp_min"]), max=float(row["temp_max"])
                ),
                location_id=row.get("location_id"),
            )
            for row in response.data or []
        ]

    def list_readings(
        self, unit_id: int, start: datetime, end: datetime
    ) -> list[TemperatureReading]:
        """Return a fridge's logs in ``[start, end)`` ordered by time."""
        response = (
            self.client.table("haccp_logs")
            .select("fridge_id, temperature, timestamp, status")
            .eq("fridge_id", unit_id)
            .gte("timestamp", start.isoformat())
            .lt("timestamp", end.isoformat())
            .order("timestamp", desc=False)
            .execute()
        )
        return [_parse_reading(row) for row in response.data or []]


def _parse_reading(row: dict[str, object]) -> TemperatureReading:
    timestamp_raw = row.get("timestamp")
    if not isinstance(timestamp_raw, str) or not timestamp_raw:
        raise RuntimeError(f"HACCP log without timestamp: {row}")
    status = row.get("status")
    return TemperatureReading(
        unit_id=int(row["fridge_id"]),
        temperature=float(row["temperature"]),
        timestamp=datetime.fromisoformat(timestamp_raw),
        status=str(status) if status else None,
    )
