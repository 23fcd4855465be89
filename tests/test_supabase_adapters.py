"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import date, datetime

import pytest

from kitchen_analytics.adapters.supabase_guest_count_repository import (
    SupabaseGuestCountRepository,
)
from kitchen_analytics.adapters.supabase_haccp_repository import (
    SupabaseHaccpRepository,
)
from kitchen_analytics.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from kitchen_analytics.domain.haccp import SafeRange
from tests.conftest import BERLIN


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: list[list[dict[str, object]]] = field(default_factory=list)
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None

    def queue(self, data: list[dict[str, object]]) -> None:
        self.response_queue.append(data)

    def select(self, *_args) -> "FakeTable":
        self.last_filters = []
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("eq", column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("gte", column, value))
        return self

    def lt(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("lt", column, value))
        return self

    def lte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("lte", column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def execute(self) -> FakeResponse:
        data = self.response_queue.pop(0) if self.response_queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_supabase_recipe_repository() -> None:
    client = FakeSupabaseClient()
    client.table("recipes").queue(
        [{"id": 5, "name": "Gulasch", "category": "Hauptgericht", "portions": 4}]
    )
    client.table("ingredients").queue(
        [
            {"name": "Rindfleisch", "amount": 800, "unit": "g"},
            {"name": "Salz", "amount": None, "unit": None},
        ]
    )

    repository = SupabaseRecipeRepository(client)
    recipe = repository.get_recipe(5)
    ingredients = repository.list_ingredients(5)

    assert recipe is not None
    assert recipe.portions == 4
    assert client.table("recipes").last_filters == [("eq", "id", 5)]
    assert ingredients[0].quantity == 800.0
    assert ingredients[1].quantity == 0.0
    assert ingredients[1].unit == ""
    assert client.table("ingredients").last_order == ("id", False)


def test_supabase_recipe_repository_missing_recipe() -> None:
    client = FakeSupabaseClient()

    assert SupabaseRecipeRepository(client).get_recipe(1) is None


def test_supabase_recipe_repository_without_portions() -> None:
    client = FakeSupabaseClient()
    client.table("recipes").queue([{"id": 2, "name": "Suppe", "portions": None}])

    recipe = SupabaseRecipeRepository(client).get_recipe(2)

    assert recipe is not None
    assert recipe.portions is None
    assert recipe.category is None


def test_supabase_haccp_repository_units() -> None:
    client = FakeSupabaseClient()
    client.table("fridges").queue(
        [
            {
                "id": 1,
                "name": "Kühlhaus",
                "location_id": 2,
                "temp_min": 2,
                "temp_max": "8.0",
            }
        ]
    )

    units = SupabaseHaccpRepository(client).list_units(location_id=2)

    assert units[0].safe_range == SafeRange(min=2.0, max=8.0)
    assert units[0].location_id == 2
    assert client.table("fridges").last_filters == [("eq", "location_id", 2)]


def test_supabase_haccp_repository_readings() -> None:
    client = FakeSupabaseClient()
    logs = client.table("haccp_logs")
    logs.queue(
        [
            {
                "fridge_id": 1,
                "temperature": "4.5",
                "timestamp": "2026-01-05T08:00:00+01:00",
                "status": "ok",
            },
            {
                "fridge_id": 1,
                "temperature": 9,
                "timestamp": "2026-01-05T16:00:00+01:00",
                "status": None,
            },
        ]
    )
    start = datetime(2026, 1, 5, tzinfo=BERLIN)
    end = datetime(2026, 1, 6, tzinfo=BERLIN)

    readings = SupabaseHaccpRepository(client).list_readings(1, start, end)

    assert [reading.temperature for reading in readings] == [4.5, 9.0]
    assert readings[0].status == "ok"
    assert readings[1].status is None
    assert readings[0].timestamp.utcoffset() is not None
    assert ("gte", "timestamp", start.isoformat()) in logs.last_filters
    assert ("lt", "timestamp", end.isoformat()) in logs.last_filters


def test_supabase_haccp_repository_rejects_rows_without_timestamp() -> None:
    client = FakeSupabaseClient()
    client.table("haccp_logs").queue(
        [{"fridge_id": 1, "temperature": 4.0, "timestamp": None}]
    )
    start = datetime(2026, 1, 5, tzinfo=BERLIN)

    with pytest.raises(RuntimeError):
        SupabaseHaccpRepository(client).list_readings(1, start, start)


def test_supabase_guest_count_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("guest_counts")
    table.queue(
        [
            {
                "date": "2026-06-08",
                "meal": "mittag",
                "location_id": 1,
                "adults": 90,
                "children": None,
            }
        ]
    )

    observations = SupabaseGuestCountRepository(client).list_observations(
        1, date(2026, 3, 1), date(2026, 6, 14)
    )

    assert observations[0].date == date(2026, 6, 8)
    assert observations[0].total == 90
    assert table.last_filters == [
        ("gte", "date", "2026-03-01"),
        ("lte", "date", "2026-06-14"),
        ("eq", "location_id", 1),
    ]
    assert table.last_order == ("date", False)
