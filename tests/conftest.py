"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from kitchen_analytics.config import Settings
from kitchen_analytics.containers import AppContainer
from kitchen_analytics.domain.forecast import PaxDefaults, PaxObservation
from kitchen_analytics.domain.haccp import RefrigerationUnit, TemperatureReading
from kitchen_analytics.domain.scaling import Ingredient, RecipeRecord
from kitchen_analytics.services.anomalies import TemperatureAnomalyDetector
from kitchen_analytics.services.compliance import (
    ComplianceScorer,
    HaccpReportService,
    HaccpRepository,
)
from kitchen_analytics.services.forecast import (
    ForecastEngine,
    GuestCountRepository,
    PaxForecastService,
)
from kitchen_analytics.services.scaling import (
    RecipeRepository,
    RecipeScalingService,
    ScalingEngine,
)

BERLIN = ZoneInfo("Europe/Berlin")


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe store for tests."""

    recipes: dict[int, RecipeRecord] = field(default_factory=dict)
    ingredients: dict[int, list[Ingredient]] = field(default_factory=dict)
    lookups: list[int] = field(default_factory=list)

    def get_recipe(self, recipe_id: int) -> RecipeRecord | None:
        self.lookups.append(recipe_id)
        return self.recipes.get(recipe_id)

    def list_ingredients(self, recipe_id: int) -> list[Ingredient]:
        return list(self.ingredients.get(recipe_id, []))


@dataclass
class InMemoryHaccpRepository(HaccpRepository):
    """In-memory fridge and HACCP log store for tests."""

    units: list[RefrigerationUnit] = field(default_factory=list)
    readings: list[TemperatureReading] = field(default_factory=list)

    def list_units(self, location_id: int | None) -> list[RefrigerationUnit]:
        if location_id is None:
            return list(self.units)
        return [unit for unit in self.units if unit.location_id == location_id]

    def list_readings(
        self, unit_id: int, start: datetime, end: datetime
    ) -> list[TemperatureReading]:
        return [
            reading
            for reading in self.readings
            if reading.unit_id == unit_id and start <= reading.timestamp < end
        ]


@dataclass
class InMemoryGuestCountRepository(GuestCountRepository):
    """In-memory guest-count history for tests."""

    observations: list[PaxObservation] = field(default_factory=list)
    queries: list[tuple[int | None, date, date]] = field(default_factory=list)

    def list_observations(
        self, location_id: int | None, start: date, end: date
    ) -> list[PaxObservation]:
        self.queries.append((location_id, start, end))
        return [
            observation
            for observation in self.observations
            if start <= observation.date <= end
            and (location_id is None or observation.location_id == location_id)
        ]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def haccp_repository() -> InMemoryHaccpRepository:
    return InMemoryHaccpRepository()


@pytest.fixture
def guest_count_repository() -> InMemoryGuestCountRepository:
    return InMemoryGuestCountRepository()


@pytest.fixture
def container(
    settings: Settings,
    recipe_repository: InMemoryRecipeRepository,
    haccp_repository: InMemoryHaccpRepository,
    guest_count_repository: InMemoryGuestCountRepository,
) -> AppContainer:
    scaling_engine = ScalingEngine()
    return AppContainer(
        settings=settings,
        scaling_engine=scaling_engine,
        recipe_scaling_service=RecipeScalingService(
            repository=recipe_repository,
            engine=scaling_engine,
            pax_defaults=PaxDefaults(defaults={"city": 60, "sued": 45, "ak": 80}),
        ),
        haccp_report_service=HaccpReportService(
            repository=haccp_repository,
            detector=TemperatureAnomalyDetector(timezone=BERLIN),
            scorer=ComplianceScorer(),
            timezone_name="Europe/Berlin",
        ),
        pax_forecast_service=PaxForecastService(
            repository=guest_count_repository,
            engine=ForecastEngine(),
        ),
    )
