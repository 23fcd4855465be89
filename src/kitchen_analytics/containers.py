"""Dependency container wiring for the application."""

from dataclasses import dataclass
from zoneinfo import ZoneInfo

from supabase import create_client

from kitchen_analytics.adapters.supabase_guest_count_repository import (
    SupabaseGuestCountRepository,
)
from kitchen_analytics.adapters.supabase_haccp_repository import (
    SupabaseHaccpRepository,
)
from kitchen_analytics.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from kitchen_analytics.config import Settings, parse_default_pax
from kitchen_analytics.domain.forecast import PaxDefaults
from kitchen_analytics.services.anomalies import TemperatureAnomalyDetector
from kitchen_analytics.services.compliance import ComplianceScorer, HaccpReportService
from kitchen_analytics.services.forecast import ForecastEngine, PaxForecastService
from kitchen_analytics.services.scaling import (
    RecipeScalingService,
    ScalingEngine,
    default_curves,
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    scaling_engine: ScalingEngine
    recipe_scaling_service: RecipeScalingService
    haccp_report_service: HaccpReportService
    pax_forecast_service: PaxForecastService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    scaling_engine = ScalingEngine(
        curves=default_curves(
            leavening_sqrt_weight=resolved_settings.leavening_sqrt_weight,
            cooking_fat_sqrt_weight=resolved_settings.cooking_fat_sqrt_weight,
            liquid_sqrt_weight=resolved_settings.liquid_sqrt_weight,
        )
    )
    recipe_scaling_service = RecipeScalingService(
        repository=SupabaseRecipeRepository(supabase_client),
        engine=scaling_engine,
        pax_defaults=PaxDefaults(
            defaults=parse_default_pax(resolved_settings.default_pax),
            fallback=resolved_settings.default_pax_fallback,
        ),
    )
    haccp_report_service = HaccpReportService(
        repository=SupabaseHaccpRepository(supabase_client),
        detector=TemperatureAnomalyDetector(
            timezone=ZoneInfo(resolved_settings.kitchen_timezone)
        ),
        scorer=ComplianceScorer(
            checks_per_day=resolved_settings.haccp_checks_per_day
        ),
        timezone_name=resolved_settings.kitchen_timezone,
        baseline_days=resolved_settings.haccp_baseline_days,
        default_range_days=resolved_settings.haccp_default_range_days,
    )
    pax_forecast_service = PaxForecastService(
        repository=SupabaseGuestCountRepository(supabase_client),
        engine=ForecastEngine(),
        meals=tuple(resolved_settings.forecast_meals),
    )

    return AppContainer(
        settings=resolved_settings,
        scaling_engine=scaling_engine,
        recipe_scaling_service=recipe_scaling_service,
        haccp_report_service=haccp_report_service,
        pax_forecast_service=pax_forecast_service,
    )
