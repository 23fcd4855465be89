"""FastAPI application factory."""

import logging
import re
from datetime import date

from fastapi import FastAPI, HTTPException, Query, Request, status

from kitchen_analytics.api.schemas import (
    HaccpReportResponse,
    PaxForecastResponse,
    ScaledIngredientOut,
    ScalePreviewRequest,
    ScaleRequest,
    ScaleResponse,
)
from kitchen_analytics.app_logging import configure_logging
from kitchen_analytics.containers import AppContainer
from kitchen_analytics.domain.scaling import Ingredient
from kitchen_analytics.services.scaling import InvalidServingsError, RecipeNotFoundError

_WEEK_START_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Kitchen Analytics")
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/recipes/scale")
    async def scale_recipe(body: ScaleRequest, request: Request) -> ScaleResponse:
        """Scale a stored recipe to a target serving count."""
        state_container: AppContainer = request.app.state.container
        if body.target_servings <= 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="targetServings must be greater than 0",
            )
        try:
            scaled = state_container.recipe_scaling_service.scale_recipe(
                body.recipe_id, body.target_servings
            )
        except InvalidServingsError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        except RecipeNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        return ScaleResponse.from_domain(scaled)

    @app.post("/recipes/scale/preview")
    async def scale_preview(
        body: ScalePreviewRequest, request: Request
    ) -> ScaledIngredientOut:
        """Scale a single ingredient without touching the recipe store."""
        state_container: AppContainer = request.app.state.container
        try:
            scaled = state_container.scaling_engine.scale(
                Ingredient(name=body.name, quantity=body.quantity, unit=body.unit),
                body.from_servings,
                body.to_servings,
            )
        except InvalidServingsError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return ScaledIngredientOut.from_domain(scaled)

    @app.get("/analytics/haccp/report")
    async def haccp_report(
        request: Request,
        start_date: date | None = Query(default=None, alias="startDate"),
        end_date: date | None = Query(default=None, alias="endDate"),
        location_id: int | None = Query(default=None, alias="locationId"),
    ) -> HaccpReportResponse:
        """Return anomalies and compliance figures per unit and for the fleet."""
        state_container: AppContainer = request.app.state.container
        if start_date and end_date and start_date > end_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="startDate must not be after endDate",
            )
        fleet = state_container.haccp_report_service.build_report(
            start=start_date, end=end_date, location_id=location_id
        )
        logger.info(
            "HACCP report %s..%s: %s units, %s critical",
            fleet.start,
            fleet.end,
            len(fleet.units),
            fleet.summary.critical,
        )
        return HaccpReportResponse.from_domain(fleet)

    @app.get("/analytics/pax-forecast")
    async def pax_forecast(
        request: Request,
        week_start: str = Query(default="", alias="weekStart"),
        location_id: int | None = Query(default=None, alias="locationId"),
    ) -> PaxForecastResponse:
        """Forecast guest counts for the week starting at ``weekStart``."""
        state_container: AppContainer = request.app.state.container
        parsed = _parse_week_start(week_start)
        if parsed is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="weekStart parameter required (YYYY-MM-DD format)",
            )
        weekly = state_container.pax_forecast_service.forecast_week(
            parsed, location_id=location_id
        )
        return PaxForecastResponse.from_domain(weekly)

    return app


def _parse_week_start(raw: str) -> date | None:
    if not _WEEK_START_PATTERN.match(raw):
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return None
