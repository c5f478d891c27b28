"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from recipe_nutrition.api.models import (
    DayTotalsRequest,
    GroupServingRequest,
    PreparationServingRequest,
)
from recipe_nutrition.api.units import router as units_router
from recipe_nutrition.app_logging import configure_logging
from recipe_nutrition.containers import AppContainer
from recipe_nutrition.domain.entries import ItemRef, LogEntry
from recipe_nutrition.domain.errors import NutritionError
from recipe_nutrition.domain.groups import FoodGroup
from recipe_nutrition.domain.preparation import Preparation
from recipe_nutrition.services.nutrition import ServingResult


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(units_router)

    @app.exception_handler(NutritionError)
    async def nutrition_error_handler(
        request: Request, exc: NutritionError
    ) -> JSONResponse:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/nutrition/preparation")
    async def preparation_nutrition(
        body: PreparationServingRequest, request: Request
    ) -> dict[str, object]:
        """Return a preparation's nutrition at the requested serving size."""
        state_container: AppContainer = request.app.state.container
        service = state_container.nutrition_service
        preparation = Preparation.from_record(body.preparation)
        serving = service.resolve_serving(body.serving_size)
        return _serving_payload(service.preparation_serving(preparation, serving))

    @app.post("/nutrition/group")
    async def group_nutrition(
        body: GroupServingRequest, request: Request
    ) -> dict[str, object]:
        """Return a food group's nutrition at the requested serving size."""
        state_container: AppContainer = request.app.state.container
        service = state_container.nutrition_service
        group = FoodGroup.from_record(body.group, service.max_group_depth)
        serving = service.resolve_serving(body.serving_size)
        return _serving_payload(service.group_serving(group, serving))

    @app.post("/stats/day")
    async def day_totals(body: DayTotalsRequest, request: Request) -> dict[str, object]:
        """Return the nutrition logged on one day."""
        state_container: AppContainer = request.app.state.container
        entries = [
            LogEntry(
                id=entry.id,
                logged_at=entry.timestamp,
                item=ItemRef.from_record(entry.item),
            )
            for entry in body.entries
        ]
        totals = state_container.stats_service.day_totals(
            entries, body.products, body.groups, body.day, body.timezone
        )
        return {
            "day": totals.day.isoformat(),
            "nutrition": totals.nutrition.to_record(),
            "entryCount": totals.entry_count,
            "skippedCount": totals.skipped_count,
        }

    return app


def _serving_payload(result: ServingResult) -> dict[str, object]:
    return {
        "nutrition": result.nutrition.to_record(),
        "mass": result.mass.to_record() if result.mass is not None else None,
        "volume": result.volume.to_record() if result.volume is not None else None,
        "servings": result.servings,
        "fallback": result.fallback,
        "description": result.description,
    }
