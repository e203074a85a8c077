"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from nutrivalor.api.meals import router as meals_router
from nutrivalor.api.models import BodyProfilePayload, NutrientRequest
from nutrivalor.api.serializers import serialize_result
from nutrivalor.api.shopping import router as shopping_router
from nutrivalor.app_logging import configure_logging
from nutrivalor.containers import AppContainer
from nutrivalor.domain.errors import (
    FoodNotFoundError,
    InvalidProfileError,
    InvalidQuantityError,
    InvalidUnitConversionError,
)
from nutrivalor.domain.nutrition import (
    QuantityInput,
    is_discrete_unit_name,
    parse_unit,
)
from nutrivalor.services.nutrition import compute_nutrients
from nutrivalor.services.targets import calculate_targets


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.debug)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(meals_router)
    app.include_router(shopping_router)

    @app.exception_handler(InvalidQuantityError)
    @app.exception_handler(InvalidUnitConversionError)
    @app.exception_handler(InvalidProfileError)
    async def validation_error(request: Request, exc: ValueError) -> JSONResponse:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc)},
        )

    @app.exception_handler(FoodNotFoundError)
    async def food_not_found(request: Request, exc: FoodNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc.args[0])},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/nutrients/calculate")
    async def calculate(payload: NutrientRequest) -> dict[str, object]:
        """Compute absolute macros for one quantity of food."""
        unit = None
        if payload.unit_name and (
            payload.input_mode == "unit" or is_discrete_unit_name(payload.unit_name)
        ):
            unit = parse_unit(payload.unit_name, payload.grams_per_unit)
        result = compute_nutrients(
            QuantityInput(
                macros=payload.macros.to_domain(),
                input_mode=payload.input_mode,
                quantity=payload.quantity,
                unit=unit,
            )
        )
        return serialize_result(result)

    @app.post("/targets")
    async def targets(payload: BodyProfilePayload) -> dict[str, int]:
        """Estimate daily macro targets for a body profile."""
        result = calculate_targets(payload.to_domain())
        return {
            "protein": result.protein,
            "carbs": result.carbs,
            "fat": result.fat,
            "calories": result.calories,
            "bmr": result.bmr,
            "tdee": result.tdee,
        }

    return app
