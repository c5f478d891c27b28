"""Shared test fixtures."""

import logging
from collections.abc import Iterator

import pytest

from recipe_nutrition.config import Settings
from recipe_nutrition.containers import AppContainer
from recipe_nutrition.domain.nutrients import NutrientProfile
from recipe_nutrition.domain.preparation import Preparation
from recipe_nutrition.domain.units import UnitValue
from recipe_nutrition.services.favorites import FavoritesService
from recipe_nutrition.services.nutrition import NutritionService
from recipe_nutrition.services.stats import StatsService


def unit(amount: float, unit_name: str) -> dict[str, object]:
    return {"amount": amount, "unit": unit_name}


def peanut_butter_record() -> dict[str, object]:
    """A preparation of 190 kcal per 32 g serving."""
    return {
        "id": "prep-pb",
        "name": "Default",
        "nutritionalInformation": {
            "calories": unit(190, "kcal"),
            "totalFat": unit(16, "g"),
            "protein": unit(7, "g"),
            "sodium": unit(140, "mg"),
        },
        "mass": unit(32, "g"),
        "customSizes": [
            {
                "name": "tablespoon",
                "servingSize": {"kind": "mass", "amount": unit(16, "g")},
            }
        ],
    }


def bread_record() -> dict[str, object]:
    """A preparation of 150 kcal per slice with no mass."""
    return {
        "id": "prep-bread",
        "name": "Slice",
        "nutritionalInformation": {
            "calories": unit(150, "kcal"),
            "protein": unit(5, "g"),
        },
        "customSizes": [{"name": "slice", "servings": 1}],
    }


def product_record(
    product_id: str, *preparations: dict[str, object]
) -> dict[str, object]:
    return {"id": product_id, "name": product_id, "preparations": list(preparations)}


@pytest.fixture(autouse=True)
def reset_app_logger() -> Iterator[None]:
    """Undo configure_logging so caplog sees records from every test."""
    yield
    logger = logging.getLogger("recipe_nutrition")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def peanut_butter() -> Preparation:
    return Preparation.from_record(peanut_butter_record())


@pytest.fixture
def hundred_kcal() -> Preparation:
    return Preparation(
        nutrients=NutrientProfile(
            {"calories": UnitValue(100, "kcal"), "protein": UnitValue(2, "g")}
        ),
        id="prep-100",
        mass=UnitValue(50, "g"),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="test", max_group_depth=8)


@pytest.fixture
def nutrition_service(settings: Settings) -> NutritionService:
    return NutritionService(max_group_depth=settings.max_group_depth)


@pytest.fixture
def container(settings: Settings, nutrition_service: NutritionService) -> AppContainer:
    return AppContainer(
        settings=settings,
        nutrition_service=nutrition_service,
        favorites_service=FavoritesService(
            nutrition_service, energy_unit=settings.default_energy_unit
        ),
        stats_service=StatsService(nutrition_service),
    )
