"""Dependency container wiring for the application."""

from dataclasses import dataclass

from recipe_nutrition.config import Settings
from recipe_nutrition.services.favorites import FavoritesService
from recipe_nutrition.services.nutrition import NutritionService
from recipe_nutrition.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    nutrition_service: NutritionService
    favorites_service: FavoritesService
    stats_service: StatsService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    nutrition_service = NutritionService(
        max_group_depth=resolved_settings.max_group_depth,
        debug=resolved_settings.debug,
    )
    return AppContainer(
        settings=resolved_settings,
        nutrition_service=nutrition_service,
        favorites_service=FavoritesService(
            nutrition_service, energy_unit=resolved_settings.default_energy_unit
        ),
        stats_service=StatsService(nutrition_service),
    )
