"""Favorite lookups."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from recipe_nutrition.domain.entries import Favorite, ItemRef
from recipe_nutrition.domain.errors import NutritionError
from recipe_nutrition.domain.groups import FoodGroup
from recipe_nutrition.domain.serving import ServingSize, servings_match
from recipe_nutrition.services.nutrition import NutritionService, ServingResult

_logger = logging.getLogger(__name__)


@dataclass
class FavoritesService:
    """Matches favorites and computes their nutrition."""

    nutrition_service: NutritionService
    energy_unit: str = "kcal"

    def find_favorite(
        self,
        favorites: Iterable[Favorite],
        *,
        product_id: str | None = None,
        preparation_id: str | None = None,
        group_id: str | None = None,
        serving_size: ServingSize | None = None,
    ) -> Favorite | None:
        """Return the favorite for an item, comparing servings by amount."""
        for favorite in favorites:
            if _matches(
                favorite.item, product_id, preparation_id, group_id, serving_size
            ):
                return favorite
        return None

    def favorite_serving(
        self,
        favorite: Favorite,
        products: Mapping[str, Mapping[str, object]],
        groups: Mapping[str, Mapping[str, object]],
    ) -> ServingResult | None:
        """Return nutrition for a favorite, or None if its data is missing."""
        return resolve_item(self.nutrition_service, favorite.item, products, groups)

    def favorite_calories(
        self,
        favorite: Favorite,
        products: Mapping[str, Mapping[str, object]],
        groups: Mapping[str, Mapping[str, object]],
    ) -> float | None:
        """Return the calories of a favorite in ``energy_unit``, or None."""
        try:
            result = self.favorite_serving(favorite, products, groups)
            calories = result.nutrition.get("calories") if result else None
            if calories is None:
                return None
            return calories.convert(self.energy_unit).amount
        except NutritionError as exc:
            _logger.warning(
                "Cannot compute calories for favorite %s: %s", favorite.id, exc
            )
            return None


def resolve_item(
    nutrition_service: NutritionService,
    item: ItemRef,
    products: Mapping[str, Mapping[str, object]],
    groups: Mapping[str, Mapping[str, object]],
) -> ServingResult | None:
    """Compute nutrition for an item reference from fetched records."""
    if item.product_id is not None:
        product = products.get(item.product_id)
        if product is None:
            return None
        return nutrition_service.product_serving(
            product, item.preparation_id, item.serving_size
        )
    if item.group_id is not None:
        record = groups.get(item.group_id)
        if record is None:
            return None
        group = FoodGroup.from_record(record, nutrition_service.max_group_depth)
        return nutrition_service.group_serving(group, item.serving_size)
    return None


def _matches(
    item: ItemRef,
    product_id: str | None,
    preparation_id: str | None,
    group_id: str | None,
    serving_size: ServingSize | None,
) -> bool:
    if product_id is not None:
        if item.product_id != product_id:
            return False
        if preparation_id is not None and item.preparation_id != preparation_id:
            return False
    elif group_id is not None:
        if item.group_id != group_id:
            return False
    else:
        return False
    if serving_size is not None:
        return servings_match(item.serving_size, serving_size)
    return True
