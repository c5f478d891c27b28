"""Nutrition lookups for display, degrading to the reference serving."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from recipe_nutrition.domain.errors import NutritionError, UnresolvableServingError
from recipe_nutrition.domain.groups import DEFAULT_MAX_DEPTH, FoodGroup
from recipe_nutrition.domain.nutrients import NutrientProfile
from recipe_nutrition.domain.preparation import (
    ItemServing,
    Preparation,
    select_preparation,
)
from recipe_nutrition.domain.serving import (
    Servings,
    ServingSize,
    describe_serving,
    serving_from_record,
)
from recipe_nutrition.domain.units import UnitValue

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServingResult:
    """Nutrition shown for a serving, and whether it fell back to one serving."""

    serving_size: ServingSize
    nutrition: NutrientProfile
    mass: UnitValue | None
    volume: UnitValue | None
    servings: float
    fallback: bool = False

    @property
    def description(self) -> str:
        if self.fallback:
            return describe_serving(Servings(1))
        return describe_serving(self.serving_size)


@dataclass
class NutritionService:
    """Computes nutrition for preparations and groups at requested servings."""

    max_group_depth: int = DEFAULT_MAX_DEPTH
    debug: bool = False

    def resolve_serving(self, record: object) -> ServingSize:
        """Parse a stored serving size, defaulting to one serving."""
        serving = serving_from_record(record)
        if serving is None:
            if record is not None:
                _logger.info("Unrecognized serving size %r, using 1 serving", record)
            return Servings(1)
        return serving

    def preparation_serving(
        self, preparation: Preparation, serving: ServingSize
    ) -> ServingResult:
        """Scale a preparation, falling back to its reference serving."""
        try:
            scaled = preparation.serving_for(serving)
        except NutritionError as exc:
            _logger.warning(
                "Falling back to reference serving for preparation %s: %s",
                preparation.id or preparation.name,
                exc,
            )
            return _result(serving, preparation.reference_serving(), fallback=True)
        return _result(serving, scaled)

    def group_serving(self, group: FoodGroup, serving: ServingSize) -> ServingResult:
        """Scale a group, falling back to one serving of the group.

        Errors computing one serving itself (a failing item, a cycle, too deep
        a tree) are raised: there is nothing to fall back to.
        """
        one = group.one_serving(self.max_group_depth)
        try:
            scaled = group.scale_one_serving(one, serving)
        except NutritionError as exc:
            _logger.warning(
                "Falling back to one serving for group %s: %s", group.key, exc
            )
            return _result(serving, one, fallback=True)
        if self.debug:
            _logger.info(
                "Group %s: %s items, %s servings",
                group.key,
                len(group.items),
                scaled.servings,
            )
        return _result(serving, scaled)

    def product_serving(
        self,
        product: Mapping[str, object],
        preparation_id: str | None,
        serving: ServingSize,
    ) -> ServingResult:
        """Scale the selected preparation of a product record."""
        preparation = select_preparation(product, preparation_id)
        if preparation is None:
            raise UnresolvableServingError(
                f"Product {product.get('id') or product.get('name')} "
                "has no preparations"
            )
        return self.preparation_serving(preparation, serving)

    def convert(self, value: UnitValue, unit: str) -> UnitValue:
        return value.convert(unit)


def _result(
    serving: ServingSize, item: ItemServing, *, fallback: bool = False
) -> ServingResult:
    return ServingResult(
        serving_size=serving,
        nutrition=item.nutrition,
        mass=item.mass,
        volume=item.volume,
        servings=1.0 if fallback else item.servings,
        fallback=fallback,
    )
