"""Tests for nutrition service."""

import logging

import pytest

from recipe_nutrition.domain.errors import GroupCycleError, UnresolvableServingError
from recipe_nutrition.domain.groups import FoodGroup, ProductEntry, SubgroupEntry
from recipe_nutrition.domain.preparation import Preparation
from recipe_nutrition.domain.serving import Mass, Servings, Volume
from recipe_nutrition.domain.units import UnitValue
from recipe_nutrition.services.nutrition import NutritionService
from tests.conftest import bread_record, peanut_butter_record, product_record


def test_resolve_serving_defaults_to_one_serving(
    nutrition_service: NutritionService,
) -> None:
    assert nutrition_service.resolve_serving(None) == Servings(1)
    assert nutrition_service.resolve_serving({"kind": "bogus"}) == Servings(1)
    assert nutrition_service.resolve_serving({"servings": 2}) == Servings(2)


def test_preparation_serving_scales(
    nutrition_service: NutritionService, peanut_butter: Preparation
) -> None:
    result = nutrition_service.preparation_serving(peanut_butter, Mass(64, "g"))
    assert result.fallback is False
    assert result.servings == pytest.approx(2)
    assert result.nutrition.get("calories").amount == pytest.approx(380)
    assert result.description == "64g"


def test_preparation_serving_falls_back(
    nutrition_service: NutritionService, peanut_butter: Preparation, caplog
) -> None:
    with caplog.at_level(logging.WARNING, logger="recipe_nutrition"):
        result = nutrition_service.preparation_serving(
            peanut_butter, Volume(1, "cup (US)")
        )
    assert result.fallback is True
    assert result.servings == 1
    assert result.nutrition == peanut_butter.nutrients
    assert result.mass == UnitValue(32, "g")
    assert result.description == "1 serving"
    assert "Falling back" in caplog.text


def test_group_serving_falls_back_to_one_serving(
    nutrition_service: NutritionService, peanut_butter: Preparation
) -> None:
    bread = Preparation.from_record(bread_record())
    group = FoodGroup(items=(ProductEntry(peanut_butter), ProductEntry(bread)))
    result = nutrition_service.group_serving(group, Mass(100, "g"))
    assert result.fallback is True
    assert result.nutrition.get("calories").amount == pytest.approx(340)


@pytest.mark.parametrize(
    ("serving", "fallback"), [(Servings(2), False), (Volume(1, "mL"), True)]
)
def test_group_serving_evaluates_items_once(
    nutrition_service: NutritionService,
    peanut_butter: Preparation,
    monkeypatch: pytest.MonkeyPatch,
    serving,
    fallback: bool,
) -> None:
    calls: list[Preparation] = []
    original = Preparation.serving_for

    def counting_serving_for(self, serving_size):
        calls.append(self)
        return original(self, serving_size)

    monkeypatch.setattr(Preparation, "serving_for", counting_serving_for)
    inner = FoodGroup(items=(ProductEntry(peanut_butter),), id="inner")
    group = FoodGroup(
        items=(ProductEntry(peanut_butter), SubgroupEntry(inner)), id="outer"
    )
    result = nutrition_service.group_serving(group, serving)
    assert result.fallback is fallback
    assert len(calls) == 2


def test_group_structure_errors_propagate(
    nutrition_service: NutritionService, peanut_butter: Preparation
) -> None:
    items: list = [ProductEntry(peanut_butter)]
    group = FoodGroup(items=items, id="loop")  # type: ignore[arg-type]
    items.append(SubgroupEntry(group))
    with pytest.raises(GroupCycleError):
        nutrition_service.group_serving(group, Servings(1))


def test_group_item_errors_propagate(
    nutrition_service: NutritionService, peanut_butter: Preparation
) -> None:
    group = FoodGroup(items=(ProductEntry(peanut_butter, Volume(1, "mL")),))
    with pytest.raises(UnresolvableServingError):
        nutrition_service.group_serving(group, Servings(1))


def test_product_serving_selects_preparation(
    nutrition_service: NutritionService,
) -> None:
    product = product_record("pb", bread_record(), peanut_butter_record())
    result = nutrition_service.product_serving(product, "prep-pb", Servings(2))
    assert result.nutrition.get("calories").amount == pytest.approx(380)
    with pytest.raises(UnresolvableServingError):
        nutrition_service.product_serving(product_record("empty"), None, Servings(1))


def test_convert(nutrition_service: NutritionService) -> None:
    converted = nutrition_service.convert(UnitValue(2, "kg"), "g")
    assert converted == UnitValue(2000, "g")
