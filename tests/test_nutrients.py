"""Tests for nutrient profiles."""

import pytest

from recipe_nutrition.domain.errors import MalformedRecordError
from recipe_nutrition.domain.nutrients import NutrientProfile, aggregate
from recipe_nutrition.domain.units import UnitValue


def test_scale_keeps_absent_keys_absent() -> None:
    profile = NutrientProfile({"calories": UnitValue(100, "kcal"), "sodium": None})
    scaled = profile.scale(2.5)
    assert scaled.get("calories") == UnitValue(250, "kcal")
    assert scaled.get("sodium") is None
    assert scaled.get("protein") is None


def test_merge_adds_in_left_units() -> None:
    left = NutrientProfile({"sodium": UnitValue(1, "g")})
    right = NutrientProfile({"sodium": UnitValue(250, "mg")})
    merged = left.merge(right)
    assert merged.get("sodium").unit == "g"
    assert merged.get("sodium").amount == pytest.approx(1.25)


def test_merge_with_missing_key_is_unknown() -> None:
    left = NutrientProfile({"calories": UnitValue(100, "kcal")})
    right = NutrientProfile(
        {"calories": UnitValue(50, "kcal"), "protein": UnitValue(3, "g")}
    )
    merged = left.merge(right)
    assert merged.get("calories") == UnitValue(150, "kcal")
    assert "protein" in merged
    assert merged.get("protein") is None


def test_aggregate() -> None:
    profiles = [
        NutrientProfile({"calories": UnitValue(100, "kcal")}),
        NutrientProfile({"calories": UnitValue(100, "kcal")}),
        NutrientProfile({"calories": UnitValue(0.5, "kJ")}),
    ]
    total = aggregate(profiles)
    assert total.get("calories").amount == pytest.approx(200 + 0.5 / 4.184)
    assert aggregate([]) == NutrientProfile.empty()


def test_ordered_items_uses_label_order() -> None:
    profile = NutrientProfile(
        {
            "potassium": UnitValue(10, "mg"),
            "zzz": UnitValue(1, "g"),
            "calories": UnitValue(5, "kcal"),
            "protein": None,
        }
    )
    assert [key for key, _ in profile.ordered_items()] == [
        "calories",
        "potassium",
        "zzz",
    ]


def test_from_record() -> None:
    profile = NutrientProfile.from_record(
        {"calories": {"amount": 90, "unit": "kcal"}, "sodium": None}
    )
    assert profile.present_keys() == ["calories"]
    assert profile.to_record() == {
        "calories": {"amount": 90.0, "unit": "kcal"},
        "sodium": None,
    }
    assert NutrientProfile.from_record(None) == NutrientProfile.empty()
    with pytest.raises(MalformedRecordError):
        NutrientProfile.from_record(["calories"])


def test_profile_is_read_only() -> None:
    source = {"calories": UnitValue(1, "kcal")}
    profile = NutrientProfile(source)
    source["calories"] = UnitValue(2, "kcal")
    assert profile.get("calories") == UnitValue(1, "kcal")
    with pytest.raises(TypeError):
        profile.amounts["calories"] = UnitValue(3, "kcal")
