"""Tests for serving sizes."""

import pytest

from recipe_nutrition.domain.serving import (
    CustomServing,
    Energy,
    Mass,
    Servings,
    Volume,
    describe_serving,
    scale_serving,
    serving_from_record,
    serving_to_record,
    servings_match,
)


@pytest.mark.parametrize(
    "serving",
    [
        Servings(1),
        Servings(2.5),
        Mass(100, "g"),
        Volume(1, "cup (US)"),
        Energy(250, "kcal"),
        CustomServing("cookie", 2),
    ],
)
def test_record_round_trip(serving) -> None:
    assert serving_from_record(serving_to_record(serving)) == serving


def test_wire_shapes() -> None:
    assert serving_to_record(Servings(2)) == {"kind": "servings", "amount": 2}
    assert serving_to_record(Mass(30, "g")) == {
        "kind": "mass",
        "amount": {"amount": 30, "unit": "g"},
    }
    assert serving_to_record(CustomServing("slice", 1)) == {
        "kind": "customSize",
        "name": "slice",
        "amount": 1,
    }


def test_older_record_shapes() -> None:
    assert serving_from_record({"servings": 3}) == Servings(3)
    assert serving_from_record({"type": "servings", "value": 2}) == Servings(2)
    assert serving_from_record(
        {"type": "volume", "value": {"amount": 250, "unit": "mL"}}
    ) == Volume(250, "mL")
    assert serving_from_record(
        {"type": "customSize", "value": {"name": "cookie", "amount": 3}}
    ) == CustomServing("cookie", 3)


@pytest.mark.parametrize(
    "record",
    [
        None,
        "1 serving",
        {},
        {"kind": "servings", "amount": "2"},
        {"kind": "servings", "amount": -1},
        {"kind": "servings", "amount": True},
        {"kind": "servings", "amount": float("nan")},
        {"kind": "mass", "amount": 100},
        {"kind": "mass", "amount": {"amount": 100, "unit": "mL"}},
        {"kind": "volume", "amount": {"amount": 1, "unit": "parsecs"}},
        {"kind": "mass", "amount": {"amount": 1, "unit": "nan"}},
        {"kind": "volume", "amount": {"amount": 1, "unit": "NaN"}},
        {"kind": "portion", "amount": 1},
        {"kind": "customSize", "amount": 1},
    ],
)
def test_malformed_records_return_none(record) -> None:
    assert serving_from_record(record) is None


def test_describe() -> None:
    assert describe_serving(Servings(1)) == "1 serving"
    assert describe_serving(Servings(2)) == "2 servings"
    assert describe_serving(Servings(0.5)) == "0.5 servings"
    assert describe_serving(Mass(100, "g")) == "100g"
    assert describe_serving(Volume(1.5, "cup (US)")) == "1.5cup (US)"
    assert describe_serving(CustomServing("cookie", 2)) == "2 cookies"
    assert describe_serving(CustomServing("cookie", 1)) == "1 cookie"


def test_constructors_check_unit_family() -> None:
    with pytest.raises(ValueError):
        Mass(1, "mL")
    with pytest.raises(ValueError):
        Energy(1, "g")
    with pytest.raises(ValueError):
        Servings(-1)


def test_scale_serving() -> None:
    assert scale_serving(Mass(30, "g"), 2) == Mass(60, "g")
    assert scale_serving(CustomServing("slice", 1), 3) == CustomServing("slice", 3)


def test_servings_match_compares_amounts() -> None:
    assert servings_match(Mass(100, "g"), Mass(0.1, "kg"))
    assert servings_match(Energy(1, "kcal"), Energy(4.184, "kJ"))
    assert not servings_match(Mass(100, "g"), Mass(101, "g"))
    assert not servings_match(Servings(1), Mass(1, "g"))
    assert not servings_match(CustomServing("cookie", 1), CustomServing("slice", 1))
