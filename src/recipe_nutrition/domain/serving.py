"""Serving sizes: how much of a food is being eaten."""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import assert_never

from recipe_nutrition.domain.units import (
    UnitFamily,
    UnitValue,
    format_amount,
    unit_family,
)


@dataclass(frozen=True)
class Servings:
    """A count of reference servings."""

    count: float

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"Serving count must not be negative: {self.count}")


def _require_family(unit: str, family: UnitFamily) -> None:
    if unit_family(unit) is not family:
        raise ValueError(f"{unit!r} is not a {family.value} unit")


@dataclass(frozen=True)
class Mass:
    """A serving measured by mass."""

    amount: float
    unit: str

    def __post_init__(self) -> None:
        _require_family(self.unit, UnitFamily.MASS)

    @property
    def value(self) -> UnitValue:
        return UnitValue(self.amount, self.unit)


@dataclass(frozen=True)
class Volume:
    """A serving measured by volume."""

    amount: float
    unit: str

    def __post_init__(self) -> None:
        _require_family(self.unit, UnitFamily.VOLUME)

    @property
    def value(self) -> UnitValue:
        return UnitValue(self.amount, self.unit)


@dataclass(frozen=True)
class Energy:
    """A serving measured by the energy it provides."""

    amount: float
    unit: str

    def __post_init__(self) -> None:
        _require_family(self.unit, UnitFamily.ENERGY)

    @property
    def value(self) -> UnitValue:
        return UnitValue(self.amount, self.unit)


@dataclass(frozen=True)
class CustomServing:
    """A number of named custom sizes, e.g. two cookies."""

    name: str
    amount: float


ServingSize = Servings | Mass | Volume | Energy | CustomServing

_MEASURED_KINDS: Mapping[str, tuple[type[Mass | Volume | Energy], UnitFamily]] = (
    MappingProxyType(
        {
            "mass": (Mass, UnitFamily.MASS),
            "volume": (Volume, UnitFamily.VOLUME),
            "energy": (Energy, UnitFamily.ENERGY),
        }
    )
)


def serving_amount(serving: ServingSize) -> float:
    match serving:
        case Servings(count=count):
            return count
        case Mass() | Volume() | Energy() | CustomServing():
            return serving.amount
        case _:
            assert_never(serving)


def scale_serving(serving: ServingSize, factor: float) -> ServingSize:
    """Return the serving multiplied by a factor."""
    match serving:
        case Servings(count=count):
            return Servings(count * factor)
        case Mass(amount=amount, unit=unit):
            return Mass(amount * factor, unit)
        case Volume(amount=amount, unit=unit):
            return Volume(amount * factor, unit)
        case Energy(amount=amount, unit=unit):
            return Energy(amount * factor, unit)
        case CustomServing(name=name, amount=amount):
            return CustomServing(name, amount * factor)
        case _:
            assert_never(serving)


def canonical_serving(serving: ServingSize) -> ServingSize:
    """Express measured servings in g, mL or kcal."""
    match serving:
        case Servings() | CustomServing():
            return serving
        case Mass():
            return Mass(*_canonical_parts(serving.value))
        case Volume():
            return Volume(*_canonical_parts(serving.value))
        case Energy():
            return Energy(*_canonical_parts(serving.value))
        case _:
            assert_never(serving)


def _canonical_parts(value: UnitValue) -> tuple[float, str]:
    canonical = value.canonical()
    return canonical.amount, canonical.unit


def servings_match(left: ServingSize, right: ServingSize) -> bool:
    """Return whether two servings describe the same amount of food."""
    canonical_left = canonical_serving(left)
    canonical_right = canonical_serving(right)
    if type(canonical_left) is not type(canonical_right):
        return False
    if isinstance(canonical_left, CustomServing) and isinstance(
        canonical_right, CustomServing
    ):
        if canonical_left.name != canonical_right.name:
            return False
    elif isinstance(canonical_left, Mass | Volume | Energy) and isinstance(
        canonical_right, Mass | Volume | Energy
    ):
        if canonical_left.unit != canonical_right.unit:
            return False
    return math.isclose(
        serving_amount(canonical_left), serving_amount(canonical_right), rel_tol=1e-9
    )


def describe_serving(serving: ServingSize) -> str:
    """Render a serving for display, e.g. ``2 servings`` or ``100g``."""
    match serving:
        case Servings(count=count):
            suffix = "" if count == 1 else "s"
            return f"{format_amount(count)} serving{suffix}"
        case Mass() | Volume() | Energy():
            return str(serving.value)
        case CustomServing(name=name, amount=amount):
            suffix = "" if amount == 1 else "s"
            return f"{format_amount(amount)} {name}{suffix}"
        case _:
            assert_never(serving)


def serving_to_record(serving: ServingSize) -> dict[str, object]:
    """Serialize a serving into its tagged plain record."""
    match serving:
        case Servings(count=count):
            return {"kind": "servings", "amount": count}
        case Mass():
            return {"kind": "mass", "amount": serving.value.to_record()}
        case Volume():
            return {"kind": "volume", "amount": serving.value.to_record()}
        case Energy():
            return {"kind": "energy", "amount": serving.value.to_record()}
        case CustomServing(name=name, amount=amount):
            return {"kind": "customSize", "name": name, "amount": amount}
        case _:
            assert_never(serving)


def serving_from_record(record: object) -> ServingSize | None:
    """Parse a plain serving record.

    The tagged shape is tried first (``kind``, or the older ``type`` tag, with
    ``amount`` or the older ``value``), then the legacy ``{"servings": n}``
    shape. Anything else returns ``None`` so callers can pick a default.
    """
    if not isinstance(record, Mapping):
        return None
    kind = record.get("kind") or record.get("type")
    if isinstance(kind, str):
        return _parse_tagged(kind, record)
    if "servings" in record:
        return _parse_servings(record.get("servings"))
    return None


def _parse_tagged(kind: str, record: Mapping[str, object]) -> ServingSize | None:
    raw_amount = record.get("amount")
    if raw_amount is None:
        raw_amount = record.get("value")
    if kind == "servings":
        return _parse_servings(raw_amount)
    if kind in _MEASURED_KINDS:
        return _parse_measured(kind, raw_amount)
    if kind == "customSize":
        return _parse_custom(record)
    return None


def _parse_servings(raw: object) -> Servings | None:
    count = _number(raw)
    if count is None or count < 0:
        return None
    return Servings(count)


def _parse_measured(kind: str, raw: object) -> Mass | Volume | Energy | None:
    if not isinstance(raw, Mapping):
        return None
    amount = _number(raw.get("amount"))
    unit = raw.get("unit")
    if amount is None or not isinstance(unit, str) or not unit:
        return None
    serving_type, family = _MEASURED_KINDS[kind]
    if unit_family(unit) is not family:
        return None
    return serving_type(amount, unit)


def _parse_custom(record: Mapping[str, object]) -> CustomServing | None:
    name = record.get("name")
    amount = _number(record.get("amount"))
    nested = record.get("value")
    if isinstance(nested, Mapping):
        if name is None:
            name = nested.get("name")
        if amount is None:
            amount = _number(nested.get("amount"))
    if not isinstance(name, str) or not name or amount is None:
        return None
    return CustomServing(name, amount)


def _number(raw: object) -> float | None:
    if isinstance(raw, bool) or not isinstance(raw, int | float):
        return None
    if not math.isfinite(raw):
        return None
    return float(raw)
