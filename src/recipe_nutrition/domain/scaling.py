"""Serving scalars shared by preparations and food groups."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import assert_never

from recipe_nutrition.domain.errors import (
    MalformedRecordError,
    UnresolvableServingError,
)
from recipe_nutrition.domain.nutrients import NutrientProfile
from recipe_nutrition.domain.serving import (
    CustomServing,
    Energy,
    Mass,
    Servings,
    ServingSize,
    Volume,
    describe_serving,
    scale_serving,
    serving_from_record,
)
from recipe_nutrition.domain.units import UnitValue


@dataclass(frozen=True)
class CustomSize:
    """A named size such as "1 cookie", defined as a serving size."""

    name: str
    serving_size: ServingSize = field(default_factory=lambda: Servings(1))
    id: str | None = None
    singular_name: str = ""
    plural_name: str = ""
    notes: tuple[str, ...] = ()

    def describe(self) -> str:
        """Describe what one of this size amounts to, e.g. ``30g``."""
        return describe_serving(self.serving_size)

    @classmethod
    def from_record(cls, record: object) -> "CustomSize":
        if not isinstance(record, Mapping):
            raise MalformedRecordError(f"Expected custom size, got {record!r}")
        raw_serving = record.get("servingSize")
        if raw_serving is None and record.get("servings") is not None:
            raw_serving = {"servings": record["servings"]}
        serving_size = serving_from_record(raw_serving) or Servings(1)
        notes = record.get("notes") or []
        if not isinstance(notes, list):
            raise MalformedRecordError("Custom size notes must be a list")
        return cls(
            name=str(record.get("name") or ""),
            serving_size=serving_size,
            id=optional_str(record.get("id")),
            singular_name=str(record.get("singularName") or ""),
            plural_name=str(record.get("pluralName") or ""),
            notes=tuple(str(note) for note in notes),
        )


@dataclass(frozen=True)
class References:
    """Reference quantities that "one serving" of a food corresponds to."""

    label: str
    nutrients: NutrientProfile
    mass: UnitValue | None = None
    volume: UnitValue | None = None
    custom_sizes: Sequence[CustomSize] = ()


def resolve_scalar(serving: ServingSize, references: References) -> float:
    """Return how many reference servings the requested serving represents."""
    return _resolve(serving, references, ())


def _resolve(
    serving: ServingSize, references: References, seen: tuple[str, ...]
) -> float:
    match serving:
        case Servings(count=count):
            return count
        case Mass():
            return _ratio(serving.value, references.mass, "mass", references.label)
        case Volume():
            return _ratio(serving.value, references.volume, "volume", references.label)
        case Energy():
            return _ratio(
                serving.value,
                references.nutrients.get("calories"),
                "energy",
                references.label,
            )
        case CustomServing(name=name, amount=amount):
            if name in seen:
                raise UnresolvableServingError(
                    f"Custom size {name!r} of {references.label} refers to itself"
                )
            custom_size = _find_custom_size(references.custom_sizes, name)
            if custom_size is None:
                raise UnresolvableServingError(
                    f"Unknown custom size {name!r} for {references.label}"
                )
            return _resolve(
                scale_serving(custom_size.serving_size, amount),
                references,
                (*seen, name),
            )
        case _:
            assert_never(serving)


def _ratio(
    requested: UnitValue, reference: UnitValue | None, axis: str, label: str
) -> float:
    if reference is None:
        raise UnresolvableServingError(
            f"Cannot calculate serving by {axis}: {label} has no {axis} defined"
        )
    if reference.amount == 0:
        raise UnresolvableServingError(
            f"Cannot calculate serving by {axis}: {label} has a zero {axis}"
        )
    return requested.convert(reference.unit).amount / reference.amount


def _find_custom_size(
    custom_sizes: Sequence[CustomSize], name: str
) -> CustomSize | None:
    for custom_size in custom_sizes:
        if custom_size.name == name:
            return custom_size
    return None


def optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)
