"""Nutrient profiles keyed by nutrient name."""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from recipe_nutrition.domain.errors import MalformedRecordError
from recipe_nutrition.domain.units import UnitValue

# Label order used when listing a profile.
NUTRIENT_KEYS: tuple[str, ...] = (
    # Energy
    "calories",
    "caloriesFromFat",
    # Fats
    "totalFat",
    "saturatedFat",
    "transFat",
    "polyunsaturatedFat",
    "monounsaturatedFat",
    # Cholesterol & sodium
    "cholesterol",
    "sodium",
    # Carbohydrates
    "totalCarbohydrate",
    "dietaryFiber",
    "solubleFiber",
    "insolubleFiber",
    "totalSugars",
    "addedSugars",
    "sugarAlcohol",
    "protein",
    # Vitamins
    "vitaminA",
    "vitaminC",
    "vitaminD",
    "vitaminE",
    "vitaminK",
    "thiamin",
    "riboflavin",
    "niacin",
    "vitaminB6",
    "folate",
    "vitaminB12",
    "biotin",
    "pantothenicAcid",
    "choline",
    # Minerals
    "calcium",
    "iron",
    "phosphorus",
    "iodine",
    "magnesium",
    "zinc",
    "selenium",
    "copper",
    "manganese",
    "chromium",
    "molybdenum",
    "chloride",
    "potassium",
)

_KEY_ORDER: Mapping[str, int] = MappingProxyType(
    {key: index for index, key in enumerate(NUTRIENT_KEYS)}
)


@dataclass(frozen=True)
class NutrientProfile(Mapping[str, UnitValue | None]):
    """Nutrition for one reference amount of a food.

    A key mapped to ``None`` is known to the record but has no value. Merging
    never invents a value: if either side lacks a key, the merged profile has
    ``None`` for it.
    """

    amounts: Mapping[str, UnitValue | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "amounts", MappingProxyType(dict(self.amounts)))

    def __getitem__(self, key: str) -> UnitValue | None:
        return self.amounts[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.amounts)

    def __len__(self) -> int:
        return len(self.amounts)

    def __hash__(self) -> int:
        return hash(frozenset(self.amounts.items()))

    def get(self, key: str, default: UnitValue | None = None) -> UnitValue | None:
        value = self.amounts.get(key)
        return default if value is None else value

    def present_keys(self) -> list[str]:
        """Return keys that carry a value."""
        return [key for key, value in self.amounts.items() if value is not None]

    def scale(self, factor: float) -> "NutrientProfile":
        """Scale every present value by a factor."""
        return NutrientProfile(
            {
                key: value.scale(factor) if value is not None else None
                for key, value in self.amounts.items()
            }
        )

    def merge(self, other: "NutrientProfile") -> "NutrientProfile":
        """Add two profiles key by key in this profile's units."""
        merged: dict[str, UnitValue | None] = {}
        keys = [*self.amounts, *(k for k in other.amounts if k not in self.amounts)]
        for key in keys:
            left = self.amounts.get(key)
            right = other.amounts.get(key)
            if left is None or right is None:
                merged[key] = None
            else:
                merged[key] = left.add(right)
        return NutrientProfile(merged)

    def ordered_items(self) -> list[tuple[str, UnitValue]]:
        """Return present values in label order, unknown keys last."""
        present = [
            (key, value) for key, value in self.amounts.items() if value is not None
        ]
        unknown = len(_KEY_ORDER)
        return sorted(
            present, key=lambda item: (_KEY_ORDER.get(item[0], unknown), item[0])
        )

    def to_record(self) -> dict[str, object]:
        return {
            key: value.to_record() if value is not None else None
            for key, value in self.amounts.items()
        }

    @classmethod
    def from_record(cls, record: object) -> "NutrientProfile":
        """Parse ``{key: {"amount": n, "unit": s} | None}``."""
        if record is None:
            return cls()
        if not isinstance(record, Mapping):
            raise MalformedRecordError(f"Expected nutrient mapping, got {record!r}")
        values: dict[str, UnitValue | None] = {}
        for key, raw in record.items():
            if not isinstance(key, str):
                raise MalformedRecordError(f"Nutrient key is not a string: {key!r}")
            values[key] = UnitValue.from_record(raw)
        return cls(values)

    @classmethod
    def empty(cls) -> "NutrientProfile":
        return cls()


def aggregate(profiles: Iterable[NutrientProfile]) -> NutrientProfile:
    """Merge profiles left to right; no profiles gives an empty profile."""
    total: NutrientProfile | None = None
    for profile in profiles:
        total = profile if total is None else total.merge(profile)
    return total if total is not None else NutrientProfile.empty()
