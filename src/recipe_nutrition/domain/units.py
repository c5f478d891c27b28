"""Amounts tagged with mass, volume or energy units."""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from functools import cache
from types import MappingProxyType

import pint

from recipe_nutrition.domain.errors import IncompatibleUnitsError, MalformedRecordError


class UnitFamily(Enum):
    """Groups of units that convert into each other."""

    MASS = "mass"
    VOLUME = "volume"
    ENERGY = "energy"


# Food energy units are missing from general unit registries.
ENERGY_TO_JOULES: Mapping[str, float] = MappingProxyType(
    {
        "kcal": 4184.0,
        "cal": 4.184,
        "kJ": 1000.0,
        "J": 1.0,
        "Wh": 3600.0,
    }
)

# Stored unit names -> pint unit names.
_PINT_UNIT_NAMES: Mapping[str, str] = MappingProxyType(
    {
        # Mass
        "g": "gram",
        "mg": "milligram",
        "µg": "microgram",
        "μg": "microgram",
        "mcg": "microgram",
        "ug": "microgram",
        "kg": "kilogram",
        "oz": "ounce",
        "lb": "pound",
        # Volume
        "mL": "milliliter",
        "ml": "milliliter",
        "L": "liter",
        "l": "liter",
        "cup": "cup",
        "cup (US)": "cup",
        "cup (Metric)": "metric_cup",
        "tbsp": "tablespoon",
        "tbsp (US)": "tablespoon",
        "tbsp  (US)": "tablespoon",
        "tsp": "teaspoon",
        "tsp (US)": "teaspoon",
        "fl oz": "fluid_ounce",
        "fl oz (US)": "fluid_ounce",
        "fl oz (Imperial)": "imperial_fluid_ounce",
        "pt": "pint",
        "pt (US)": "pint",
        "qt": "quart",
        "qt (US)": "quart",
        "gal": "gallon",
        "gal (US)": "gallon",
        "pt (Imperial)": "imperial_pint",
        "qt (Imperial)": "imperial_quart",
        "gal (Imperial)": "imperial_gallon",
    }
)

# Units used when comparing amounts independent of the unit they were given in.
CANONICAL_UNITS: Mapping[UnitFamily, str] = MappingProxyType(
    {
        UnitFamily.MASS: "g",
        UnitFamily.VOLUME: "mL",
        UnitFamily.ENERGY: "kcal",
    }
)

_PINT_NAME_PATTERN = re.compile(r"^[A-Za-z_µμ]+$")


@cache
def _registry() -> pint.UnitRegistry:
    registry = pint.UnitRegistry()
    registry.define("metric_cup = 250 * milliliter")
    return registry


def _pint_unit(unit: str) -> pint.Unit:
    name = _PINT_UNIT_NAMES.get(unit, unit)
    if not _PINT_NAME_PATTERN.match(name):
        raise pint.UndefinedUnitError(name)
    try:
        return _registry().Unit(name)
    except ValueError as exc:
        # Names such as "nan" parse as numbers, not units.
        raise pint.UndefinedUnitError(name) from exc


def unit_family(unit: str) -> UnitFamily | None:
    """Return the family a unit belongs to, or None for unknown units."""
    if unit in ENERGY_TO_JOULES:
        return UnitFamily.ENERGY
    try:
        dimensionality = _pint_unit(unit).dimensionality
    except pint.UndefinedUnitError:
        return None
    registry = _registry()
    if dimensionality == registry.Unit("gram").dimensionality:
        return UnitFamily.MASS
    if dimensionality == registry.Unit("liter").dimensionality:
        return UnitFamily.VOLUME
    return None


def convert_amount(amount: float, from_unit: str, to_unit: str) -> float:
    """Convert a raw amount between two units of the same family."""
    if from_unit == to_unit:
        return amount
    from_energy = from_unit in ENERGY_TO_JOULES
    to_energy = to_unit in ENERGY_TO_JOULES
    if from_energy and to_energy:
        joules = amount * ENERGY_TO_JOULES[from_unit]
        return joules / ENERGY_TO_JOULES[to_unit]
    if from_energy or to_energy:
        raise IncompatibleUnitsError(from_unit, to_unit)
    try:
        quantity = _registry().Quantity(amount, _pint_unit(from_unit))
        return float(quantity.to(_pint_unit(to_unit)).magnitude)
    except (pint.UndefinedUnitError, pint.DimensionalityError) as exc:
        raise IncompatibleUnitsError(from_unit, to_unit) from exc


def format_amount(amount: float) -> str:
    """Render an amount without a trailing ``.0`` for whole numbers."""
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)


@dataclass(frozen=True)
class UnitValue:
    """An amount with its unit."""

    amount: float
    unit: str

    def convert(self, to_unit: str) -> "UnitValue":
        """Return this value expressed in another unit of the same family."""
        if to_unit == self.unit:
            return self
        return UnitValue(convert_amount(self.amount, self.unit, to_unit), to_unit)

    def scale(self, factor: float) -> "UnitValue":
        """Multiply the amount, keeping the unit."""
        return UnitValue(self.amount * factor, self.unit)

    def add(self, other: "UnitValue") -> "UnitValue":
        """Sum two values in this value's unit."""
        converted = other.convert(self.unit)
        return UnitValue(self.amount + converted.amount, self.unit)

    def canonical(self) -> "UnitValue":
        """Express the value in its family's base unit (g, mL or kcal)."""
        family = self.family
        if family is None:
            return self
        return self.convert(CANONICAL_UNITS[family])

    @property
    def family(self) -> UnitFamily | None:
        return unit_family(self.unit)

    def to_record(self) -> dict[str, object]:
        return {"amount": self.amount, "unit": self.unit}

    @classmethod
    def from_record(cls, record: object) -> "UnitValue | None":
        """Parse ``{"amount": n, "unit": s}``; ``None`` stays ``None``."""
        if record is None:
            return None
        if not isinstance(record, Mapping):
            raise MalformedRecordError(f"Expected a unit value, got {record!r}")
        amount = record.get("amount")
        unit = record.get("unit")
        if isinstance(amount, bool) or not isinstance(amount, int | float):
            raise MalformedRecordError(f"Unit value amount is not a number: {amount!r}")
        if not isinstance(unit, str) or not unit:
            raise MalformedRecordError(f"Unit value has no unit: {record!r}")
        return cls(float(amount), unit)

    def __str__(self) -> str:
        return f"{format_amount(self.amount)}{self.unit}"


@dataclass(frozen=True)
class UnitDefinition:
    """A selectable unit with its label and search aliases."""

    value: str
    label: str
    family: UnitFamily
    aliases: tuple[str, ...]


MASS_UNITS: tuple[UnitDefinition, ...] = (
    UnitDefinition("g", "Grams (g)", UnitFamily.MASS, ("gram", "grams", "g")),
    UnitDefinition(
        "mg", "Milligrams (mg)", UnitFamily.MASS, ("milligram", "milligrams", "mg")
    ),
    UnitDefinition(
        "μg",
        "Micrograms (μg)",
        UnitFamily.MASS,
        ("microgram", "micrograms", "mcg", "μg", "ug"),
    ),
    UnitDefinition(
        "kg", "Kilograms (kg)", UnitFamily.MASS, ("kilogram", "kilograms", "kg")
    ),
    UnitDefinition("oz", "Ounces (oz)", UnitFamily.MASS, ("ounce", "ounces", "oz")),
    UnitDefinition(
        "lb", "Pounds (lb)", UnitFamily.MASS, ("pound", "pounds", "lb", "lbs")
    ),
)

VOLUME_UNITS: tuple[UnitDefinition, ...] = (
    UnitDefinition(
        "mL",
        "Milliliters (mL)",
        UnitFamily.VOLUME,
        ("milliliter", "milliliters", "ml", "mL"),
    ),
    UnitDefinition("L", "Liters (L)", UnitFamily.VOLUME, ("liter", "liters", "l", "L")),
    UnitDefinition("cup (US)", "Cups", UnitFamily.VOLUME, ("cup", "cups")),
    UnitDefinition(
        "tbsp (US)",
        "Tablespoons (tbsp)",
        UnitFamily.VOLUME,
        ("tablespoon", "tablespoons", "tbsp", "tbs"),
    ),
    UnitDefinition(
        "tsp (US)",
        "Teaspoons (tsp)",
        UnitFamily.VOLUME,
        ("teaspoon", "teaspoons", "tsp"),
    ),
    UnitDefinition(
        "fl oz (US)",
        "Fluid ounces (fl oz)",
        UnitFamily.VOLUME,
        ("fluid ounce", "fluid ounces", "fl oz", "floz"),
    ),
    UnitDefinition("pt (US)", "Pints (pt)", UnitFamily.VOLUME, ("pint", "pints", "pt")),
    UnitDefinition(
        "qt (US)", "Quarts (qt)", UnitFamily.VOLUME, ("quart", "quarts", "qt")
    ),
    UnitDefinition(
        "gal (US)", "Gallons (gal)", UnitFamily.VOLUME, ("gallon", "gallons", "gal")
    ),
)

ENERGY_UNITS: tuple[UnitDefinition, ...] = (
    UnitDefinition(
        "kcal",
        "Calories (kcal)",
        UnitFamily.ENERGY,
        ("calorie", "calories", "kcal", "cal"),
    ),
    UnitDefinition(
        "kJ",
        "Kilojoules (kJ)",
        UnitFamily.ENERGY,
        ("kilojoule", "kilojoules", "kj", "kJ"),
    ),
    UnitDefinition("J", "Joules (J)", UnitFamily.ENERGY, ("joule", "joules", "j", "J")),
    UnitDefinition(
        "Wh",
        "Watt-hours (Wh)",
        UnitFamily.ENERGY,
        ("watt-hour", "watt-hours", "wh", "Wh"),
    ),
)

_UNITS_BY_FAMILY: Mapping[UnitFamily, tuple[UnitDefinition, ...]] = MappingProxyType(
    {
        UnitFamily.MASS: MASS_UNITS,
        UnitFamily.VOLUME: VOLUME_UNITS,
        UnitFamily.ENERGY: ENERGY_UNITS,
    }
)


def units_for(family: UnitFamily) -> tuple[UnitDefinition, ...]:
    """Return the selectable units of a family."""
    return _UNITS_BY_FAMILY[family]


def search_units(
    query: str, families: tuple[UnitFamily, ...] = tuple(UnitFamily)
) -> list[UnitDefinition]:
    """Return units whose label or aliases contain the query."""
    needle = query.strip().lower()
    matches: list[UnitDefinition] = []
    for family in families:
        for definition in _UNITS_BY_FAMILY[family]:
            if not needle:
                matches.append(definition)
                continue
            if needle in definition.label.lower() or any(
                needle in alias.lower() for alias in definition.aliases
            ):
                matches.append(definition)
    return matches
