"""Preparations: one way a product is prepared or packaged."""

from collections.abc import Mapping
from dataclasses import dataclass

from recipe_nutrition.domain.errors import MalformedRecordError
from recipe_nutrition.domain.nutrients import NutrientProfile
from recipe_nutrition.domain.scaling import CustomSize, References, resolve_scalar
from recipe_nutrition.domain.serving import ServingSize
from recipe_nutrition.domain.units import UnitValue


@dataclass(frozen=True)
class ItemServing:
    """Nutrition and size of a food at a particular serving size."""

    nutrition: NutrientProfile
    mass: UnitValue | None
    volume: UnitValue | None
    servings: float = 1.0


@dataclass(frozen=True)
class Preparation:
    """Nutrition for one serving of a product, plus the size of that serving."""

    nutrients: NutrientProfile
    id: str | None = None
    name: str = "Default"
    mass: UnitValue | None = None
    volume: UnitValue | None = None
    custom_sizes: tuple[CustomSize, ...] = ()
    serving_size_description: str | None = None
    notes: tuple[str, ...] = ()

    def scalar_for(self, serving: ServingSize) -> float:
        """Return how many reference servings ``serving`` represents.

        Raises UnresolvableServingError when the preparation has no reference
        quantity for the requested kind, and IncompatibleUnitsError when the
        requested unit cannot be converted into the reference unit.
        """
        return resolve_scalar(serving, self._references())

    def nutrition_for(self, serving: ServingSize) -> NutrientProfile:
        """Return the nutrients scaled to ``serving``."""
        return self.nutrients.scale(self.scalar_for(serving))

    def serving_for(self, serving: ServingSize) -> ItemServing:
        """Return nutrition together with the scaled mass and volume."""
        factor = self.scalar_for(serving)
        return ItemServing(
            nutrition=self.nutrients.scale(factor),
            mass=self.mass.scale(factor) if self.mass is not None else None,
            volume=self.volume.scale(factor) if self.volume is not None else None,
            servings=factor,
        )

    def reference_serving(self) -> ItemServing:
        """Return the unscaled reference serving."""
        return ItemServing(nutrition=self.nutrients, mass=self.mass, volume=self.volume)

    def _references(self) -> References:
        return References(
            label=f"preparation {self.name!r}",
            nutrients=self.nutrients,
            mass=self.mass,
            volume=self.volume,
            custom_sizes=self.custom_sizes,
        )

    @classmethod
    def from_record(cls, record: object) -> "Preparation":
        """Build a preparation from a fetched preparation record."""
        if not isinstance(record, Mapping):
            raise MalformedRecordError(f"Expected preparation, got {record!r}")
        custom_sizes = record.get("customSizes") or []
        notes = record.get("notes") or []
        if not isinstance(custom_sizes, list) or not isinstance(notes, list):
            raise MalformedRecordError(
                "Preparation customSizes and notes must be lists"
            )
        description = record.get("servingSizeDescription")
        return cls(
            nutrients=NutrientProfile.from_record(record.get("nutritionalInformation")),
            id=str(record["id"]) if record.get("id") is not None else None,
            name=str(record.get("name") or "Default"),
            mass=UnitValue.from_record(record.get("mass")),
            volume=UnitValue.from_record(record.get("volume")),
            custom_sizes=tuple(CustomSize.from_record(item) for item in custom_sizes),
            serving_size_description=str(description) if description else None,
            notes=tuple(str(note) for note in notes),
        )


def select_preparation(
    product: Mapping[str, object], preparation_id: str | None = None
) -> Preparation | None:
    """Pick the named preparation of a product record, else its first one."""
    preparations = product.get("preparations") or []
    if not isinstance(preparations, list):
        raise MalformedRecordError("Product preparations must be a list")
    if preparation_id is not None:
        for candidate in preparations:
            if isinstance(candidate, Mapping) and candidate.get("id") == preparation_id:
                return Preparation.from_record(candidate)
    if not preparations:
        return None
    return Preparation.from_record(preparations[0])
