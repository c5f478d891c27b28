"""Domain models for favorites and log entries."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime

from recipe_nutrition.domain.errors import MalformedRecordError
from recipe_nutrition.domain.nutrients import NutrientProfile
from recipe_nutrition.domain.serving import Servings, ServingSize, serving_from_record


@dataclass(frozen=True)
class ItemRef:
    """A product preparation or group at a serving size."""

    serving_size: ServingSize
    product_id: str | None = None
    preparation_id: str | None = None
    group_id: str | None = None

    @classmethod
    def from_record(cls, record: object) -> "ItemRef":
        if not isinstance(record, Mapping):
            raise MalformedRecordError(f"Expected item reference, got {record!r}")
        product_id = record.get("productID")
        group_id = record.get("groupID")
        if (product_id is None) == (group_id is None):
            raise MalformedRecordError("Item needs exactly one of productID or groupID")
        preparation_id = record.get("preparationID")
        return cls(
            serving_size=serving_from_record(record.get("servingSize")) or Servings(1),
            product_id=str(product_id) if product_id is not None else None,
            preparation_id=str(preparation_id) if preparation_id is not None else None,
            group_id=str(group_id) if group_id is not None else None,
        )


@dataclass(frozen=True)
class Favorite:
    """A saved item the user logs often."""

    id: str
    item: ItemRef
    last_used_at: datetime | None = None


@dataclass(frozen=True)
class LogEntry:
    """An item the user ate at a point in time."""

    id: str
    logged_at: datetime
    item: ItemRef


@dataclass(frozen=True)
class DayTotals:
    """Nutrition eaten on one day."""

    day: date
    nutrition: NutrientProfile
    entry_count: int
    skipped_count: int
