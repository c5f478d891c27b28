"""Pydantic models for API request bodies."""

from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UnitValueBody(BaseModel):
    """An amount with its unit."""

    amount: float
    unit: str


class ConvertRequest(BaseModel):
    """Unit conversion request."""

    value: UnitValueBody
    unit: str


class PreparationServingRequest(BaseModel):
    """Nutrition request for a preparation record."""

    model_config = ConfigDict(populate_by_name=True)

    preparation: dict[str, Any]
    serving_size: dict[str, Any] | None = Field(default=None, alias="servingSize")


class GroupServingRequest(BaseModel):
    """Nutrition request for a food group record."""

    model_config = ConfigDict(populate_by_name=True)

    group: dict[str, Any]
    serving_size: dict[str, Any] | None = Field(default=None, alias="servingSize")


class LogEntryBody(BaseModel):
    """A logged item."""

    id: str
    timestamp: datetime
    item: dict[str, Any]


class DayTotalsRequest(BaseModel):
    """Day totals request with the records the entries refer to."""

    entries: list[LogEntryBody]
    products: dict[str, dict[str, Any]] = Field(default_factory=dict)
    groups: dict[str, dict[str, Any]] = Field(default_factory=dict)
    day: date
    timezone: str = "UTC"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            raise ValueError(f"Unknown timezone {value!r}") from None
        return value
