"""Unit catalog and conversion endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request

from recipe_nutrition.api.models import ConvertRequest
from recipe_nutrition.domain.units import UnitFamily, UnitValue, search_units

if TYPE_CHECKING:
    from recipe_nutrition.containers import AppContainer

router = APIRouter(prefix="/units", tags=["units"])


@router.get("")
async def list_units(family: str | None = None, q: str = "") -> dict[str, object]:
    """Return selectable units, optionally filtered by family and query."""
    if family is None:
        families = tuple(UnitFamily)
    else:
        try:
            families = (UnitFamily(family),)
        except ValueError:
            raise HTTPException(
                status_code=422,
                detail=f"Unknown unit family {family!r}",
            ) from None
    return {
        "units": [
            {
                "value": definition.value,
                "label": definition.label,
                "family": definition.family.value,
            }
            for definition in search_units(q, families)
        ]
    }


@router.post("/convert")
async def convert(body: ConvertRequest, request: Request) -> dict[str, object]:
    """Convert an amount into another unit of the same family."""
    container: AppContainer = request.app.state.container
    value = UnitValue(body.value.amount, body.value.unit)
    return container.nutrition_service.convert(value, body.unit).to_record()
