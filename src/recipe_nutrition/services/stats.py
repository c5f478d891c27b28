"""Statistics service for logged items."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from zoneinfo import ZoneInfo

from recipe_nutrition.domain.entries import DayTotals, LogEntry
from recipe_nutrition.domain.errors import NutritionError
from recipe_nutrition.domain.nutrients import NutrientProfile, aggregate
from recipe_nutrition.services.favorites import resolve_item
from recipe_nutrition.services.nutrition import NutritionService

_logger = logging.getLogger(__name__)


@dataclass
class StatsService:
    """Service for computing daily nutrition by timezone."""

    nutrition_service: NutritionService

    def day_totals(
        self,
        entries: Iterable[LogEntry],
        products: Mapping[str, Mapping[str, object]],
        groups: Mapping[str, Mapping[str, object]],
        day: date,
        timezone_name: str,
    ) -> DayTotals:
        """Return the nutrition of entries logged on ``day`` in a timezone.

        Entries whose product or group is missing, or whose nutrition cannot be
        computed, are skipped and counted in ``skipped_count``.
        """
        tz = ZoneInfo(timezone_name)
        profiles: list[NutrientProfile] = []
        skipped = 0
        for entry in entries:
            if entry.logged_at.astimezone(tz).date() != day:
                continue
            try:
                result = resolve_item(
                    self.nutrition_service, entry.item, products, groups
                )
            except NutritionError as exc:
                _logger.warning("Skipping log entry %s: %s", entry.id, exc)
                skipped += 1
                continue
            if result is None:
                _logger.warning("Skipping log entry %s: item not found", entry.id)
                skipped += 1
                continue
            profiles.append(result.nutrition)
        return DayTotals(
            day=day,
            nutrition=aggregate(profiles),
            entry_count=len(profiles),
            skipped_count=skipped,
        )
