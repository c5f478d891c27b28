"""Errors raised by the nutrition engine."""


class NutritionError(Exception):
    """Base class for nutrition computation failures."""


class IncompatibleUnitsError(NutritionError):
    """Raised when a value cannot be converted into the requested unit."""

    def __init__(self, from_unit: str, to_unit: str) -> None:
        super().__init__(f"Cannot convert {from_unit!r} to {to_unit!r}")
        self.from_unit = from_unit
        self.to_unit = to_unit


class UnresolvableServingError(NutritionError):
    """Raised when a serving size has no matching reference quantity."""


class MalformedRecordError(NutritionError):
    """Raised when a fetched record does not have the expected shape."""


class GroupStructureError(NutritionError):
    """Raised when a food group tree cannot be evaluated."""


class GroupCycleError(GroupStructureError):
    """Raised when a food group contains itself."""

    def __init__(self, group_key: str) -> None:
        super().__init__(f"Food group {group_key!r} contains itself")
        self.group_key = group_key


class GroupDepthError(GroupStructureError):
    """Raised when food groups are nested deeper than allowed."""

    def __init__(self, max_depth: int) -> None:
        super().__init__(f"Food groups are nested deeper than {max_depth} levels")
        self.max_depth = max_depth
