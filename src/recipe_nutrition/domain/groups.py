"""Food groups: recipes and meals made of products and other groups."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import assert_never

from recipe_nutrition.domain.errors import (
    GroupCycleError,
    GroupDepthError,
    MalformedRecordError,
    UnresolvableServingError,
)
from recipe_nutrition.domain.nutrients import aggregate
from recipe_nutrition.domain.preparation import (
    ItemServing,
    Preparation,
    select_preparation,
)
from recipe_nutrition.domain.scaling import (
    CustomSize,
    References,
    optional_str,
    resolve_scalar,
)
from recipe_nutrition.domain.serving import Servings, ServingSize, serving_from_record
from recipe_nutrition.domain.units import UnitValue

DEFAULT_MAX_DEPTH = 32


@dataclass(frozen=True)
class ProductEntry:
    """A product preparation used in a group."""

    preparation: Preparation | None
    serving_size: ServingSize = Servings(1)
    product_id: str | None = None
    product_name: str | None = None


@dataclass(frozen=True)
class SubgroupEntry:
    """A nested group used in a group."""

    group: "FoodGroup"
    serving_size: ServingSize = Servings(1)


GroupEntry = ProductEntry | SubgroupEntry


@dataclass(frozen=True)
class FoodGroup:
    """A named collection of products and groups eaten together.

    One serving of a group is the sum of its items, each taken at the serving
    size stored on the item. A group's mass and volume are the explicit ones
    from its record when given, otherwise the item totals; a total is only
    known when every item has one.

    Nested groups are evaluated with the chain of enclosing group keys so a
    group that contains itself raises GroupCycleError and a chain deeper than
    ``max_depth`` raises GroupDepthError.
    """

    items: tuple[GroupEntry, ...] = ()
    id: str | None = None
    name: str | None = None
    brand: str | None = None
    mass: UnitValue | None = None
    volume: UnitValue | None = None
    custom_sizes: tuple[CustomSize, ...] = ()

    @property
    def key(self) -> str:
        return self.id if self.id is not None else f"unsaved:{id(self)}"

    def one_serving(self, max_depth: int = DEFAULT_MAX_DEPTH) -> ItemServing:
        """Return the aggregated nutrition, mass and volume of one serving."""
        return self._one_serving((), max_depth)

    def serving_for(
        self, serving: ServingSize, max_depth: int = DEFAULT_MAX_DEPTH
    ) -> ItemServing:
        """Return nutrition, mass and volume scaled to ``serving``."""
        return self._serving_for(serving, (), max_depth)

    def scalar_for(
        self, serving: ServingSize, max_depth: int = DEFAULT_MAX_DEPTH
    ) -> float:
        return self.serving_for(serving, max_depth).servings

    def scale_one_serving(self, one: ItemServing, serving: ServingSize) -> ItemServing:
        """Scale an already computed ``one_serving`` result to ``serving``."""
        factor = resolve_scalar(
            serving,
            References(
                label=f"group {self.name or self.key!r}",
                nutrients=one.nutrition,
                mass=one.mass,
                volume=one.volume,
                custom_sizes=self.custom_sizes,
            ),
        )
        return ItemServing(
            nutrition=one.nutrition.scale(factor),
            mass=one.mass.scale(factor) if one.mass is not None else None,
            volume=one.volume.scale(factor) if one.volume is not None else None,
            servings=factor,
        )

    def _serving_for(
        self, serving: ServingSize, ancestors: tuple[str, ...], max_depth: int
    ) -> ItemServing:
        return self.scale_one_serving(
            self._one_serving(ancestors, max_depth), serving
        )

    def _one_serving(self, ancestors: tuple[str, ...], max_depth: int) -> ItemServing:
        if self.key in ancestors:
            raise GroupCycleError(self.key)
        if len(ancestors) >= max_depth:
            raise GroupDepthError(max_depth)
        chain = (*ancestors, self.key)
        servings = [self._item_serving(item, chain, max_depth) for item in self.items]
        return ItemServing(
            nutrition=aggregate(serving.nutrition for serving in servings),
            mass=self.mass or _sum_all([serving.mass for serving in servings]),
            volume=self.volume or _sum_all([serving.volume for serving in servings]),
        )

    def _item_serving(
        self, item: GroupEntry, chain: tuple[str, ...], max_depth: int
    ) -> ItemServing:
        match item:
            case ProductEntry(preparation=None):
                raise UnresolvableServingError(
                    f"{item.product_name or item.product_id or 'product'} "
                    "has no preparations"
                )
            case ProductEntry(preparation=preparation, serving_size=serving_size):
                return preparation.serving_for(serving_size)
            case SubgroupEntry(group=group, serving_size=serving_size):
                return group._serving_for(serving_size, chain, max_depth)
            case _:
                assert_never(item)

    @classmethod
    def from_record(
        cls, record: object, max_depth: int = DEFAULT_MAX_DEPTH
    ) -> "FoodGroup":
        """Build a group tree from a fetched group record."""
        return _group_from_record(record, 1, max_depth)


def _sum_all(values: Iterable[UnitValue | None]) -> UnitValue | None:
    total: UnitValue | None = None
    for value in values:
        if value is None:
            return None
        total = value if total is None else total.add(value)
    return total


def _group_from_record(record: object, depth: int, max_depth: int) -> FoodGroup:
    if depth > max_depth:
        raise GroupDepthError(max_depth)
    if not isinstance(record, Mapping):
        raise MalformedRecordError(f"Expected food group, got {record!r}")
    items = record.get("items") or []
    custom_sizes = record.get("customSizes") or []
    if not isinstance(items, list) or not isinstance(custom_sizes, list):
        raise MalformedRecordError("Group items and customSizes must be lists")
    return FoodGroup(
        items=tuple(_entry_from_record(item, depth, max_depth) for item in items),
        id=optional_str(record.get("id")),
        name=optional_str(record.get("name")),
        brand=optional_str(record.get("brand")),
        mass=UnitValue.from_record(record.get("mass")),
        volume=UnitValue.from_record(record.get("volume")),
        custom_sizes=tuple(CustomSize.from_record(size) for size in custom_sizes),
    )


def _entry_from_record(record: object, depth: int, max_depth: int) -> GroupEntry:
    if not isinstance(record, Mapping):
        raise MalformedRecordError(f"Expected group item, got {record!r}")
    serving_size = serving_from_record(record.get("servingSize")) or Servings(1)
    product = record.get("product")
    group = record.get("group")
    if (product is None) == (group is None):
        raise MalformedRecordError("Group item needs exactly one of product or group")
    if isinstance(product, Mapping):
        return ProductEntry(
            preparation=select_preparation(
                product, optional_str(record.get("preparationID"))
            ),
            serving_size=serving_size,
            product_id=optional_str(product.get("id")),
            product_name=optional_str(product.get("name")),
        )
    if product is not None:
        raise MalformedRecordError(f"Expected product, got {product!r}")
    return SubgroupEntry(
        group=_group_from_record(group, depth + 1, max_depth),
        serving_size=serving_size,
    )

