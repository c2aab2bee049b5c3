"""Read-only catalog lookups injected into the engine."""

from collections.abc import Iterable

from batchtrace.core.entities.catalog import Item, ItemCategory, Party, Recipe
from batchtrace.core.exceptions import (
    ItemNotFoundError,
    RecipeNotFoundError,
    ValidationError,
)


class Catalog:
    """Items, recipes and parties keyed by id."""

    def __init__(
        self,
        items: Iterable[Item],
        recipes: Iterable[Recipe] = (),
        suppliers: Iterable[Party] = (),
        customers: Iterable[Party] = (),
    ):
        self._items = {item.id: item for item in items}
        self._recipes = {recipe.code: recipe for recipe in recipes}
        self.suppliers = list(suppliers)
        self.customers = list(customers)

    @property
    def items(self) -> list[Item]:
        return list(self._items.values())

    @property
    def recipes(self) -> list[Recipe]:
        return list(self._recipes.values())

    def item(self, item_id: str) -> Item:
        item = self._items.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def item_of(self, item_id: str, category: ItemCategory, field: str, message: str) -> Item:
        """Look up an item and require a category."""
        item = self.item(item_id)
        if item.category != category:
            raise ValidationError(field, message, item_id)
        return item

    def recipe(self, code: str) -> Recipe:
        recipe = self._recipes.get(code)
        if recipe is None:
            raise RecipeNotFoundError(code)
        return recipe
