"""
Find-or-create resolvers for restaurants, menus, and menu items.

All three match on the normalized name (trimmed, whitespace squeezed,
lower-cased). A match is returned untouched, so the stored spelling wins over
the incoming one. New entities keep the incoming case but have their
whitespace squeezed.
"""
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from menu_import.core.errors import CreateFailed
from menu_import.core.names import normalize_name, squeeze_name
from menu_import.models.menu import Menu, MenuItem, coerce_price
from menu_import.models.restaurant import Restaurant
from menu_import.services.entity_store import EntityStore
from menu_import.services.import_logger import ImportLogger


def _display_name(value: Any) -> Optional[str]:
    return None if value is None else squeeze_name(value)


class EntityResolver:
    """Shared wiring for the entity resolvers."""

    def __init__(self, store: EntityStore, logger: ImportLogger):
        self.store = store
        self.logger = logger


class RestaurantResolver(EntityResolver):
    """Restaurants are unique across the whole store by normalized name."""

    def resolve(self, attributes: Dict, scope: None = None) -> Tuple[Restaurant, bool]:
        raw_name = attributes.get("name")
        name_key = normalize_name(raw_name)

        restaurant = self.store.find_restaurant_by_normalized_name(name_key) if name_key else None
        if restaurant is not None:
            self.logger.warning(f"Restaurant already exists: {restaurant.name}")
            return restaurant, False

        try:
            restaurant = self.store.create_restaurant(_display_name(raw_name))
        except CreateFailed as e:
            self.logger.error(f"Failed to create restaurant '{raw_name}': {e}")
            raise

        self.logger.info(f"Created restaurant: {restaurant.name}")
        return restaurant, True


class MenuResolver(EntityResolver):
    """Menus are unique per restaurant by normalized name."""

    def resolve(self, attributes: Dict, scope: Restaurant) -> Tuple[Menu, bool]:
        restaurant = scope
        raw_name = attributes.get("name")
        name_key = normalize_name(raw_name)

        menu = (
            self.store.find_menu_in_restaurant_by_normalized_name(restaurant, name_key)
            if name_key
            else None
        )
        if menu is not None:
            self.logger.warning(
                f"Menu already exists: '{menu.name}' for restaurant '{restaurant.name}'"
            )
            return menu, False

        try:
            menu = self.store.create_menu(restaurant, _display_name(raw_name))
        except CreateFailed as e:
            self.logger.error(
                f"Failed to create menu '{raw_name}' for restaurant '{restaurant.name}': {e}"
            )
            raise

        self.logger.info(f"Created menu '{menu.name}' for restaurant '{restaurant.name}'")
        return menu, True


class MenuItemResolver(EntityResolver):
    """
    Menu items are shared across menus and identified by (normalized name, price).

    The same name at a different price is a different item. Prices are
    compared at cent precision: 9.001 and 9.004 both match a stored 9.00.
    """

    def resolve(self, attributes: Dict, scope: None = None) -> Tuple[MenuItem, bool]:
        raw_name = attributes.get("name")
        raw_price = attributes.get("price")
        name_key = normalize_name(raw_name)
        price: Optional[Decimal] = coerce_price(raw_price)

        item = None
        if name_key and price is not None:
            item = self.store.find_menu_item_by_normalized_name_and_price(name_key, price)
        if item is not None:
            self.logger.warning(f"Menu item already exists: {item.name} with price {item.price}")
            return item, False

        try:
            item = self.store.create_menu_item(_display_name(raw_name), raw_price)
        except CreateFailed as e:
            self.logger.error(
                f"Failed to create menu item '{raw_name}' with price {raw_price}: {e}"
            )
            raise

        self.logger.info(f"Created menu item: {item.name} with price {item.price}")
        return item, True
