"""
Entity store used by the import pipeline.

``EntityStore`` is the set of lookups, writes, and transaction controls the
resolvers and orchestrator depend on. ``SqlAlchemyEntityStore`` implements it
on top of a SQLAlchemy session.
"""
import logging
from decimal import Decimal
from typing import Optional, Protocol

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from menu_import.core.errors import ConstraintError
from menu_import.models.menu import Menu, MenuItem, coerce_price, menu_items_menus
from menu_import.models.restaurant import Restaurant

logger = logging.getLogger(__name__)


class EntityStore(Protocol):
    """Persistence operations consumed by the import core."""

    def find_restaurant_by_normalized_name(self, name_key: str) -> Optional[Restaurant]: ...

    def create_restaurant(self, name: str) -> Restaurant: ...

    def find_menu_in_restaurant_by_normalized_name(
        self, restaurant: Restaurant, name_key: str
    ) -> Optional[Menu]: ...

    def create_menu(self, restaurant: Restaurant, name: str) -> Menu: ...

    def find_menu_item_by_normalized_name_and_price(
        self, name_key: str, price: Decimal
    ) -> Optional[MenuItem]: ...

    def create_menu_item(self, name: str, price: object) -> MenuItem: ...

    def is_item_linked_to_menu(self, item: MenuItem, menu: Menu) -> bool: ...

    def link_item_to_menu(self, item: MenuItem, menu: Menu) -> None: ...

    def begin_transaction(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


class SqlAlchemyEntityStore:
    """
    EntityStore backed by a SQLAlchemy session.

    Writes are flushed immediately so later lookups in the same transaction
    see them. Model validation errors propagate as ``ValidationError``;
    database integrity errors are raised as ``ConstraintError``.

    Args:
        session: Session that owns the import transaction
        isolation_level: Isolation level requested when the transaction starts
    """

    def __init__(self, session: Session, isolation_level: Optional[str] = None):
        self.session = session
        self.isolation_level = isolation_level

    # Restaurants

    def find_restaurant_by_normalized_name(self, name_key: str) -> Optional[Restaurant]:
        stmt = select(Restaurant).where(Restaurant.name_key == name_key).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def create_restaurant(self, name: str) -> Restaurant:
        restaurant = Restaurant(name=name)
        self._persist(restaurant, f"restaurant '{name}'")
        return restaurant

    # Menus

    def find_menu_in_restaurant_by_normalized_name(
        self, restaurant: Restaurant, name_key: str
    ) -> Optional[Menu]:
        stmt = (
            select(Menu)
            .where(Menu.restaurant_id == restaurant.id, Menu.name_key == name_key)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def create_menu(self, restaurant: Restaurant, name: str) -> Menu:
        menu = Menu(name=name, restaurant=restaurant)
        self._persist(menu, f"menu '{name}'")
        return menu

    # Menu items

    def find_menu_item_by_normalized_name_and_price(
        self, name_key: str, price: Decimal
    ) -> Optional[MenuItem]:
        stmt = (
            select(MenuItem)
            .where(MenuItem.name_key == name_key, MenuItem.price == coerce_price(price))
            .order_by(MenuItem.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def create_menu_item(self, name: str, price: object) -> MenuItem:
        item = MenuItem(name=name, price=price)
        self._persist(item, f"menu item '{name}'")
        return item

    # Associations

    def is_item_linked_to_menu(self, item: MenuItem, menu: Menu) -> bool:
        stmt = select(
            exists().where(
                menu_items_menus.c.menu_id == menu.id,
                menu_items_menus.c.menu_item_id == item.id,
            )
        )
        return bool(self.session.execute(stmt).scalar())

    def link_item_to_menu(self, item: MenuItem, menu: Menu) -> None:
        menu.menu_items.append(item)
        try:
            self.session.flush()
        except IntegrityError as e:
            raise ConstraintError(
                f"Failed to link menu item '{item.name}' to menu '{menu.name}': {e.orig}"
            ) from e

    # Unit of work

    def begin_transaction(self) -> None:
        """
        Start the import transaction.

        A session that is already inside a transaction keeps it; the import
        then commits or rolls back together with whatever was pending.
        """
        if self.session.in_transaction():
            logger.debug("Session already in a transaction, joining it")
            return

        self.session.begin()
        if self.isolation_level:
            self.session.connection(execution_options={"isolation_level": self.isolation_level})

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def _persist(self, entity, description: str) -> None:
        self.session.add(entity)
        try:
            self.session.flush()
        except IntegrityError as e:
            raise ConstraintError(f"Failed to save {description}: {e.orig}") from e
