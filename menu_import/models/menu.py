"""
Menu-related models: menus, menu items, and the association between them.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship, validates

from menu_import.core.errors import ValidationError
from menu_import.core.names import normalize_name
from menu_import.db.base import Base

PRICE_QUANTUM = Decimal("0.01")
# Largest value a Numeric(10, 2) column holds
MAX_PRICE = Decimal("99999999.99")


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return price if price.is_finite() else None


def coerce_price(value: Any) -> Optional[Decimal]:
    """
    Convert a raw price field to a Decimal at the stored precision (cents).

    Sub-cent digits are rounded away, so 9.001 and 9.00 are the same price.
    Returns None when the value is missing, not a finite number, or too
    large to quantize. Booleans are not prices even though ``bool``
    subclasses ``int``.
    """
    price = _to_decimal(value)
    if price is None:
        return None
    try:
        return price.quantize(PRICE_QUANTUM)
    except InvalidOperation:
        return None


# Many-to-many link between menus and menu items
menu_items_menus = Table(
    "menu_items_menus",
    Base.metadata,
    Column("menu_id", Integer, ForeignKey("menus.id", ondelete="CASCADE"), primary_key=True),
    Column("menu_item_id", Integer, ForeignKey("menu_items.id", ondelete="CASCADE"), primary_key=True),
    Index("idx_menu_items_menus_item_menu", "menu_item_id", "menu_id"),
)


class Menu(Base):
    """A named menu (lunch, dinner, ...) belonging to one restaurant."""
    __tablename__ = "menus"

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    name_key = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    restaurant = relationship("Restaurant", back_populates="menus")
    menu_items = relationship("MenuItem", secondary=menu_items_menus, back_populates="menus")

    __table_args__ = (
        UniqueConstraint("restaurant_id", "name_key", name="uq_menus_restaurant_name_key"),
    )

    @validates("name")
    def validate_name(self, key, value):
        if value is None or not str(value).strip():
            raise ValidationError("Menu", {"name": "can't be blank"})
        self.name_key = normalize_name(value)
        return value

    def __repr__(self) -> str:
        return f"<Menu id={self.id} name={self.name!r} restaurant_id={self.restaurant_id}>"


class MenuItem(Base):
    """
    A dish sold under one or more menus.

    Items are not owned by a menu: the same (name, price) pair is shared by
    every menu that lists it. The same name at a different price is a
    different item.
    """
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    name_key = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    menus = relationship("Menu", secondary=menu_items_menus, back_populates="menu_items")

    __table_args__ = (
        UniqueConstraint("name_key", "price", name="uq_menu_items_name_key_price"),
        CheckConstraint("price > 0", name="ck_menu_items_price_positive"),
    )

    @validates("name")
    def validate_name(self, key, value):
        if value is None or not str(value).strip():
            raise ValidationError("MenuItem", {"name": "can't be blank"})
        self.name_key = normalize_name(value)
        return value

    @validates("price")
    def validate_price(self, key, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError("MenuItem", {"price": "can't be blank"})
        amount = _to_decimal(value)
        if amount is None:
            raise ValidationError("MenuItem", {"price": "is not a number"})
        if amount <= 0:
            raise ValidationError("MenuItem", {"price": "must be greater than 0"})
        price = coerce_price(amount)
        if price is None or price > MAX_PRICE:
            raise ValidationError("MenuItem", {"price": "is too large"})
        if price <= 0:
            raise ValidationError("MenuItem", {"price": "must be greater than 0"})
        return price

    def __repr__(self) -> str:
        return f"<MenuItem id={self.id} name={self.name!r} price={self.price}>"
