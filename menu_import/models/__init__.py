"""
SQLAlchemy models for the menu import service.
"""
from menu_import.models.restaurant import Restaurant
from menu_import.models.menu import Menu, MenuItem, menu_items_menus


__all__ = [
    "Restaurant",
    "Menu",
    "MenuItem",
    "menu_items_menus",
]
