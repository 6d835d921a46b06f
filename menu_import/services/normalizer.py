"""
Normalization of raw import documents.

Rewrites legacy keys, cleans up item names, and rejects prices that are not
numbers before anything touches the database.
"""
import copy
import re
from decimal import Decimal
from typing import Any, Dict, List, Optional

from menu_import.core.errors import InvalidDocument, InvalidPriceFormat

PRICE_PATTERN = re.compile(r"\d+\.?\d*", re.ASCII)

# Legacy exports named the item list "dishes"
LEGACY_ITEMS_KEY = "dishes"
ITEMS_KEY = "menu_items"


class DocumentNormalizer:
    """
    Produce the canonical shape of an import document.

    The input is never mutated; ``normalize`` works on a deep copy.
    """

    def normalize(self, document: Any) -> Dict:
        """
        Normalize a parsed import document.

        Args:
            document: Parsed JSON document

        Returns:
            Normalized copy of the document

        Raises:
            InvalidDocument: If the document or one of its collections has the wrong type
            InvalidPriceFormat: If a menu item price is not numeric
        """
        if not isinstance(document, dict):
            raise InvalidDocument(
                f"Invalid document structure: expected an object, got {type(document).__name__}"
            )

        normalized = copy.deepcopy(document)

        for restaurant in _collection(normalized, "restaurants", "document"):
            if not isinstance(restaurant, dict):
                raise InvalidDocument("Invalid document structure: restaurant entries must be objects")
            for menu in _collection(restaurant, "menus", "restaurant"):
                if not isinstance(menu, dict):
                    raise InvalidDocument("Invalid document structure: menu entries must be objects")
                self._normalize_menu_items(menu)

        return normalized

    def _normalize_menu_items(self, menu: Dict) -> None:
        if LEGACY_ITEMS_KEY in menu:
            menu[ITEMS_KEY] = menu.pop(LEGACY_ITEMS_KEY)

        for item in _collection(menu, ITEMS_KEY, "menu"):
            if not isinstance(item, dict):
                raise InvalidDocument("Invalid document structure: menu item entries must be objects")
            item["name"] = sanitize_name(item.get("name"))
            validate_price(item.get("price"))


def sanitize_name(name: Any) -> Optional[str]:
    """Un-escape backslash-escaped quotes and trim whitespace; None passes through."""
    if name is None:
        return None
    return str(name).replace('\\"', '"').replace("\\'", "'").strip()


def validate_price(price: Any) -> Optional[float]:
    """
    Check that ``price`` is a number or an unsigned decimal string.

    Missing prices are left for the store to reject.

    Returns:
        The price as a float, or None when absent

    Raises:
        InvalidPriceFormat: For any other shape
    """
    if price is None:
        return None

    if isinstance(price, bool):
        raise InvalidPriceFormat(price)
    if isinstance(price, (int, float, Decimal)):
        return float(price)
    if isinstance(price, str) and PRICE_PATTERN.fullmatch(price):
        return float(price)

    raise InvalidPriceFormat(price)


def _collection(container: Dict, key: str, owner: str) -> List:
    value = container.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidDocument(f"Invalid document structure: {owner} '{key}' must be a list")
    return value


def normalize(document: Any) -> Dict:
    """Module-level shortcut for ``DocumentNormalizer().normalize``."""
    return DocumentNormalizer().normalize(document)
