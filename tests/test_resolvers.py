"""
Tests for the restaurant, menu, and menu item resolvers.
"""
import pytest
from decimal import Decimal

from menu_import.core.errors import CreateFailed, ValidationError
from menu_import.core.names import normalize_name
from menu_import.models import Menu, MenuItem, Restaurant
from menu_import.services.import_logger import EventLevel
from menu_import.services.resolvers import MenuItemResolver, MenuResolver, RestaurantResolver


class TestNormalizeName:
    """Tests for the comparison key."""

    @pytest.mark.parametrize("value", ["Burger", "burger", " BURGER ", "bUrGeR", "\tburger\n"])
    def test_case_and_whitespace_ignored(self, value):
        assert normalize_name(value) == "burger"

    def test_internal_whitespace_collapsed(self):
        assert normalize_name("  Pizza \t  PALACE  ") == "pizza palace"

    def test_none_has_empty_key(self):
        assert normalize_name(None) == ""


class TestRestaurantResolver:
    """Tests for restaurant find-or-create."""

    def test_creates_new_restaurant(self, store, import_logger):
        restaurant, created = RestaurantResolver(store, import_logger).resolve({"name": "  Test   Restaurant  "})

        assert created is True
        assert restaurant.name == "Test Restaurant"
        assert import_logger.events[-1].level == EventLevel.INFO
        assert import_logger.events[-1].message == "Created restaurant: Test Restaurant"

    def test_matches_existing_restaurant_ignoring_case(self, db, store, import_logger):
        resolver = RestaurantResolver(store, import_logger)
        original, _ = resolver.resolve({"name": "McDonalds"})

        matched, created = resolver.resolve({"name": " mcdonalds "})

        assert created is False
        assert matched is original
        assert matched.name == "McDonalds"
        assert db.query(Restaurant).count() == 1
        assert import_logger.events[-1].level == EventLevel.WARNING
        assert "already exists" in import_logger.events[-1].message

    def test_blank_name_logged_and_raised(self, store, import_logger):
        with pytest.raises(CreateFailed):
            RestaurantResolver(store, import_logger).resolve({"name": ""})

        assert import_logger.count(EventLevel.ERROR) == 1
        assert "can't be blank" in import_logger.events[-1].message

    def test_missing_name_logged_and_raised(self, store, import_logger):
        with pytest.raises(ValidationError):
            RestaurantResolver(store, import_logger).resolve({})

        assert import_logger.events[-1].level == EventLevel.ERROR


class TestMenuResolver:
    """Tests for menus, which are unique per restaurant."""

    def test_same_name_in_different_restaurants(self, db, store, import_logger):
        first = store.create_restaurant("Restaurant A")
        second = store.create_restaurant("Restaurant B")
        resolver = MenuResolver(store, import_logger)

        lunch_a, created_a = resolver.resolve({"name": "lunch"}, first)
        lunch_b, created_b = resolver.resolve({"name": "lunch"}, second)

        assert created_a and created_b
        assert lunch_a is not lunch_b
        assert db.query(Menu).count() == 2

    def test_same_name_twice_in_one_restaurant(self, db, store, import_logger):
        restaurant = store.create_restaurant("Restaurant A")
        resolver = MenuResolver(store, import_logger)

        lunch, _ = resolver.resolve({"name": "Lunch"}, restaurant)
        again, created = resolver.resolve({"name": "  LUNCH "}, restaurant)

        assert created is False
        assert again is lunch
        assert again.name == "Lunch"
        assert db.query(Menu).count() == 1
        assert import_logger.events[-1].message == "Menu already exists: 'Lunch' for restaurant 'Restaurant A'"

    def test_blank_menu_name_logged_and_raised(self, store, import_logger):
        restaurant = store.create_restaurant("Restaurant A")

        with pytest.raises(CreateFailed):
            MenuResolver(store, import_logger).resolve({"name": "  "}, restaurant)

        assert import_logger.events[-1].level == EventLevel.ERROR
        assert "Restaurant A" in import_logger.events[-1].message


class TestMenuItemResolver:
    """Tests for menu items keyed on (normalized name, price)."""

    @pytest.mark.parametrize("variant", ["burger", " BURGER ", "bUrGeR"])
    def test_variants_match_existing_item(self, db, store, import_logger, variant):
        resolver = MenuItemResolver(store, import_logger)
        burger, _ = resolver.resolve({"name": "Burger", "price": 9.00})

        matched, created = resolver.resolve({"name": variant, "price": "9.00"})

        assert created is False
        assert matched is burger
        assert matched.name == "Burger"
        assert db.query(MenuItem).count() == 1
        assert import_logger.events[-1].level == EventLevel.WARNING

    def test_price_is_part_of_identity(self, db, store, import_logger):
        resolver = MenuItemResolver(store, import_logger)

        cheap, created_cheap = resolver.resolve({"name": "Burger", "price": 9.00})
        pricey, created_pricey = resolver.resolve({"name": "burger", "price": 15.00})

        assert created_cheap and created_pricey
        assert cheap is not pricey
        assert pricey.name == "burger"
        assert {item.price for item in db.query(MenuItem).all()} == {Decimal("9.00"), Decimal("15.00")}

    def test_created_name_squeezed_not_lowercased(self, store, import_logger):
        item, _ = MenuItemResolver(store, import_logger).resolve({"name": "  Big   Mac ", "price": 5})

        assert item.name == "Big Mac"
        assert import_logger.events[-1].message == "Created menu item: Big Mac with price 5.00"

    def test_non_positive_price_logged_and_raised(self, db, store, import_logger):
        with pytest.raises(ValidationError, match="must be greater than 0"):
            MenuItemResolver(store, import_logger).resolve({"name": "Free Lunch", "price": 0})

        assert import_logger.count(EventLevel.ERROR) == 1
        assert "Free Lunch" in import_logger.events[-1].message

    def test_missing_price_logged_and_raised(self, store, import_logger):
        with pytest.raises(ValidationError, match="can't be blank"):
            MenuItemResolver(store, import_logger).resolve({"name": "Burger"})

    @pytest.mark.parametrize("price", [1e30, "123456789.00", "99999999.999"])
    def test_price_too_large_for_column_logged_and_raised(self, db, store, import_logger, price):
        """Should reject prices that do not fit the stored precision as a validation failure."""
        with pytest.raises(ValidationError, match="Price is too large"):
            MenuItemResolver(store, import_logger).resolve({"name": "Caviar", "price": price})

        assert import_logger.count(EventLevel.ERROR) == 1
        assert import_logger.events[-1].message.startswith("Failed to create menu item 'Caviar'")
        assert db.query(MenuItem).count() == 0

    def test_largest_storable_price_accepted(self, store, import_logger):
        item, created = MenuItemResolver(store, import_logger).resolve({"name": "Caviar", "price": "99999999.99"})

        assert created is True
        assert item.price == Decimal("99999999.99")

    def test_sub_cent_digits_match_stored_price(self, store, import_logger):
        """Should compare prices at cent precision."""
        resolver = MenuItemResolver(store, import_logger)
        burger, _ = resolver.resolve({"name": "Burger", "price": "9.00"})

        matched, created = resolver.resolve({"name": "Burger", "price": 9.004})

        assert created is False
        assert matched is burger
