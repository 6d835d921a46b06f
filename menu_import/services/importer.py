"""
Restaurant import orchestration.

Parses and normalizes an import document, then walks restaurants, menus, and
menu items inside a single transaction. Either every restaurant, menu, item
and link from the document is committed, or none of them is.
"""
import json
import logging
from typing import IO, Any, Dict, Optional, Union

import chardet
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from menu_import.core.config import get_settings
from menu_import.core.errors import (
    ConstraintError,
    CreateFailed,
    InputError,
    InvalidDocument,
    UnexpectedImportError,
)
from menu_import.models.menu import Menu
from menu_import.models.restaurant import Restaurant
from menu_import.services.association import AssociationManager
from menu_import.services.entity_store import EntityStore, SqlAlchemyEntityStore
from menu_import.services.import_logger import ImportLogger, ImportReport, SummaryData
from menu_import.services.normalizer import DocumentNormalizer
from menu_import.services.resolvers import MenuItemResolver, MenuResolver, RestaurantResolver

logger = logging.getLogger(__name__)

RawInput = Union[Dict, bytes, bytearray, str, IO]


class RestaurantImportService:
    """
    Import a restaurants document into the entity store.

    One service instance handles one run: the ImportLogger and creation
    counters it holds describe that run only.

    Args:
        store: Entity store the import reads from and writes to
        import_logger: Event log for this run (a fresh one is created if omitted)
        normalizer: Document normalizer (default DocumentNormalizer)
        console: Echo events to the terminal while importing
    """

    def __init__(
        self,
        store: EntityStore,
        import_logger: Optional[ImportLogger] = None,
        normalizer: Optional[DocumentNormalizer] = None,
        console: bool = False,
    ):
        self.store = store
        self.import_logger = import_logger or ImportLogger(console=console)
        self.normalizer = normalizer or DocumentNormalizer()
        self.summary_data = SummaryData()

        self.restaurants = RestaurantResolver(store, self.import_logger)
        self.menus = MenuResolver(store, self.import_logger)
        self.menu_items = MenuItemResolver(store, self.import_logger)
        self.associations = AssociationManager(store, self.import_logger)

    def run(self, raw_input: RawInput) -> ImportReport:
        """
        Run the import.

        Args:
            raw_input: Parsed document, JSON bytes/text, or a file object

        Returns:
            ImportReport with success=True; failures raise instead

        Raises:
            InputError: Malformed document or invalid price, before any write
            PersistenceError: Failure inside the transaction, after rollback
        """
        try:
            document = self.normalizer.normalize(parse_input(raw_input))
        except InputError as e:
            self.import_logger.error(f"Import rejected: {e}")
            raise

        try:
            self.store.begin_transaction()
            for restaurant_data in document.get("restaurants") or []:
                self._process_restaurant(restaurant_data)

            report = self._report(success=True)
            self.store.commit()
        except CreateFailed as e:
            self.import_logger.error(f"Transaction rolled back due to: {e}")
            self.store.rollback()
            e.report = self._report(success=False)
            raise
        except IntegrityError as e:
            self.import_logger.error(f"Transaction rolled back due to: {e.orig}")
            self.store.rollback()
            error = ConstraintError(str(e.orig))
            error.report = self._report(success=False)
            raise error from e
        except Exception as e:
            self.import_logger.error(f"Unexpected error during import: {e}")
            logger.exception("Unexpected error during import")
            self.store.rollback()
            error = UnexpectedImportError(str(e))
            error.report = self._report(success=False)
            raise error from e

        logger.info(
            f"Import committed: restaurants={self.summary_data.restaurants_processed}, "
            f"menus_created={self.summary_data.menus_created}, "
            f"menu_items_created={self.summary_data.menu_items_created}, "
            f"associations_created={self.summary_data.associations_created}"
        )
        return report

    def _process_restaurant(self, restaurant_data: Dict) -> None:
        logger.debug(f"Processing restaurant: {restaurant_data.get('name')}")

        restaurant, _ = self.restaurants.resolve(restaurant_data)
        self.summary_data.restaurants_processed += 1

        for menu_data in restaurant_data.get("menus") or []:
            self._process_menu(menu_data, restaurant)

    def _process_menu(self, menu_data: Dict, restaurant: Restaurant) -> None:
        logger.debug(f"Processing menu: {menu_data.get('name')} for restaurant: {restaurant.name}")

        menu, created = self.menus.resolve(menu_data, restaurant)
        if created:
            self.summary_data.menus_created += 1

        for item_data in menu_data.get("menu_items") or []:
            self._process_menu_item(item_data, menu)

    def _process_menu_item(self, item_data: Dict, menu: Menu) -> None:
        logger.debug(f"Processing menu item: {item_data.get('name')} for menu: {menu.name}")

        item, created = self.menu_items.resolve(item_data)
        if created:
            self.summary_data.menu_items_created += 1

        if self.associations.associate(item, menu):
            self.summary_data.associations_created += 1

    def _report(self, success: bool) -> ImportReport:
        return ImportReport.from_summary(
            self.import_logger.summary(),
            success=success,
            summary_data=self.summary_data,
        )


def parse_input(raw_input: Any) -> Any:
    """
    Turn raw input into a parsed JSON document.

    Mappings are returned as-is. Bytes are decoded using the detected
    encoding; file objects are rewound and read.

    Raises:
        InvalidDocument: If the input is not valid JSON
    """
    if isinstance(raw_input, dict):
        return raw_input

    if hasattr(raw_input, "read"):
        if callable(getattr(raw_input, "seekable", None)) and raw_input.seekable():
            raw_input.seek(0)
        raw_input = raw_input.read()

    if isinstance(raw_input, (bytes, bytearray)):
        raw_input = decode_bytes(bytes(raw_input))

    if not isinstance(raw_input, str):
        raise InvalidDocument(f"Unsupported input type: {type(raw_input).__name__}")

    try:
        return json.loads(raw_input)
    except json.JSONDecodeError as e:
        raise InvalidDocument(f"Invalid JSON format: {e}") from e


def decode_bytes(content: bytes) -> str:
    """
    Decode uploaded bytes.

    UTF-8 (with or without BOM) is tried first; anything else is decoded
    with the encoding chardet detects.
    """
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    encoding = detect_encoding(content)
    try:
        return content.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise InvalidDocument(f"Unable to decode input as {encoding}: {e}") from e


def detect_encoding(content: bytes) -> str:
    result = chardet.detect(content)
    return (result["encoding"] or "utf-8").lower()


def import_restaurants(
    session: Session,
    raw_input: RawInput,
    console: bool = False,
    isolation_level: Optional[str] = None,
) -> ImportReport:
    """
    Import ``raw_input`` using a SQLAlchemy session.

    Args:
        session: Session that owns the import transaction
        raw_input: Parsed document, JSON bytes/text, or a file object
        console: Echo events to the terminal while importing
        isolation_level: Override of IMPORT_ISOLATION_LEVEL

    Returns:
        ImportReport of the committed run
    """
    level = isolation_level or get_settings().IMPORT_ISOLATION_LEVEL
    store = SqlAlchemyEntityStore(session, isolation_level=level)
    return RestaurantImportService(store, console=console).run(raw_input)
