"""
Idempotent linking of menu items to menus.
"""
from menu_import.models.menu import Menu, MenuItem
from menu_import.services.entity_store import EntityStore
from menu_import.services.import_logger import ImportLogger


class AssociationManager:
    """Links a menu item to a menu once; repeated links are no-ops."""

    def __init__(self, store: EntityStore, logger: ImportLogger):
        self.store = store
        self.logger = logger

    def associate(self, item: MenuItem, menu: Menu) -> bool:
        """
        Link ``item`` to ``menu`` unless they are already linked.

        Returns:
            True if a new link was created

        Raises:
            Exception: Any store failure, after logging it
        """
        try:
            if self.store.is_item_linked_to_menu(item, menu):
                self.logger.warning(
                    f"Menu item '{item.name}' already associated with menu '{menu.name}'"
                )
                return False

            self.store.link_item_to_menu(item, menu)
        except Exception as e:
            self.logger.error(
                f"Failed to associate menu item '{item.name}' with menu '{menu.name}': {e}"
            )
            raise

        self.logger.info(f"Associated menu item '{item.name}' with menu '{menu.name}'")
        return True
