"""
Error taxonomy for restaurant imports.

Input errors are raised before any persistence happens and never need a
rollback. Persistence errors are raised inside the import transaction; by the
time a caller sees one, the transaction has already been rolled back.
"""
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from menu_import.services.import_logger import ImportReport


class MenuImportError(Exception):
    """Base class for all import failures."""


class InputError(MenuImportError):
    """The submitted document cannot be imported as given."""


class InvalidDocument(InputError):
    """Malformed JSON or an unexpected document structure."""


class InvalidPriceFormat(InputError):
    """A menu item price is neither a number nor an unsigned decimal string."""

    def __init__(self, price: Any):
        self.price = price
        super().__init__(f"Invalid price format: {price}")


class PersistenceError(MenuImportError):
    """
    A failure inside the import transaction.

    The report of the failed run (events up to and including the failure) is
    attached by the orchestrator so callers can audit what happened.
    """

    report: Optional["ImportReport"] = None


class CreateFailed(PersistenceError):
    """A write against the entity store failed."""


class ValidationError(CreateFailed):
    """An entity violates a store-level constraint (blank name, bad price)."""

    def __init__(self, entity: str, errors: dict[str, str]):
        self.entity = entity
        self.errors = errors
        super().__init__(", ".join(self.full_messages))

    @property
    def full_messages(self) -> list[str]:
        return [f"{field.capitalize()} {message}" for field, message in self.errors.items()]


class ConstraintError(CreateFailed):
    """A uniqueness or foreign-key violation reported by the database."""


class UnexpectedImportError(PersistenceError):
    """Any other failure while the import transaction was open."""
