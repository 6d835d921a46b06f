"""
Maps import reports and failures onto the external response shape.
"""
from menu_import.core.errors import (
    ConstraintError,
    InputError,
    ValidationError,
)
from menu_import.schemas.imports import ImportLogEntry, ImportResponse, ImportResults
from menu_import.services.import_logger import ImportReport

SUCCESS_MESSAGE = "Import completed successfully"
FAILURE_MESSAGE = "Import failed"


def format_import_result(report: ImportReport) -> ImportResponse:
    """
    Build the response for a finished import.

    Args:
        report: Report returned by RestaurantImportService.run

    Returns:
        ImportResponse with counts and the full event log
    """
    summary = report.summary_data
    return ImportResponse(
        success=report.success,
        message=SUCCESS_MESSAGE if report.success else FAILURE_MESSAGE,
        results=ImportResults(
            restaurants_processed=summary.restaurants_processed,
            menus_created=summary.menus_created,
            menu_items_created=summary.menu_items_created,
            associations_created=summary.associations_created,
            errors=report.errors,
            warnings=report.warnings,
            logs=[
                ImportLogEntry(level=event.level, message=event.message, timestamp=event.timestamp)
                for event in report.events
            ],
        ),
    )


def failure_message(error: Exception) -> str:
    """Describe a failed import, distinguishing input errors from persistence errors."""
    if isinstance(error, InputError):
        return f"Data validation error: {error}"
    if isinstance(error, ValidationError):
        return f"Validation failed: {error}"
    if isinstance(error, ConstraintError):
        return f"Database constraint violation: {error}"
    return f"Internal server error during import: {error}"


def format_failure(error: Exception) -> ImportResponse:
    """Failure responses never carry counts; nothing from the run was kept."""
    return ImportResponse(success=False, message=failure_message(error), results=None)
