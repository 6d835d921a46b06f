"""
Import result Pydantic schemas for API responses.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from menu_import.services.import_logger import EventLevel


class ImportLogEntry(BaseModel):
    """A single import event as returned to callers."""
    level: EventLevel
    message: str
    timestamp: datetime


class ImportResults(BaseModel):
    """Counts and event log of a committed import."""
    restaurants_processed: int
    menus_created: int
    menu_items_created: int
    associations_created: int
    errors: int
    warnings: int
    logs: List[ImportLogEntry]


class ImportResponse(BaseModel):
    """Response body of the restaurant import endpoint."""
    success: bool
    message: str
    results: Optional[ImportResults] = None
