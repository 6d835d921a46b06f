"""
Append-only event log for a single import run.

Each import gets its own ImportLogger. Events are kept in insertion order,
counted per severity, and forwarded to the standard ``logging`` module so
server logs carry the same trail the API response does.
"""
import logging
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, TextIO

logger = logging.getLogger(__name__)


class EventLevel(str, Enum):
    """Severity of an import event."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_LOGGING_LEVELS = {
    EventLevel.INFO: logging.INFO,
    EventLevel.WARNING: logging.WARNING,
    EventLevel.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class ImportEvent:
    """A single entry in the import log."""
    level: EventLevel
    message: str
    timestamp: datetime

    def to_dict(self) -> Dict:
        return {
            "level": self.level.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class SummaryData:
    """Creation counters tracked by the orchestrator at the point of creation."""
    restaurants_processed: int = 0
    menus_created: int = 0
    menu_items_created: int = 0
    associations_created: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "restaurants_processed": self.restaurants_processed,
            "menus_created": self.menus_created,
            "menu_items_created": self.menu_items_created,
            "associations_created": self.associations_created,
        }


@dataclass
class LogSummary:
    """Snapshot of an ImportLogger."""
    events: List[ImportEvent]
    counts: Dict[EventLevel, int]
    duration: float


@dataclass
class ImportReport:
    """Final report of an import run."""
    success: bool
    events: List[ImportEvent]
    counts: Dict[EventLevel, int]
    duration: float
    summary_data: SummaryData = field(default_factory=SummaryData)

    @property
    def errors(self) -> int:
        return self.counts.get(EventLevel.ERROR, 0)

    @property
    def warnings(self) -> int:
        return self.counts.get(EventLevel.WARNING, 0)

    @classmethod
    def from_summary(
        cls,
        summary: LogSummary,
        success: bool,
        summary_data: Optional[SummaryData] = None,
    ) -> "ImportReport":
        return cls(
            success=success,
            events=summary.events,
            counts=summary.counts,
            duration=summary.duration,
            summary_data=summary_data or SummaryData(),
        )


class ImportLogger:
    """
    Event sink scoped to one import run.

    Args:
        console: Also write every event to ``stream`` as it happens
        stream: Interactive stream used when ``console`` is set (stdout by default)
    """

    def __init__(self, console: bool = False, stream: Optional[TextIO] = None):
        self.console = console
        self.stream = stream
        self._events: List[ImportEvent] = []
        self._counts: Dict[EventLevel, int] = {level: 0 for level in EventLevel}
        self._started = time.monotonic()

    def info(self, message: str) -> ImportEvent:
        return self._append(EventLevel.INFO, message)

    def warning(self, message: str) -> ImportEvent:
        return self._append(EventLevel.WARNING, message)

    def error(self, message: str) -> ImportEvent:
        return self._append(EventLevel.ERROR, message)

    @property
    def events(self) -> List[ImportEvent]:
        return list(self._events)

    def count(self, level: EventLevel) -> int:
        return self._counts[level]

    def summary(self) -> LogSummary:
        """Return the ordered events, per-level counts, and elapsed seconds."""
        return LogSummary(
            events=list(self._events),
            counts=dict(self._counts),
            duration=time.monotonic() - self._started,
        )

    def _append(self, level: EventLevel, message: str) -> ImportEvent:
        event = ImportEvent(level=level, message=message, timestamp=datetime.now(timezone.utc))
        self._events.append(event)
        self._counts[level] += 1

        logger.log(_LOGGING_LEVELS[level], message)
        if self.console:
            stream = self.stream or sys.stdout
            stream.write(f"[{level.value.upper()}] {message}\n")
            stream.flush()

        return event
