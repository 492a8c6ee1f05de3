"""Event list → "has events" predicate for the calendar grid."""

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Optional, Union

from calendar_engine import as_day

logger = logging.getLogger(__name__)


def _parse_moment(value):
    if isinstance(value, (datetime, date)):
        return value
    text = str(value)
    if "T" in text or " " in text:
        return datetime.fromisoformat(text)
    return date.fromisoformat(text)


@dataclass
class CalendarEvent:
    title: str
    start: Union[datetime, date]
    end: Optional[Union[datetime, date]] = None
    kind: str = "reminder"
    class_id: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None

    @property
    def day(self) -> date:
        return as_day(self.start)

    @classmethod
    def from_dict(cls, data: dict) -> "CalendarEvent":
        """Build an event from JSON-ish data; ISO strings are parsed."""
        end = data.get("end")
        return cls(
            title=str(data["title"]),
            start=_parse_moment(data["start"]),
            end=_parse_moment(end) if end else None,
            kind=data.get("kind") or data.get("type") or "reminder",
            class_id=data.get("class_id") or data.get("classId"),
            description=data.get("description"),
            location=data.get("location"),
        )


@dataclass(frozen=True)
class EventFilter:
    """Narrow which events mark a day. ``None`` means "any"."""

    class_id: Optional[str] = None
    kind: Optional[str] = None
    search: str = ""

    def matches(self, event: CalendarEvent) -> bool:
        if self.class_id is not None and event.class_id != self.class_id:
            return False
        if self.kind is not None and event.kind != self.kind:
            return False
        if self.search:
            needle = self.search.lower()
            haystack = " ".join(
                (event.title, event.description or "", event.location or "")
            ).lower()
            if needle not in haystack:
                return False
        return True


class EventIndex:
    """Start days of the matching events, precomputed once.

    ``has_events`` is a set lookup, so it is safe to hand to the widget,
    which calls it for every visible day on every render.
    """

    def __init__(self, events: Iterable[CalendarEvent],
                 event_filter: Optional[EventFilter] = None) -> None:
        self.event_filter = event_filter or EventFilter()
        self._events = [e for e in events if self.event_filter.matches(e)]
        self._days: set[date] = {e.day for e in self._events}

    def __len__(self) -> int:
        return len(self._events)

    def has_events(self, day: date) -> bool:
        return as_day(day) in self._days

    def events_on(self, day: date) -> list[CalendarEvent]:
        """Matching events starting on *day*, earliest first."""
        day = as_day(day)
        found = [e for e in self._events if e.day == day]
        return sorted(found, key=_sort_key)

    def agenda(self, day: date) -> list[str]:
        """One line per matching event on *day*: start time (or "All day") and title."""
        lines: list[str] = []
        for event in self.events_on(day):
            if isinstance(event.start, datetime):
                when = event.start.strftime("%H:%M")
            else:
                when = "All day"
            lines.append(f"{when} {event.title}")
        return lines


def _sort_key(event: CalendarEvent) -> datetime:
    start = event.start
    if isinstance(start, datetime):
        return start.replace(tzinfo=None)
    return datetime(start.year, start.month, start.day)


def load_events(path: Union[str, Path]) -> list[CalendarEvent]:
    """Read a JSON list of events. A missing file gives an empty list."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        logger.warning("Events file %s not found", path)
        return []
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Could not read events file %s: %s", path, exc)
        return []

    if not isinstance(raw, list):
        logger.warning("Events file %s does not contain a list", path)
        return []

    events: list[CalendarEvent] = []
    for entry in raw:
        try:
            events.append(CalendarEvent.from_dict(entry))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed event %r: %s", entry, exc)
    logger.info("Loaded %d events from %s", len(events), path)
    return events
