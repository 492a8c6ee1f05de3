"""Month navigation, grid annotation and the widget state that ties them together.

Nothing here touches a UI toolkit. A host (the tkinter window, a test, a web
view) creates a CalendarWidget, calls render() whenever it needs to draw, and
receives clicked days back through the on_select callback. Selection is always
owned by the host: the widget only reads it.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Optional

from calendar_logic import (
    DEFAULT_WEEK_START,
    add_months,
    grid_weeks,
    is_same_day,
    is_same_month,
    month_grid,
    month_label,
    start_of_month,
    validate_week_start,
    week_numbers,
    weekday_abbr,
    weekday_labels,
)

logger = logging.getLogger(__name__)

DayPredicate = Callable[[date], bool]

_UNSET = object()


def as_day(value: Any) -> Optional[date]:
    """Reduce *value* to a calendar day, or None when it is not a date at all."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def _no_events(_day: date) -> bool:
    return False


# ------------------------------------------------------------------
# Month cursor
# ------------------------------------------------------------------
class MonthCursor:
    """The month currently on display.

    Stored as the 1st of that month so month arithmetic never overflows a
    short month. The last observed selection is remembered so that a
    selection only moves the cursor when it actually changes.
    """

    __slots__ = ("_month", "_observed", "today")

    def __init__(self, seed: Optional[date] = None,
                 today: Callable[[], date] = date.today) -> None:
        self.today = today
        start = as_day(seed) or as_day(today())
        self._month = start_of_month(start)
        self._observed: Optional[date] = None

    @property
    def month(self) -> date:
        return self._month

    def next(self) -> date:
        self._month = add_months(self._month, 1)
        logger.debug("Cursor moved forward to %s", self._month)
        return self._month

    def previous(self) -> date:
        self._month = add_months(self._month, -1)
        logger.debug("Cursor moved back to %s", self._month)
        return self._month

    def jump_to(self, d: date) -> date:
        self._month = start_of_month(d)
        logger.debug("Cursor jumped to %s", self._month)
        return self._month

    def go_today(self) -> date:
        return self.jump_to(as_day(self.today()))

    def observe(self, selection: Any) -> date:
        """Follow an externally supplied selection.

        Every change to a non-null selection moves the cursor to the
        selection's month. Re-observing an unchanged value keeps whatever
        month the user navigated to in the meantime.
        """
        day = as_day(selection)
        if day != self._observed:
            self._observed = day
            if day is not None and not is_same_month(day, self._month):
                logger.debug("Selection %s resynchronized cursor", day)
                self._month = start_of_month(day)
        return self._month


# ------------------------------------------------------------------
# Selection & annotation overlay
# ------------------------------------------------------------------
@dataclass(frozen=True)
class DayCell:
    date: date
    is_outside_month: bool
    is_selected: bool
    has_events: bool
    is_today: bool = False


def is_outside_month(day: date, month: date) -> bool:
    return not is_same_month(day, month)


def is_selected(day: date, selection: Any) -> bool:
    return is_same_day(day, as_day(selection))


def annotate(
    grid: list[date],
    month: date,
    selection: Any = None,
    has_events: Optional[DayPredicate] = None,
    today: Optional[date] = None,
) -> list[DayCell]:
    """Decorate each grid day with its render flags.

    *has_events* is called exactly once per day; anything it raises is left
    to the caller.
    """
    predicate = has_events or _no_events
    selected = as_day(selection)
    return [
        DayCell(
            date=d,
            is_outside_month=is_outside_month(d, month),
            is_selected=is_same_day(d, selected),
            has_events=bool(predicate(d)),
            is_today=is_same_day(d, today),
        )
        for d in grid
    ]


# ------------------------------------------------------------------
# Widget
# ------------------------------------------------------------------
@dataclass
class CalendarOptions:
    """Host-supplied configuration.

    ``selected`` and ``has_events`` are re-read on every render;
    ``week_starts_on`` is validated here so that a bad value fails at
    construction rather than mid-render.
    """

    selected: Optional[date] = None
    on_select: Optional[Callable[[Optional[date]], None]] = None
    week_starts_on: int = DEFAULT_WEEK_START
    has_events: Optional[DayPredicate] = None
    footer: Any = None
    today: Callable[[], date] = date.today
    weekday_format: Callable[[date], str] = weekday_abbr
    month_format: Callable[[date], str] = month_label

    def __post_init__(self) -> None:
        validate_week_start(self.week_starts_on)


@dataclass(frozen=True)
class CalendarView:
    """Everything a host needs to draw one month."""

    month: date
    month_label: str
    weekday_labels: list[str]
    cells: list[DayCell]
    week_numbers: list[int] = field(default_factory=list)
    footer: Any = None

    @property
    def weeks(self) -> list[list[DayCell]]:
        return grid_weeks(self.cells)


class CalendarWidget:
    """A stateful month view.

    The only state the widget owns is its MonthCursor. Several widgets can
    live side by side; they share nothing.
    """

    def __init__(self, options: Optional[CalendarOptions] = None, **kwargs: Any) -> None:
        if options is None:
            options = CalendarOptions(**kwargs)
        elif kwargs:
            options = dataclasses.replace(options, **kwargs)
        self.options = options
        self.cursor = MonthCursor(as_day(options.selected), today=options.today)

    @property
    def month(self) -> date:
        return self.cursor.month

    # -- configuration -------------------------------------------------
    def update(self, **changes: Any) -> None:
        """Replace options; the next render recomputes everything from scratch."""
        self.options = dataclasses.replace(self.options, **changes)
        self.cursor.today = self.options.today

    # -- navigation ----------------------------------------------------
    def next_month(self) -> date:
        return self.cursor.next()

    def previous_month(self) -> date:
        return self.cursor.previous()

    def jump_to(self, d: date) -> date:
        return self.cursor.jump_to(as_day(d))

    def go_today(self) -> date:
        return self.cursor.go_today()

    # -- selection -----------------------------------------------------
    def select(self, day: Any) -> None:
        """Hand a clicked day (or None) to the host's on_select callback."""
        day = as_day(day)
        logger.debug("Day %s raised to host", day)
        if self.options.on_select is not None:
            self.options.on_select(day)

    # -- rendering -----------------------------------------------------
    def render(self, selected: Any = _UNSET) -> CalendarView:
        """Build the view for the current month.

        Passing *selected* replaces the host's ``selected`` option before the
        build, the same as calling update(selected=...) first.
        """
        if selected is not _UNSET:
            self.options = dataclasses.replace(self.options, selected=selected)
        opts = self.options

        month = self.cursor.observe(opts.selected)
        today = as_day(opts.today())
        grid = month_grid(month, opts.week_starts_on)
        cells = annotate(grid, month, opts.selected, opts.has_events, today)

        return CalendarView(
            month=month,
            month_label=opts.month_format(month),
            weekday_labels=weekday_labels(today, opts.week_starts_on, opts.weekday_format),
            cells=cells,
            week_numbers=week_numbers(grid),
            footer=opts.footer,
        )
