"""Pure calendar calculations, no UI dependencies.

Week-start values follow the conventional 7-day week numbering:
0 = Sunday, 1 = Monday, ... 6 = Saturday.
"""

import calendar
from datetime import MAXYEAR, MINYEAR, date, timedelta
from typing import Callable

DEFAULT_WEEK_START = 1  # Monday

DAY_ABBR = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

_THURSDAY = 4


def validate_week_start(value: int) -> int:
    """Return *value* unchanged if it is a valid week start, else raise ValueError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"week start must be an integer in [0, 6], got {value!r}")
    if not 0 <= value <= 6:
        raise ValueError(f"week start must be in [0, 6], got {value}")
    return value


def clamp_week_start(value: int) -> int:
    """Clamp *value* into [0, 6] for lenient callers such as stored settings."""
    return max(0, min(6, int(value)))


# ------------------------------------------------------------------
# Day arithmetic
# ------------------------------------------------------------------
def add_days(d: date, n: int) -> date:
    return d + timedelta(days=n)


def weekday_index(d: date) -> int:
    """Return the weekday of *d* with Sunday as 0."""
    return (d.weekday() + 1) % 7


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def end_of_month(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def start_of_week(d: date, week_start: int = DEFAULT_WEEK_START) -> date:
    """Return the first day of the week containing *d*."""
    return d - timedelta(days=(weekday_index(d) - week_start) % 7)


def end_of_week(d: date, week_start: int = DEFAULT_WEEK_START) -> date:
    """Return the last day of the week containing *d*."""
    return start_of_week(d, week_start) + timedelta(days=6)


def is_same_day(a: date | None, b: date | None) -> bool:
    if a is None or b is None:
        return False
    return a == b


def is_same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def day_of_year(d: date) -> int:
    """Return the 1-based day-of-year for the given date."""
    return d.timetuple().tm_yday


# ------------------------------------------------------------------
# Month arithmetic
# ------------------------------------------------------------------
def add_months(d: date, n: int) -> date:
    """Shift *d* by *n* calendar months, normalized to the 1st.

    Normalizing first means 2024-01-31 + 1 lands in February, never March.
    Raises OverflowError when the result leaves the range of ``date``.
    """
    total = d.year * 12 + (d.month - 1) + n
    year, month0 = divmod(total, 12)
    if not MINYEAR <= year <= MAXYEAR:
        raise OverflowError(f"month {year:04d}-{month0 + 1:02d} is out of range")
    return date(year, month0 + 1, 1)


# ------------------------------------------------------------------
# Formatting
# ------------------------------------------------------------------
def weekday_abbr(d: date) -> str:
    return DAY_ABBR[weekday_index(d)]


def month_label(d: date) -> str:
    """Return a "Month Year" label such as "February 2024"."""
    return f"{calendar.month_name[d.month]} {d.year}"


# ------------------------------------------------------------------
# Grid
# ------------------------------------------------------------------
def month_grid(month: date, week_start: int = DEFAULT_WEEK_START) -> list[date]:
    """Return every day to render for the month containing *month*.

    The sequence runs from the first day of the week holding the 1st to the
    last day of the week holding the month's last day, so it always covers
    whole weeks (28 to 42 days) and starts on *week_start*.
    A grid that would spill past the range of ``date`` (possible only for
    January of year 1 and December of year 9999) raises OverflowError.
    """
    try:
        grid_start = start_of_week(start_of_month(month), week_start)
        grid_end = end_of_week(end_of_month(month), week_start)
    except OverflowError:
        raise OverflowError(f"grid for {month:%Y-%m} is out of range") from None

    span = (grid_end - grid_start).days + 1
    return [add_days(grid_start, i) for i in range(span)]


def grid_weeks(grid: list) -> list[list]:
    """Split a grid (of dates or cells) into rows of 7."""
    return [grid[i:i + 7] for i in range(0, len(grid), 7)]


def week_numbers(grid: list[date]) -> list[int]:
    """Return the ISO week number for each 7-day row of *grid*.

    Each row is labelled by its Thursday, which is the day that fixes the ISO
    week for Monday-first rows and stays inside the row for any week start.
    """
    numbers: list[int] = []
    for row in grid_weeks(grid):
        thursday = next(d for d in row if weekday_index(d) == _THURSDAY)
        numbers.append(thursday.isocalendar()[1])
    return numbers


def weekday_labels(
    today: date,
    week_start: int = DEFAULT_WEEK_START,
    formatter: Callable[[date], str] = weekday_abbr,
) -> list[str]:
    """Return 7 header labels in grid column order."""
    first = start_of_week(today, week_start)
    return [formatter(add_days(first, i)) for i in range(7)]
