"""Entry point: load settings and events, then open the calendar window."""

import argparse
import logging
from datetime import date

from calendar_logic import validate_week_start
from calendar_window import CalendarWindow
from events import EventFilter, EventIndex, load_events
from settings import load_settings

logger = logging.getLogger(__name__)

HAS_EVENTS_FOOTER = "● Has events"


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mini calendar widget")
    parser.add_argument("--date", type=date.fromisoformat, default=None,
                        help="initially selected day (YYYY-MM-DD)")
    parser.add_argument("--week-start", type=int, default=None,
                        help="first day of the week, 0 = Sunday ... 6 = Saturday")
    parser.add_argument("--events", default=None,
                        help="JSON file with events that mark days")
    parser.add_argument("--class", dest="class_id", default=None,
                        help="only mark events of this class")
    parser.add_argument("--kind", default=None,
                        help="only mark events of this kind (lecture, lab, ...)")
    parser.add_argument("--search", default="",
                        help="only mark events whose title, description or location match")
    parser.add_argument("--settings", default=None,
                        help="settings file (default: ~/.mini-calendar-settings.json)")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    if args.week_start is not None:
        try:
            validate_week_start(args.week_start)
        except ValueError as exc:
            parser.error(str(exc))
    return args


def build_event_index(args: argparse.Namespace, settings: dict) -> EventIndex | None:
    """Events file from the command line or settings, narrowed by the filter flags."""
    events_file = args.events or settings["events_file"]
    if not events_file:
        return None
    event_filter = EventFilter(class_id=args.class_id, kind=args.kind, search=args.search)
    index = EventIndex(load_events(events_file), event_filter)
    logger.info("Marking days for %d events", len(index))
    return index


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    settings = load_settings(args.settings)
    index = build_event_index(args, settings)

    cal_win = CalendarWindow(
        seed=args.date,
        week_starts_on=args.week_start,
        footer=HAS_EVENTS_FOOTER if index is not None else None,
        settings_file=args.settings,
        events=index,
    )
    cal_win.run()


if __name__ == "__main__":
    main()
