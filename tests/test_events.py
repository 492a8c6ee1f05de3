"""Tests for the event-date index."""

import json
from datetime import date, datetime

from calendar_engine import CalendarWidget
from events import CalendarEvent, EventFilter, EventIndex, load_events


def sample_events():
    return [
        CalendarEvent("Algebra lecture", datetime(2024, 2, 12, 10, 0),
                      kind="lecture", class_id="math", location="Room 4"),
        CalendarEvent("Lab safety", datetime(2024, 2, 12, 8, 30),
                      kind="lab", class_id="chem"),
        CalendarEvent("Essay due", date(2024, 2, 20), kind="assessment",
                      class_id="lit", description="Five pages on Woolf"),
        CalendarEvent("Office hours", datetime(2024, 3, 1, 14, 0),
                      kind="meeting", class_id="math"),
    ]


class TestCalendarEvent:
    """Tests for CalendarEvent parsing."""

    def test_from_dict_parses_iso_strings(self):
        event = CalendarEvent.from_dict({
            "title": "Lecture",
            "start": "2024-02-12T10:00:00",
            "end": "2024-02-12T11:30:00",
            "type": "lecture",
            "classId": "math",
        })
        assert event.start == datetime(2024, 2, 12, 10, 0)
        assert event.end == datetime(2024, 2, 12, 11, 30)
        assert event.kind == "lecture"
        assert event.class_id == "math"
        assert event.day == date(2024, 2, 12)

    def test_from_dict_all_day(self):
        event = CalendarEvent.from_dict({"title": "Holiday", "start": "2024-12-25"})
        assert event.start == date(2024, 12, 25)
        assert event.end is None
        assert event.kind == "reminder"


class TestEventFilter:
    """Tests for EventFilter.matches."""

    def test_default_matches_everything(self):
        assert all(EventFilter().matches(e) for e in sample_events())

    def test_class_and_kind(self):
        f = EventFilter(class_id="math", kind="meeting")
        assert [e.title for e in sample_events() if f.matches(e)] == ["Office hours"]

    def test_search_is_case_insensitive_over_text_fields(self):
        assert [e.title for e in sample_events() if EventFilter(search="WOOLF").matches(e)] == [
            "Essay due"]
        assert [e.title for e in sample_events() if EventFilter(search="room 4").matches(e)] == [
            "Algebra lecture"]


class TestEventIndex:
    """Tests for EventIndex lookups."""

    def test_has_events(self):
        index = EventIndex(sample_events())
        assert index.has_events(date(2024, 2, 12))
        assert index.has_events(date(2024, 2, 20))
        assert not index.has_events(date(2024, 2, 13))
        assert len(index) == 4

    def test_filter_narrows_marked_days(self):
        index = EventIndex(sample_events(), EventFilter(class_id="math"))
        assert index.has_events(date(2024, 2, 12))
        assert not index.has_events(date(2024, 2, 20))

    def test_events_on_sorted_by_start(self):
        index = EventIndex(sample_events())
        assert [e.title for e in index.events_on(date(2024, 2, 12))] == [
            "Lab safety", "Algebra lecture"]
        assert index.events_on(date(2024, 2, 13)) == []

    def test_agenda_lines(self):
        index = EventIndex(sample_events())
        assert index.agenda(date(2024, 2, 12)) == ["08:30 Lab safety", "10:00 Algebra lecture"]
        assert index.agenda(date(2024, 2, 20)) == ["All day Essay due"]
        assert index.agenda(date(2024, 2, 21)) == []

    def test_drives_widget_annotation(self):
        index = EventIndex(sample_events())
        widget = CalendarWidget(has_events=index.has_events, today=lambda: date(2024, 2, 14))
        marked = [c.date for c in widget.render().cells if c.has_events]
        assert marked == [date(2024, 2, 12), date(2024, 2, 20), date(2024, 3, 1)]


class TestLoadEvents:
    """Tests for load_events."""

    def test_missing_file_gives_empty_list(self, tmp_path):
        assert load_events(tmp_path / "nope.json") == []

    def test_corrupt_file_gives_empty_list(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_events(path) == []

    def test_non_list_gives_empty_list(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text(json.dumps({"title": "x"}), encoding="utf-8")
        assert load_events(path) == []

    def test_malformed_entries_are_skipped(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text(json.dumps([
            {"title": "Good", "start": "2024-02-12T09:00:00"},
            {"title": "No start"},
            {"title": "Bad date", "start": "2024-13-45"},
            42,
        ]), encoding="utf-8")
        events = load_events(path)
        assert [e.title for e in events] == ["Good"]
