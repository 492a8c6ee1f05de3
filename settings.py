"""JSON-based settings persistence for the mini calendar."""

import json
import logging
import os

from calendar_logic import DEFAULT_WEEK_START, clamp_week_start

logger = logging.getLogger(__name__)

SETTINGS_ENV = "MINI_CALENDAR_SETTINGS"

_DEFAULT_PATH = os.path.join(os.path.expanduser("~"), ".mini-calendar-settings.json")

_DEFAULTS = {
    "week_starts_on": DEFAULT_WEEK_START,
    "show_week_numbers": False,
    "events_file": None,
    "window_width": None,
    "window_height": None,
}


def settings_path(path: str | None = None) -> str:
    """Resolve the settings file: explicit argument, then env var, then ~."""
    return path or os.environ.get(SETTINGS_ENV) or _DEFAULT_PATH


def load_settings(path: str | None = None) -> dict:
    """Load settings from disk, returning defaults for missing or bad keys."""
    settings = dict(_DEFAULTS)
    path = settings_path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return settings
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return settings

    if not isinstance(stored, dict):
        logger.warning("Ignoring settings file %s: not a JSON object", path)
        return settings

    week_start = stored.get("week_starts_on")
    if isinstance(week_start, int) and not isinstance(week_start, bool):
        settings["week_starts_on"] = clamp_week_start(week_start)
    if isinstance(stored.get("show_week_numbers"), bool):
        settings["show_week_numbers"] = stored["show_week_numbers"]
    if isinstance(stored.get("events_file"), str):
        settings["events_file"] = stored["events_file"]
    for key in ("window_width", "window_height"):
        value = stored.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            settings[key] = value
    return settings


def save_settings(settings: dict, path: str | None = None) -> None:
    """Persist settings to disk."""
    path = settings_path(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)
    logger.debug("Saved settings to %s", path)
