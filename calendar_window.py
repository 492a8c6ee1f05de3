"""Single-month calendar window (tkinter) drawn from a CalendarWidget."""

import logging
from datetime import date
from tkinter import font as tkfont
import tkinter as tk
from typing import Callable

from PIL import ImageTk

from calendar_engine import CalendarOptions, CalendarView, CalendarWidget, DayCell
from calendar_logic import day_of_year, is_same_day
from events import EventIndex
from icon_gen import create_icon_image
from settings import load_settings, save_settings

logger = logging.getLogger(__name__)

# Colours
ACCENT = "#0078D4"
SEL_BG = "#B3D7F2"
HEADER_BG = "#F3F3F3"
GRID_BG = "white"
OUTSIDE_FG = "#AAAAAA"
WN_FG = "#888888"
DOT_FG = "#4C9BE0"

MAX_WEEKS = 6


def footer_text(footer, selected: date | None, today: date,
                events: EventIndex | None = None) -> str:
    """Footer line: host footer, the selected day with its events, then today."""
    parts: list[str] = []
    if footer:
        parts.append(str(footer))
    if selected is not None:
        sel = f"Selected: {selected.strftime('%d.%m.%Y')}"
        if events is not None:
            agenda = events.agenda(selected)
            sel += ":  " + ("; ".join(agenda) if agenda else "no events")
        parts.append(sel)
    parts.append(f"Today: {today.strftime('%d.%m.%Y')}")
    return "     ".join(parts)


class _MonthPanel:
    """Pre-allocated widget pool for one month (header row + 6 weeks max)."""

    __slots__ = ("frame", "wk_header", "day_headers", "week_nums", "day_cells")

    def __init__(self, parent: tk.Frame, fonts: dict, on_click: Callable) -> None:
        self.frame = tk.Frame(parent, bg=GRID_BG)

        self.wk_header = tk.Label(
            self.frame, text="Wk", font=fonts["bold"], bg=GRID_BG, fg=WN_FG, width=3,
        )

        self.day_headers: list[tk.Label] = []
        for col in range(7):
            lbl = tk.Label(self.frame, font=fonts["bold"], bg=GRID_BG, fg="#333333", width=3)
            lbl.grid(row=0, column=col + 1)
            self.day_headers.append(lbl)

        self.week_nums: list[tk.Label] = []
        self.day_cells: list[tk.Canvas] = []
        for r in range(MAX_WEEKS):
            wn = tk.Label(self.frame, font=fonts["wn"], bg=GRID_BG, fg=WN_FG, width=3)
            self.week_nums.append(wn)
            for c in range(7):
                cell = tk.Canvas(
                    self.frame, width=fonts["cell_w"], height=fonts["cell_h"],
                    bg=GRID_BG, highlightthickness=0, borderwidth=0,
                )
                cell.grid(row=r + 1, column=c + 1)
                cell.bind("<Button-1>", on_click)
                self.day_cells.append(cell)

    def show_week_numbers(self, visible: bool) -> None:
        if visible:
            self.wk_header.grid(row=0, column=0)
            for r, wn in enumerate(self.week_nums):
                wn.grid(row=r + 1, column=0)
        else:
            self.wk_header.grid_forget()
            for wn in self.week_nums:
                wn.grid_forget()


class CalendarWindow:
    """Host window: owns the selection and renders the widget's view."""

    def __init__(self, seed: date | None = None, week_starts_on: int | None = None,
                 has_events: Callable[[date], bool] | None = None,
                 footer: str | None = None, settings_file: str | None = None,
                 events: EventIndex | None = None) -> None:
        self._settings_file = settings_file
        settings = load_settings(settings_file)
        self._show_week_numbers: bool = settings["show_week_numbers"]
        self._saved_width: int | None = settings["window_width"]
        self._saved_height: int | None = settings["window_height"]
        if week_starts_on is None:
            week_starts_on = settings["week_starts_on"]

        # Host-owned selection state
        self.selected: date | None = seed
        self.events = events
        if has_events is None and events is not None:
            has_events = events.has_events

        self.widget = CalendarWidget(CalendarOptions(
            selected=seed,
            on_select=self._on_select,
            week_starts_on=week_starts_on,
            has_events=has_events,
            footer=footer,
        ))

        self.root = tk.Tk()
        self.root.title(self._title())
        self.root.resizable(True, True)
        self.root.configure(bg=GRID_BG)
        self._icon = ImageTk.PhotoImage(create_icon_image(date.today()))
        self.root.iconphoto(True, self._icon)

        self._setup_fonts()

        # Cell pixel size matches a Label width=3
        _tmp = tk.Label(self.root, text="00", font=self.font_normal, width=3)
        _tmp.update_idletasks()
        self._panel_fonts = {
            "bold": self.font_bold, "normal": self.font_normal, "wn": self.font_wn,
            "cell_w": _tmp.winfo_reqwidth(), "cell_h": _tmp.winfo_reqheight(),
        }
        _tmp.destroy()

        # Canvas id -> date, refilled on every render
        self._widget_dates: dict[int, date] = {}

        self._build_shell()
        self.refresh()

        self.root.bind("<Escape>", self._on_escape)
        self.root.bind("<Left>", lambda _e: self._navigate(-1))
        self.root.bind("<Right>", lambda _e: self._navigate(1))
        self.root.protocol("WM_DELETE_WINDOW", self.close)

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def _setup_fonts(self) -> None:
        families = tkfont.families(self.root)
        base = "Segoe UI" if "Segoe UI" in families else "TkDefaultFont"
        self.font_normal = tkfont.Font(family=base, size=9)
        self.font_bold = tkfont.Font(family=base, size=9, weight="bold")
        self.font_header = tkfont.Font(family=base, size=10, weight="bold")
        self.font_nav = tkfont.Font(family=base, size=12, weight="bold")
        self.font_wn = tkfont.Font(family=base, size=8)
        self.font_footer = tkfont.Font(family=base, size=9)

    @staticmethod
    def _title() -> str:
        return f"Mini Calendar  Day: {day_of_year(date.today())}"

    # ------------------------------------------------------------------
    # Build shell (once): nav bar + month panel + footer
    # ------------------------------------------------------------------
    def _build_shell(self) -> None:
        outer = tk.Frame(self.root, bg=GRID_BG)
        outer.pack(padx=6, pady=4)

        # Navigation row: ◀  Month Year  ▶  Today
        nav = tk.Frame(outer, bg=HEADER_BG)
        nav.pack(fill="x", pady=(0, 2))

        btn_prev = tk.Label(nav, text="◀", font=self.font_nav, bg=HEADER_BG, cursor="hand2")
        btn_prev.pack(side="left", padx=6)
        btn_prev.bind("<Button-1>", lambda _e: self._navigate(-1))

        btn_today = tk.Label(
            nav, text="Today", font=self.font_bold, bg=HEADER_BG, fg=ACCENT, cursor="hand2",
        )
        btn_today.pack(side="right", padx=6)
        btn_today.bind("<Button-1>", lambda _e: self._go_today())

        btn_next = tk.Label(nav, text="▶", font=self.font_nav, bg=HEADER_BG, cursor="hand2")
        btn_next.pack(side="right", padx=6)
        btn_next.bind("<Button-1>", lambda _e: self._navigate(1))

        self._month_label = tk.Label(nav, font=self.font_header, bg=HEADER_BG, fg="#333333")
        self._month_label.pack(side="left", expand=True)

        self._panel = _MonthPanel(outer, self._panel_fonts, self._on_cell_click)
        self._panel.frame.pack()
        self._panel.show_week_numbers(self._show_week_numbers)

        self._footer_label = tk.Label(
            outer, font=self.font_footer, bg=GRID_BG, fg="#555555",
        )
        self._footer_label.pack(pady=(4, 0))

    # ------------------------------------------------------------------
    # Render
    # ------------------------------------------------------------------
    def refresh(self) -> None:
        """Re-render from the widget; selection is passed in every time."""
        view = self.widget.render(selected=self.selected)
        self._fill(view)

    def _fill(self, view: CalendarView) -> None:
        self._widget_dates.clear()
        self._month_label.configure(text=view.month_label)

        for lbl, text in zip(self._panel.day_headers, view.weekday_labels):
            lbl.configure(text=text)

        weeks = view.weeks
        for r in range(MAX_WEEKS):
            self._panel.week_nums[r].configure(
                text=str(view.week_numbers[r]) if r < len(weeks) else "")

        for i, canvas in enumerate(self._panel.day_cells):
            if i < len(view.cells):
                cell = view.cells[i]
                self._draw_cell(canvas, cell)
                self._widget_dates[id(canvas)] = cell.date
            else:
                canvas.delete("all")
                canvas.configure(bg=GRID_BG, cursor="")

        self._footer_label.configure(text=self._footer_text(view))

    def _draw_cell(self, canvas: tk.Canvas, cell: DayCell) -> None:
        canvas.delete("all")
        w = int(canvas["width"])
        h = int(canvas["height"])

        if cell.is_selected:
            bg, fg = ACCENT, "white"
        elif cell.is_today:
            bg, fg = SEL_BG, "black"
        elif cell.is_outside_month:
            bg, fg = GRID_BG, OUTSIDE_FG
        else:
            bg, fg = GRID_BG, "black"
        canvas.configure(bg=bg, cursor="hand2")

        font = self.font_bold if cell.is_today else self.font_normal
        canvas.create_text(w // 2, h // 2 - 1, text=str(cell.date.day), fill=fg, font=font)
        if cell.has_events:
            dot_fg = "white" if cell.is_selected else DOT_FG
            canvas.create_oval(w // 2 - 2, h - 5, w // 2 + 2, h - 1, fill=dot_fg, outline="")

    # ------------------------------------------------------------------
    # Footer text
    # ------------------------------------------------------------------
    def _footer_text(self, view: CalendarView) -> str:
        return footer_text(view.footer, self.selected, date.today(), self.events)

    # ------------------------------------------------------------------
    # Selection: the widget raises the day, this window decides
    # ------------------------------------------------------------------
    def _on_cell_click(self, event: tk.Event) -> None:
        d = self._widget_dates.get(id(event.widget))
        if d:
            self.widget.select(d)

    def _on_select(self, day: date | None) -> None:
        # Clicking the selected day again clears the selection
        if is_same_day(day, self.selected):
            self.selected = None
        else:
            self.selected = day
        logger.debug("Selection is now %s", self.selected)
        self.refresh()

    def _on_escape(self, _event: tk.Event) -> None:
        if self.selected is not None:
            self.widget.select(None)
        else:
            self.close()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def _navigate(self, direction: int) -> None:
        if direction < 0:
            self.widget.previous_month()
        else:
            self.widget.next_month()
        self.refresh()

    def _go_today(self) -> None:
        self.widget.go_today()
        self.refresh()

    # ------------------------------------------------------------------
    # Close, persisting window size
    # ------------------------------------------------------------------
    def _persist_size(self) -> None:
        settings = load_settings(self._settings_file)
        settings["window_width"] = self.root.winfo_width()
        settings["window_height"] = self.root.winfo_height()
        save_settings(settings, self._settings_file)

    def close(self) -> None:
        try:
            self._persist_size()
        except OSError as exc:
            logger.warning("Could not persist window size: %s", exc)
        self.root.destroy()

    def run(self) -> None:
        if self._saved_width and self._saved_height:
            self.root.geometry(f"{self._saved_width}x{self._saved_height}")
        self.root.mainloop()
