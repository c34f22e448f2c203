"""Ventanas de tiempo del gráfico: selección inicial, navegación y filtrado."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo

from dateutil import tz
from dateutil.relativedelta import relativedelta

from peso_tool.model import Period, Sample, Window


@dataclass(frozen=True)
class CalendarConfig:
    """Locale settings that decide where days and weeks begin.

    Attributes:
        first_weekday: 0 = Monday ... 6 = Sunday.
        zone: Zone used to turn aware timestamps into calendar days.
            Naive timestamps are taken as already local.
    """

    first_weekday: int = 0
    zone: tzinfo = field(default_factory=tz.tzlocal)

    def day_of(self, timestamp: datetime) -> date:
        if timestamp.tzinfo is None:
            return timestamp.date()
        try:
            return timestamp.astimezone(self.zone).date()
        except OverflowError:
            # en los extremos de datetime se usa el día tal como viene
            return timestamp.date()

    def week_start(self, day: date) -> date:
        offset = (day.weekday() - self.first_weekday) % 7
        return add_days(day, -offset)

    def today(self) -> date:
        return datetime.now(tz=self.zone).date()

    def sort_key(self, timestamp: datetime) -> datetime:
        if timestamp.tzinfo is None:
            return timestamp.replace(tzinfo=self.zone)
        return timestamp


def add_days(day: date, days: int) -> date:
    """Add days, clamped to ``date.min`` / ``date.max``."""
    try:
        return day + timedelta(days=days)
    except OverflowError:
        return date.max if days > 0 else date.min


def sort_samples(
    samples: Iterable[Sample], calendar: CalendarConfig | None = None
) -> list[Sample]:
    """Return a new list ordered by timestamp (naive and aware may be mixed)."""
    calendar = calendar or CalendarConfig()
    return sorted(samples, key=lambda s: calendar.sort_key(s.timestamp))


def period_start(day: date, period: Period, calendar: CalendarConfig) -> date:
    """First day of the period containing ``day``."""
    if period is Period.WEEK:
        return calendar.week_start(day)
    if period is Period.MONTH:
        return day.replace(day=1)
    if period is Period.YEAR:
        return date(day.year, 1, 1)
    return day


def window_end(
    start: date,
    period: Period,
    samples: Sequence[Sample] = (),
    calendar: CalendarConfig | None = None,
) -> date:
    """Derive the inclusive end of the window that begins at ``start``."""
    calendar = calendar or CalendarConfig()
    if period is Period.WEEK:
        return add_days(start, 6)
    if period is Period.MONTH:
        # day=31 se ajusta al último día del mes
        return start + relativedelta(day=31)
    if period is Period.YEAR:
        return date(start.year, 12, 31)
    if not samples:
        return start
    latest = calendar.day_of(sort_samples(samples, calendar)[-1].timestamp)
    return max(start, latest)


def initial_window(
    samples: Sequence[Sample],
    period: Period,
    calendar: CalendarConfig | None = None,
    today: date | None = None,
) -> Window:
    """Window shown when a period is first selected.

    Anchors on the most recent sample, or on ``today`` when there is none.
    TOTAL spans from the first to the last sample.
    """
    calendar = calendar or CalendarConfig()
    ordered = sort_samples(samples, calendar)
    if today is None:
        today = calendar.today()

    if period is Period.TOTAL:
        if not ordered:
            return Window(start=today, end=today)
        return Window(
            start=calendar.day_of(ordered[0].timestamp),
            end=calendar.day_of(ordered[-1].timestamp),
        )

    anchor = calendar.day_of(ordered[-1].timestamp) if ordered else today
    start = period_start(anchor, period, calendar)
    return Window(start=start, end=window_end(start, period, ordered, calendar))


def shift_window(
    window: Window,
    period: Period,
    delta: int,
    samples: Sequence[Sample] = (),
    calendar: CalendarConfig | None = None,
) -> Window:
    """Move ``window`` by ``delta`` whole periods. TOTAL is not navigable."""
    calendar = calendar or CalendarConfig()
    if not period.navigable or delta == 0:
        return window

    try:
        if period is Period.WEEK:
            moved = window.start + timedelta(days=7 * delta)
        elif period is Period.MONTH:
            moved = window.start + relativedelta(months=delta)
        else:
            moved = window.start + relativedelta(years=delta)
        start = period_start(moved, period, calendar)
        end = window_end(start, period, samples, calendar)
    except (OverflowError, ValueError):
        # fuera del rango de datetime.date: la ventana no se mueve
        return window
    return Window(start=start, end=end)


def filter_samples(
    samples: Iterable[Sample],
    window: Window,
    calendar: CalendarConfig | None = None,
) -> list[Sample]:
    """Samples whose calendar day falls inside the window (both ends included)."""
    calendar = calendar or CalendarConfig()
    return [
        s
        for s in sort_samples(samples, calendar)
        if window.contains(calendar.day_of(s.timestamp))
    ]


def window_title(window: Window, period: Period) -> str:
    """Header text for the window, e.g. ``5 Jan – 11 Jan`` or ``March 2026``."""
    if period is Period.WEEK:
        start, end = window.start, window.end
        return f"{start.day} {start:%b} – {end.day} {end:%b}"
    if period is Period.MONTH:
        return window.start.strftime("%B %Y")
    if period is Period.YEAR:
        return str(window.start.year)
    return "All time"


def chart_domain(window: Window) -> tuple[date, date]:
    """X axis range; a single-day window is widened by one day."""
    if window.start == window.end:
        return window.start, add_days(window.end, 1)
    return window.start, window.end
