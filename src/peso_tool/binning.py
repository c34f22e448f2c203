"""Agrupación de mediciones en buckets y marcas del eje X."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta
from itertools import islice

import numpy as np
import pandas as pd
from dateutil.rrule import MONTHLY, WEEKLY, YEARLY, rrule

from peso_tool.model import Bucket, Period, Sample, Window
from peso_tool.window import CalendarConfig, add_days, sort_samples

_FRAME_COLUMNS = ["id", "timestamp", "date", "value"]

MONTH_TICKS_CAP = 10
YEAR_TICKS_CAP = 13
TOTAL_YEARLY_TICKS_CAP = 20
TOTAL_MONTHLY_TICKS_CAP = 24
# más de ~18 meses: marcas anuales
YEARLY_TICKS_SPAN = timedelta(days=18 * 30)


def samples_to_frame(
    samples: Iterable[Sample], calendar: CalendarConfig | None = None
) -> pd.DataFrame:
    """Convert samples to a DataFrame with their calendar day, oldest first."""
    calendar = calendar or CalendarConfig()
    rows = [
        {
            "id": s.id,
            "timestamp": s.timestamp,
            "date": calendar.day_of(s.timestamp),
            "value": s.value,
        }
        for s in sort_samples(samples, calendar)
    ]
    if not rows:
        return pd.DataFrame(columns=_FRAME_COLUMNS)
    return pd.DataFrame(rows, columns=_FRAME_COLUMNS)


def bucket_key(day: date, period: Period) -> date:
    """Daily buckets for week/month, monthly buckets for year/total."""
    if period in (Period.WEEK, Period.MONTH):
        return day
    return day.replace(day=1)


def round_half_away(value: float | np.ndarray, places: int = 1) -> float | np.ndarray:
    """Round half away from zero (``100.25 -> 100.3``, ``-0.25 -> -0.3``).

    ``round()`` and pandas use banker's rounding, which would turn
    ``100.25`` into ``100.2``.
    """
    factor = 10.0**places
    return np.sign(value) * np.floor(np.abs(value) * factor + 0.5) / factor


def bin_samples(
    samples: Iterable[Sample],
    period: Period,
    calendar: CalendarConfig | None = None,
) -> list[Bucket]:
    """Average samples per bucket.

    Args:
        samples: Samples to group, usually already filtered to a window.
        period: Decides bucket granularity.
        calendar: Locale settings for turning timestamps into days.

    Returns:
        One bucket per key, rounded to one decimal, sorted by key.
    """
    frame = samples_to_frame(samples, calendar)
    if frame.empty:
        return []

    frame["key"] = frame["date"].map(lambda d: bucket_key(d, period))
    grouped = frame.groupby("key", as_index=False)["value"].mean()
    grouped["value"] = round_half_away(grouped["value"].to_numpy(dtype=float))
    grouped = grouped.sort_values("key").reset_index(drop=True)
    return [
        Bucket(key=row.key, value=float(row.value))
        for row in grouped.itertuples(index=False)
    ]


def axis_ticks(
    window: Window,
    period: Period,
    calendar: CalendarConfig | None = None,
    clip: bool = False,
) -> list[date]:
    """Dates to mark on the horizontal axis.

    Args:
        window: Window being displayed.
        period: Selected period.
        calendar: Locale settings (week start for monthly charts).
        clip: Drop ticks that fall outside the window.

    Returns:
        Ordered tick dates. Every period except WEEK ends on ``window.end``.
    """
    calendar = calendar or CalendarConfig()
    start, end = window.start, window.end

    if period is Period.WEEK:
        # al final del calendario los días repetidos se descartan
        ticks = sorted({add_days(start, i) for i in range(7)})
    elif period is Period.MONTH:
        first = calendar.week_start(start)
        ticks = _close(_stepped(WEEKLY, first, end, MONTH_TICKS_CAP), end)
    elif period is Period.YEAR:
        first = start.replace(day=1)
        ticks = _close(_stepped(MONTHLY, first, end, YEAR_TICKS_CAP), end)
    elif end - start > YEARLY_TICKS_SPAN:
        first = date(start.year, 1, 1)
        ticks = _close(_stepped(YEARLY, first, end, TOTAL_YEARLY_TICKS_CAP), end)
    else:
        first = start.replace(day=1)
        ticks = _close(_stepped(MONTHLY, first, end, TOTAL_MONTHLY_TICKS_CAP), end)

    if clip:
        return [t for t in ticks if window.contains(t)]
    return ticks


def _stepped(freq: int, first: date, last: date, cap: int) -> list[date]:
    rule = rrule(freq, dtstart=_midnight(first), until=_midnight(last))
    return [d.date() for d in islice(rule, cap)]


def _midnight(day: date) -> datetime:
    return datetime.combine(day, datetime.min.time())


def _close(ticks: list[date], end: date) -> list[date]:
    if ticks and ticks[-1] != end:
        return [*ticks, end]
    return ticks
