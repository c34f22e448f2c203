"""Cálculo completo de una pantalla del gráfico (ventana, buckets, eje, min/max)."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import date

from peso_tool.binning import axis_ticks, bin_samples
from peso_tool.model import Bucket, ChartResult, Period, Sample, Window
from peso_tool.units import UnitSystem
from peso_tool.window import (
    CalendarConfig,
    chart_domain,
    filter_samples,
    initial_window,
    shift_window,
    sort_samples,
    window_title,
)

# eje Y cuando no hay nada que dibujar
DEFAULT_Y_MAX = 110.0


def min_max_display(
    filtered: Iterable[Sample], unit: UnitSystem
) -> tuple[float, float]:
    """Min and max raw value in the display unit, ``(0.0, 0.0)`` when empty."""
    values = [s.value for s in filtered]
    if not values:
        return 0.0, 0.0
    return unit.to_display(min(values)), unit.to_display(max(values))


def to_display_series(buckets: Iterable[Bucket], unit: UnitSystem) -> list[Bucket]:
    return [Bucket(key=b.key, value=unit.to_display(b.value)) for b in buckets]


def compute(
    samples: Sequence[Sample],
    period: Period,
    delta: int = 0,
    *,
    window: Window | None = None,
    unit: UnitSystem = UnitSystem.METRIC,
    calendar: CalendarConfig | None = None,
    today: date | None = None,
) -> ChartResult:
    """Compute everything the chart shows for one period.

    Args:
        samples: All stored samples, in any order. Not modified.
        period: Selected period.
        delta: Navigation steps from ``window`` (or from the initial window).
        window: Window currently on screen; None selects the initial one.
        unit: Display unit for plotted values and min/max.
        calendar: Locale settings. Defaults to Monday weeks, local time.
        today: Anchor used when there are no samples.

    Returns:
        ChartResult. Empty data gives empty buckets and zero min/max.
    """
    calendar = calendar or CalendarConfig()
    ordered = sort_samples(samples, calendar)

    current = window or initial_window(ordered, period, calendar, today)
    current = shift_window(current, period, delta, ordered, calendar)

    filtered = filter_samples(ordered, current, calendar)
    buckets = bin_samples(filtered, period, calendar)
    plotted = to_display_series(buckets, unit)
    low, high = min_max_display(filtered, unit)

    return ChartResult(
        window=current,
        buckets=buckets,
        plotted=plotted,
        ticks=axis_ticks(current, period, calendar, clip=not ordered),
        min_display=low,
        max_display=high,
        title=window_title(current, period),
        domain=chart_domain(current),
        y_max=_y_max(plotted),
        unit=unit,
    )


def _y_max(plotted: list[Bucket]) -> float:
    top = max((b.value for b in plotted), default=0.0)
    if top <= 0:
        return DEFAULT_Y_MAX
    return float(math.ceil(top))
