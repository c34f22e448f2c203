"""Modelos tipados para mediciones de peso y resultados del gráfico."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import uuid4

from peso_tool.units import UnitSystem


def _new_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class Sample:
    """One weight measurement (timestamped, kilograms)."""

    timestamp: datetime
    value: float
    id: str = field(default_factory=_new_id)


class Period(str, Enum):
    """Chart viewing granularity."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    TOTAL = "total"

    @property
    def title(self) -> str:
        return self.value.capitalize()

    @property
    def navigable(self) -> bool:
        return self is not Period.TOTAL


@dataclass(frozen=True)
class Window:
    """Inclusive date range currently displayed."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class Bucket:
    """Samples collapsed to one averaged point."""

    key: date
    value: float


@dataclass(frozen=True)
class ChartResult:
    """Everything needed to draw one chart screen."""

    window: Window
    buckets: list[Bucket]
    plotted: list[Bucket]
    ticks: list[date]
    min_display: float
    max_display: float
    title: str
    domain: tuple[date, date]
    y_max: float
    unit: UnitSystem
