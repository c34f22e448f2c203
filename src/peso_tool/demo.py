"""Datos de ejemplo: un mes de pesos diarios con ruido."""

from __future__ import annotations

import calendar
import random
from datetime import date, datetime, time

from dateutil.relativedelta import relativedelta

from peso_tool.binning import round_half_away
from peso_tool.model import Sample


def mock_month(
    shift: int = 0,
    base: date | None = None,
    seed: int | None = None,
    base_weight: float = 107.0,
) -> list[Sample]:
    """One sample per day of the month ``shift`` months away from ``base``.

    Values are ``base_weight`` plus uniform noise in ``[-2.0, 2.2]``, rounded
    to one decimal. Timestamps are naive, at 08:00.
    """
    rng = random.Random(seed)
    month = (base or date.today()) + relativedelta(months=shift, day=1)
    days = calendar.monthrange(month.year, month.month)[1]
    out: list[Sample] = []
    for offset in range(days):
        day = month + relativedelta(days=offset)
        noise = rng.uniform(-2.0, 2.2)
        out.append(
            Sample(
                timestamp=datetime.combine(day, time(8, 0)),
                value=float(round_half_away(base_weight + noise)),
            )
        )
    return out
