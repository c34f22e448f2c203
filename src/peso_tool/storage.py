"""Persistencia SQLite clave/valor para mediciones y configuración."""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from dateutil import tz
from dateutil.parser import isoparse

from peso_tool.model import Sample
from peso_tool.units import UnitSystem, validate_weight
from peso_tool.window import CalendarConfig, sort_samples

LOGGER = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS app_config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

RECORDS_KEY = "weightRecords"
LAST_VALUE_KEY = "lastWeightValue"
LAST_DATE_KEY = "lastWeightDate"


@dataclass(frozen=True)
class AppConfig:
    """Configuracion persistida de la app."""

    unit_system: UnitSystem = UnitSystem.METRIC
    first_weekday: int = 0
    timezone: str = ""
    export_dir: str = ""

    def calendar(self) -> CalendarConfig:
        """Build the calendar settings used by the chart."""
        zone = tz.gettz(self.timezone) if self.timezone else None
        if self.timezone and zone is None:
            LOGGER.warning("Unknown timezone %r, using local time", self.timezone)
        return CalendarConfig(
            first_weekday=self.first_weekday,
            zone=zone or tz.tzlocal(),
        )


class SQLiteStore:
    """Repositorio SQLite para la app."""

    def __init__(self, db_path: Path) -> None:
        """Create store and ensure schema exists."""
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def _get(self, key: str) -> str | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM app_config WHERE key = ?", (key,)
            ).fetchone()
        if row is None:
            return None
        return str(row["value"])

    def _put(self, items: dict[str, str]) -> None:
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO app_config(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                items.items(),
            )
            conn.commit()

    def load_config(self) -> AppConfig:
        """Devuelve configuracion guardada o defaults."""
        defaults = AppConfig()
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT key, value FROM app_config WHERE key IN (?, ?, ?, ?)",
                ("preferredUnitSystem", "firstWeekday", "timezone", "exportDir"),
            ).fetchall()
        values = {row["key"]: row["value"] for row in rows}
        return AppConfig(
            unit_system=UnitSystem.parse(values.get("preferredUnitSystem")),
            first_weekday=_parse_weekday(
                values.get("firstWeekday"), defaults.first_weekday
            ),
            timezone=values.get("timezone", defaults.timezone),
            export_dir=values.get("exportDir", defaults.export_dir),
        )

    def save_config(self, config: AppConfig) -> None:
        """Guarda la configuracion en tabla key/value."""
        self._put(
            {
                "preferredUnitSystem": config.unit_system.value,
                "firstWeekday": str(config.first_weekday),
                "timezone": config.timezone,
                "exportDir": config.export_dir,
            }
        )

    def load_samples(self, calendar: CalendarConfig | None = None) -> list[Sample]:
        """Load every stored sample, oldest first.

        Naive timestamps are ordered as local time of ``calendar``
        (default: machine-local zone).

        A payload that cannot be decoded counts as no data; individual
        records with missing or invalid fields are skipped.
        """
        raw = self._get(RECORDS_KEY)
        if raw is None:
            return []
        try:
            parsed: Any = json.loads(raw)
        except json.JSONDecodeError:
            LOGGER.warning("Stored %s is not valid JSON, ignoring it", RECORDS_KEY)
            return []
        if not isinstance(parsed, list):
            LOGGER.warning("Stored %s is not a list, ignoring it", RECORDS_KEY)
            return []

        out: list[Sample] = []
        for item in parsed:
            sample = _record_to_sample(item)
            if sample is None:
                LOGGER.debug("Skipping invalid weight record: %r", item)
                continue
            out.append(sample)
        return sort_samples(out, calendar)

    def save_samples(self, samples: Iterable[Sample]) -> None:
        """Replace the whole stored list."""
        payload = [_sample_to_record(s) for s in samples]
        self._put({RECORDS_KEY: json.dumps(payload)})

    def add_sample(self, value_kg: float, timestamp: datetime | None = None) -> Sample:
        """Validate and append a new measurement.

        Args:
            value_kg: Weight in kilograms.
            timestamp: Measurement time; defaults to now (local, aware).

        Returns:
            The stored sample.

        Raises:
            InvalidWeightError: If the value is out of range.
        """
        validate_weight(value_kg)
        when = timestamp or datetime.now(tz=tz.tzlocal())
        sample = Sample(timestamp=when, value=float(value_kg))
        samples = self.load_samples()
        samples.append(sample)
        self.save_samples(samples)
        self._put(
            {
                LAST_VALUE_KEY: repr(sample.value),
                LAST_DATE_KEY: sample.timestamp.isoformat(),
            }
        )
        LOGGER.info("Stored weight %.1f kg at %s", sample.value, when.isoformat())
        return sample

    def last_weight(self) -> tuple[float, datetime] | None:
        """Most recently entered value and its date, if any."""
        value = self._get(LAST_VALUE_KEY)
        when = self._get(LAST_DATE_KEY)
        if value is None or when is None:
            return None
        try:
            return float(value), isoparse(when)
        except ValueError:
            return None


def _parse_weekday(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if 0 <= value <= 6 else default


def _sample_to_record(sample: Sample) -> dict[str, object]:
    return {
        "id": sample.id,
        "date": sample.timestamp.isoformat(),
        "value": sample.value,
    }


def _record_to_sample(item: Any) -> Sample | None:
    """Convierte un dict guardado en Sample; None si falta algún campo."""
    if not isinstance(item, dict):
        return None
    raw_date = item.get("date")
    raw_value = item.get("value")
    if not isinstance(raw_date, str) or raw_value is None:
        return None
    try:
        timestamp = isoparse(raw_date)
        value = float(raw_value)
    except (TypeError, ValueError):
        return None
    raw_id = item.get("id")
    if raw_id:
        return Sample(timestamp=timestamp, value=value, id=str(raw_id))
    return Sample(timestamp=timestamp, value=value)
