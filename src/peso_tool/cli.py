"""CLI para registrar pesos, ver el gráfico por periodo y exportarlo a Excel."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from peso_tool.chart import compute
from peso_tool.demo import mock_month
from peso_tool.excel_writer import ExcelLayout, write_chart_xlsx
from peso_tool.model import ChartResult, Period
from peso_tool.storage import AppConfig, SQLiteStore
from peso_tool.units import InvalidWeightError, UnitSystem, parse_weight

LOGGER = logging.getLogger(__name__)

_DEFAULT_DB = Path.home() / ".peso_tool" / "peso_tool.sqlite3"
_PERIODS = [p.value for p in Period]
_UNITS = [u.value for u in UnitSystem]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Registro de peso corporal con gráfico por semana/mes/año."
    )
    parser.add_argument(
        "--db",
        default=str(_DEFAULT_DB),
        help="Base SQLite (default: ~/.peso_tool/peso_tool.sqlite3).",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Logging detallado."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Registrar un peso nuevo.")
    add.add_argument("value", help="Peso, acepta coma o punto decimal.")
    add.add_argument("--unit", choices=_UNITS, help="Unidad del valor ingresado.")

    show = sub.add_parser("show", help="Mostrar el gráfico de un periodo.")
    _add_window_args(show)

    export = sub.add_parser("export", help="Exportar el gráfico a Excel.")
    _add_window_args(export)
    export.add_argument("--out", help="Archivo .xlsx de salida.")

    config = sub.add_parser("config", help="Ver o cambiar la configuración.")
    config.add_argument("--unit", choices=_UNITS)
    config.add_argument(
        "--first-weekday",
        type=int,
        choices=range(7),
        help="Primer día de la semana (0=lunes ... 6=domingo).",
    )
    config.add_argument("--timezone", help="Zona IANA, vacío = hora local.")
    config.add_argument("--export-dir", help="Carpeta para los Excel.")

    seed = sub.add_parser("seed", help="Cargar meses de datos de ejemplo.")
    seed.add_argument("--months", type=int, default=1)
    seed.add_argument("--seed", type=int, default=None)

    return parser.parse_args(argv)


def _add_window_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--period", choices=_PERIODS, default=Period.WEEK.value)
    parser.add_argument(
        "--offset",
        type=int,
        default=0,
        help="Periodos a desplazar desde el más reciente (ej. -1).",
    )


def main(argv: list[str] | None = None) -> int:
    """Run the command-line interface.

    Returns:
        Exit code (0 on success, 2 on invalid input).
    """
    ns = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    store = SQLiteStore(Path(ns.db).expanduser())
    LOGGER.debug("Using database %s", ns.db)

    if ns.command == "add":
        return _cmd_add(ns, store)
    if ns.command == "show":
        return _cmd_show(ns, store)
    if ns.command == "export":
        return _cmd_export(ns, store)
    if ns.command == "config":
        return _cmd_config(ns, store)
    return _cmd_seed(ns, store)


def _cmd_add(ns: argparse.Namespace, store: SQLiteStore) -> int:
    config = store.load_config()
    unit = UnitSystem(ns.unit) if ns.unit else config.unit_system
    try:
        value_kg = unit.to_kilograms(parse_weight(ns.value))
        sample = store.add_sample(value_kg)
    except InvalidWeightError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    shown = unit.to_display(sample.value)
    when = f"{sample.timestamp:%Y-%m-%d %H:%M}"
    print(f"OK: {shown:.1f} {unit.unit_label} guardado ({when})")
    return 0


def _chart_for(ns: argparse.Namespace, store: SQLiteStore) -> ChartResult:
    config = store.load_config()
    calendar = config.calendar()
    return compute(
        store.load_samples(calendar),
        Period(ns.period),
        ns.offset,
        unit=config.unit_system,
        calendar=calendar,
    )


def _cmd_show(ns: argparse.Namespace, store: SQLiteStore) -> int:
    result = _chart_for(ns, store)
    label = result.unit.unit_label
    print(f"{Period(ns.period).title}: {result.title}")
    print(f"Ventana: {result.window.start} .. {result.window.end}")
    print("Eje: " + ", ".join(t.isoformat() for t in result.ticks))
    if not result.plotted:
        print("No data yet")
    for bucket in result.plotted:
        print(f"  {bucket.key.isoformat()}  {bucket.value:6.1f} {label}")
    print(f"Min weight: {result.min_display:.1f} {label}")
    print(f"Max weight: {result.max_display:.1f} {label}")
    last = store.last_weight()
    if last is not None:
        value, when = last
        shown = result.unit.to_display(value)
        print(f"Último: {shown:.1f} {label} ({when:%Y-%m-%d})")
    return 0


def _cmd_export(ns: argparse.Namespace, store: SQLiteStore) -> int:
    config = store.load_config()
    result = _chart_for(ns, store)
    if ns.out:
        out_path = Path(ns.out).expanduser()
    else:
        out_dir = (
            Path(config.export_dir).expanduser()
            if config.export_dir
            else Path.cwd() / "salidas"
        )
        ts = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        out_path = out_dir / f"peso_{ns.period}_{ts}.xlsx"
    write_chart_xlsx(result, out_path, ExcelLayout())
    print(f"OK: Buckets: {len(result.buckets)}")
    print(f"OK: Output: {out_path}")
    return 0


def _cmd_config(ns: argparse.Namespace, store: SQLiteStore) -> int:
    config = store.load_config()
    changes: dict[str, object] = {}
    if ns.unit is not None:
        changes["unit_system"] = UnitSystem(ns.unit)
    if ns.first_weekday is not None:
        changes["first_weekday"] = ns.first_weekday
    if ns.timezone is not None:
        changes["timezone"] = ns.timezone.strip()
    if ns.export_dir is not None:
        changes["export_dir"] = ns.export_dir.strip()
    if changes:
        config = replace(config, **changes)
        store.save_config(config)
        LOGGER.info("Configuration updated: %s", sorted(changes))
    _print_config(config)
    return 0


def _print_config(config: AppConfig) -> None:
    print(f"unit: {config.unit_system.value} ({config.unit_system.title})")
    print(f"first_weekday: {config.first_weekday}")
    print(f"timezone: {config.timezone or '(local)'}")
    print(f"export_dir: {config.export_dir or '(./salidas)'}")


def _cmd_seed(ns: argparse.Namespace, store: SQLiteStore) -> int:
    samples = store.load_samples(store.load_config().calendar())
    added = 0
    for i, shift in enumerate(range(1 - max(ns.months, 1), 1)):
        month_seed = None if ns.seed is None else ns.seed + i
        new = mock_month(shift=shift, seed=month_seed)
        samples.extend(new)
        added += len(new)
    store.save_samples(samples)
    print(f"OK: {added} muestras de ejemplo agregadas")
    return 0
