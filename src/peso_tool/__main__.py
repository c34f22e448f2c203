"""Punto de entrada: ``python -m peso_tool``."""

from __future__ import annotations

from peso_tool.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
