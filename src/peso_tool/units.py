"""Sistemas de unidades y validación de pesos ingresados a mano."""

from __future__ import annotations

from enum import Enum

KG_TO_LB = 2.20462

MIN_WEIGHT_KG = 5.0
MAX_WEIGHT_KG = 200.0


class InvalidWeightError(ValueError):
    """Raised when a manually entered weight cannot be accepted."""


class UnitSystem(str, Enum):
    """Display unit preference. Storage is always kilograms."""

    METRIC = "metric"
    IMPERIAL = "imperial"

    @property
    def title(self) -> str:
        if self is UnitSystem.IMPERIAL:
            return "Pounds"
        return "Kilograms"

    @property
    def unit_label(self) -> str:
        if self is UnitSystem.IMPERIAL:
            return "lb"
        return "kg"

    def to_display(self, kg: float) -> float:
        """Convert a canonical kilogram value to this unit."""
        if self is UnitSystem.IMPERIAL:
            return kg * KG_TO_LB
        return kg

    def to_kilograms(self, value: float) -> float:
        """Convert a value expressed in this unit back to kilograms."""
        if self is UnitSystem.IMPERIAL:
            return value / KG_TO_LB
        return value

    @classmethod
    def parse(cls, raw: str | None) -> UnitSystem:
        """Devuelve el sistema pedido o METRIC si el valor no es válido."""
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.METRIC


def parse_weight(text: str) -> float:
    """Parse a typed weight, accepting either ``,`` or ``.`` as decimal mark.

    Args:
        text: Raw user input, e.g. ``"72,5"``.

    Returns:
        The parsed number, in whatever unit the user typed it.

    Raises:
        InvalidWeightError: If the text is not a number.
    """
    cleaned = text.strip().replace(",", ".")
    try:
        return float(cleaned)
    except ValueError as exc:
        raise InvalidWeightError(f"Not a number: {text!r}") from exc


def validate_weight(value_kg: float) -> float:
    """Check the accepted range in kilograms and return the value unchanged."""
    if not MIN_WEIGHT_KG <= value_kg <= MAX_WEIGHT_KG:
        raise InvalidWeightError(
            f"Allowed range: {MIN_WEIGHT_KG:g}-{MAX_WEIGHT_KG:g} kg "
            f"(got {value_kg:g})"
        )
    return value_kg
