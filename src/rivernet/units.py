"""Canonical quantities for length, area and volume.

Every quantity is stored as a magnitude in the canonical unit of its kind
(millimetres, square kilometres, litres) plus an optional preferred unit
used for display. Rainfall in millimetres over an area in square
kilometres is exactly one megalitre per (mm x sqkm).

Conversion factors come from the pint application registry; the labels
accepted here and the display rules are this package's own.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Context, Decimal, localcontext
from enum import Enum

import pint

ureg = pint.get_application_registry()


class UnitKindError(TypeError):
    """Raised when quantities of different kinds are combined."""

    def __init__(self, left: Kind, right: Kind, operation: str):
        self.left = left
        self.right = right
        self.operation = operation
        super().__init__(f"Cannot {operation} {left.name} and {right.name} quantities")


class UnknownUnitError(ValueError):
    """Raised when a unit label cannot be resolved."""

    def __init__(self, label: object):
        self.label = label
        super().__init__(f"Unknown unit: {label}")


class Kind(Enum):
    LENGTH = "mm"
    AREA = "sqkm"
    VOLUME = "L"

    @property
    def pint_unit(self) -> str:
        return _PINT_CANONICAL[self]


_PINT_CANONICAL: dict[Kind, str] = {
    Kind.LENGTH: "millimeter",
    Kind.AREA: "kilometer ** 2",
    Kind.VOLUME: "liter",
}


def _canonical_factor(kind: Kind, pint_unit: str) -> float:
    magnitude = ureg.Quantity(1.0, pint_unit).to(kind.pint_unit).magnitude
    # 12 significant digits drop pint's prefix arithmetic noise
    return float(f"{magnitude:.12g}")


class Unit(Enum):
    # declaration order matters for case-insensitive lookup
    KM = (Kind.LENGTH, "km", "kilometer")
    M = (Kind.LENGTH, "m", "meter")
    CM = (Kind.LENGTH, "cm", "centimeter")
    MM = (Kind.LENGTH, "mm", "millimeter")

    SQM = (Kind.AREA, "sqm", "meter ** 2")
    HA = (Kind.AREA, "ha", "hectare")
    SQKM = (Kind.AREA, "sqkm", "kilometer ** 2")

    L = (Kind.VOLUME, "L", "liter")
    MILLILITRE = (Kind.VOLUME, "mL", "milliliter")
    KILOLITRE = (Kind.VOLUME, "kL", "kiloliter")
    MEGALITRE = (Kind.VOLUME, "ML", "megaliter")

    def __init__(self, kind: Kind, label: str, pint_unit: str):
        self.kind = kind
        self.label = label
        self.pint_unit = pint_unit
        self.factor = _canonical_factor(kind, pint_unit)

    def to_canonical(self, value: float) -> float:
        return value * self.factor

    def from_canonical(self, canonical: float) -> float:
        return canonical / self.factor

    @classmethod
    def parse(cls, label: str | Unit) -> Unit:
        """Resolve a unit label, exact match first, then case-insensitively."""
        if isinstance(label, Unit):
            return label
        if not isinstance(label, str):
            raise UnknownUnitError(label)
        norm = label.strip()
        for unit in cls:
            if unit.label == norm:
                return unit
        lower = norm.lower()
        for unit in cls:
            if unit.label.lower() == lower:
                return unit
        raise UnknownUnitError(label)

    @classmethod
    def best_for(cls, kind: Kind, canonical: float) -> Unit:
        """Largest unit of ``kind`` whose factor does not exceed the magnitude."""
        candidates = _DISPLAY_CANDIDATES[kind]
        magnitude = abs(canonical)
        for unit in candidates:
            if magnitude >= unit.factor:
                return unit
        return candidates[-1]


_DISPLAY_CANDIDATES: dict[Kind, tuple[Unit, ...]] = {
    Kind.LENGTH: (Unit.KM, Unit.M, Unit.CM, Unit.MM),
    Kind.AREA: (Unit.SQKM, Unit.HA, Unit.SQM),
    Kind.VOLUME: (Unit.MEGALITRE, Unit.KILOLITRE, Unit.L, Unit.MILLILITRE),
}

_SIGNIFICANT = Context(prec=12, rounding=ROUND_HALF_UP)
_DECIMAL_PLACES = Decimal("1e-12")


def format_number(value: float) -> str:
    """Render a float without floating-point noise.

    Values with magnitude >= 1 are rounded to 12 decimal places, smaller
    ones to 12 significant digits. Trailing zeros are stripped.
    """
    if math.isnan(value) or math.isinf(value):
        return repr(float(value))
    if value == 0:
        return "0"
    dec = Decimal(repr(float(value)))
    with localcontext() as ctx:
        ctx.prec = 400
        ctx.rounding = ROUND_HALF_UP
        if abs(value) >= 1.0:
            rounded = dec.quantize(_DECIMAL_PLACES)
        else:
            rounded = _SIGNIFICANT.plus(dec)
        text = format(rounded.normalize(), "f")
    return "0" if text in ("-0", "0") else text


@dataclass(frozen=True, slots=True)
class Quantity:
    kind: Kind
    canonical: float
    preferred: Unit | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.preferred is not None and self.preferred.kind is not self.kind:
            raise UnitKindError(self.kind, self.preferred.kind, "prefer a unit across")

    @classmethod
    def of(cls, value: float, unit: str | Unit) -> Quantity:
        resolved = Unit.parse(unit)
        return cls(kind=resolved.kind, canonical=resolved.to_canonical(float(value)), preferred=resolved)

    @classmethod
    def of_canonical(cls, value: float, kind: Kind) -> Quantity:
        return cls(kind=kind, canonical=float(value))

    @classmethod
    def megalitres(cls, value: float) -> Quantity:
        """Volume quantity from a megalitre amount, displayed with the best-fit unit."""
        return cls.of_canonical(Unit.MEGALITRE.to_canonical(value), Kind.VOLUME)

    def as_unit(self, unit: str | Unit) -> float:
        resolved = Unit.parse(unit)
        if resolved.kind is not self.kind:
            raise UnitKindError(self.kind, resolved.kind, "convert")
        return resolved.from_canonical(self.canonical)

    def to(self, unit: str | Unit) -> Quantity:
        resolved = Unit.parse(unit)
        if resolved.kind is not self.kind:
            raise UnitKindError(self.kind, resolved.kind, "convert")
        return Quantity(kind=self.kind, canonical=self.canonical, preferred=resolved)

    def to_pint(self) -> pint.Quantity:
        """This quantity as a pint quantity in its display unit."""
        return ureg.Quantity(self.canonical, self.kind.pint_unit).to(self.display_unit().pint_unit)

    @classmethod
    def from_pint(cls, value: pint.Quantity) -> Quantity:
        for kind in Kind:
            if value.is_compatible_with(kind.pint_unit):
                return cls(kind=kind, canonical=float(value.to(kind.pint_unit).magnitude))
        raise UnknownUnitError(f"{value.units:~}")

    def _check_kind(self, other: Quantity, operation: str) -> None:
        if not isinstance(other, Quantity):
            raise TypeError(f"Cannot {operation} Quantity and {type(other).__name__}")
        if other.kind is not self.kind:
            raise UnitKindError(self.kind, other.kind, operation)

    def add(self, other: Quantity) -> Quantity:
        self._check_kind(other, "add")
        return Quantity(self.kind, self.canonical + other.canonical, self.preferred)

    def subtract(self, other: Quantity) -> Quantity:
        self._check_kind(other, "subtract")
        return Quantity(self.kind, self.canonical - other.canonical, self.preferred)

    def negate(self) -> Quantity:
        return Quantity(self.kind, -self.canonical, self.preferred)

    def scale(self, factor: float) -> Quantity:
        return Quantity(self.kind, self.canonical * factor, self.preferred)

    __add__ = add
    __sub__ = subtract
    __neg__ = negate

    def __mul__(self, factor: float) -> Quantity:
        if isinstance(factor, Quantity):
            return NotImplemented
        return self.scale(factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Quantity:
        if isinstance(divisor, Quantity):
            return NotImplemented
        return self.scale(1.0 / divisor)

    def display_unit(self) -> Unit:
        return self.preferred if self.preferred is not None else Unit.best_for(self.kind, self.canonical)

    def __str__(self) -> str:
        unit = self.display_unit()
        return format_number(unit.from_canonical(self.canonical)) + unit.label
