"""Exact decimal helpers for monetary amounts."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

ZERO = Decimal("0.00")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Coerce a numeric value to ``Decimal`` without binary float artefacts.

    Floats go through their shortest ``repr`` so ``0.1`` becomes
    ``Decimal("0.1")`` rather than the 55-digit binary expansion.
    """

    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Boolean is not a monetary amount.")
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def sum_amounts(values: Iterable[Decimal | int | float | str]) -> Decimal:
    """Exact sum of amounts; ``ZERO`` for an empty iterable."""

    total = ZERO
    for value in values:
        total += to_decimal(value)
    return total


def exceeds_scale(value: Decimal, scale: int) -> bool:
    """True when ``value`` carries more than ``scale`` fractional digits."""

    exponent = value.normalize().as_tuple().exponent
    return isinstance(exponent, int) and -exponent > scale
