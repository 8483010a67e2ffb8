"""Exact rational helpers for amounts and values.

Every amount (commodity units) and value (transaction currency) in the ledger
is a :class:`fractions.Fraction`.  Fractions are always reduced, never
rounded, so sums such as ``a + b == total`` hold exactly.  Rounding only
happens when a number is shown to a person, via :func:`quantize`.
"""

from decimal import ROUND_HALF_EVEN, Decimal
from fractions import Fraction


def to_fraction(x) -> Fraction:
    """Coerce *x* to an exact :class:`Fraction`.

    Accepts ints, Fractions, Decimals and strings such as ``"12.50"`` or
    ``"3/4"``.  Floats are converted through their shortest ``repr`` so that
    ``0.1`` becomes ``1/10`` rather than the nearest binary fraction.

    Raises:
        TypeError: If *x* is ``None`` or a type that has no exact meaning.
        ValueError: If a string cannot be parsed.
    """
    if isinstance(x, Fraction):
        return x
    if isinstance(x, bool) or x is None:
        raise TypeError(f"Cannot convert {x!r} to an exact amount")
    if isinstance(x, (int, Decimal)):
        return Fraction(x)
    if isinstance(x, float):
        return Fraction(repr(x))
    if isinstance(x, str):
        return Fraction(x.strip().replace(",", ""))
    raise TypeError(f"Cannot convert {type(x).__name__} to an exact amount")


def sign(x) -> int:
    """Return -1, 0 or 1 according to the sign of *x*."""
    if x > 0:
        return 1
    if x < 0:
        return -1
    return 0


def quantize(x, places: int = 2) -> Decimal:
    """Round *x* to *places* decimal places (banker's rounding) for display."""
    x = to_fraction(x)
    exact = Decimal(x.numerator) / Decimal(x.denominator)
    return exact.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_EVEN)
