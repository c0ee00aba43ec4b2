from __future__ import annotations

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal, localcontext

from dirsize.models.enums import Rounding, UnitBase

_QUANTUM = Decimal("0.001")
# size / 1024**8 terminates within 80 fractional digits, so this much extra
# precision keeps the quotient exact and rounding happens only once.
_EXACT_DIGITS = 81

_ROUNDING_MODES: dict[Rounding, str] = {
    Rounding.HALF_EVEN: ROUND_HALF_EVEN,
    Rounding.HALF_UP: ROUND_HALF_UP,
}


def unit_for(size: int, base: UnitBase = UnitBase.BINARY) -> tuple[int, str]:
    """Return ``(divisor, suffix)`` for the largest unit whose threshold *size* reaches."""
    units = base.units
    divisor = 1
    exponent = 0
    while exponent + 1 < len(units) and size >= divisor * base.multiplier:
        divisor *= base.multiplier
        exponent += 1
    return divisor, units[exponent]


def format_bytes(
    size: int,
    base: UnitBase = UnitBase.BINARY,
    rounding: Rounding = Rounding.HALF_EVEN,
) -> str:
    """Render *size* with exactly three decimals, e.g. ``1.500 KiB``.

    The unit is chosen on the exact integer before rounding, so a value just
    below a boundary stays in the smaller unit (``1048575`` is ``1023.999 KiB``).
    """
    divisor, suffix = unit_for(size, base)
    with localcontext() as ctx:
        ctx.prec = len(str(size)) + _EXACT_DIGITS
        scaled = (Decimal(size) / Decimal(divisor)).quantize(_QUANTUM, rounding=_ROUNDING_MODES[rounding])
    return f"{scaled} {suffix}"
