from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ..core.constants import MONEY_PLACES

_QUANT = Decimal(1).scaleb(-MONEY_PLACES)


def round_money(value: float) -> float:
    """Round half-up to two places.

    Goes through ``repr`` so 2.675 rounds to 2.68 rather than the binary 2.67.
    """
    return float(Decimal(repr(float(value))).quantize(_QUANT, rounding=ROUND_HALF_UP))


def format_money(value: float) -> str:
    return f"{round_money(value):.{MONEY_PLACES}f}"
