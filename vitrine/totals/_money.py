"""
Money — exact minor-unit arithmetic and formatting.

Amounts travel as integer centavos. Decimal is used only at the edges:
parsing configuration/user input and rendering two-decimal strings.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from vitrine._types import Cents

_CENT = Decimal("0.01")


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing
# ═══════════════════════════════════════════════════════════════════════════════


def to_cents(value: str | int | Decimal) -> Cents:
    """
    Convert a major-unit amount to centavos.

    Example:
        to_cents("3.40")         # 340
        to_cents(Decimal("20"))  # 2000
        to_cents(50)             # 5000

    Floats are rejected: binary floating point cannot represent most
    cent amounts exactly.
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"Refusing to parse {type(value).__name__} as money")

    try:
        amount = Decimal(value.strip() if isinstance(value, str) else value)
    except InvalidOperation as e:
        raise ValueError(f"Not a money amount: {value!r}") from e

    if not amount.is_finite():
        raise ValueError(f"Not a money amount: {value!r}")
    if amount < 0:
        raise ValueError(f"Negative money amount: {value!r}")

    return int((amount.quantize(_CENT, rounding=ROUND_HALF_UP) * 100).to_integral_value())


# ═══════════════════════════════════════════════════════════════════════════════
# Formatting
# ═══════════════════════════════════════════════════════════════════════════════


def format_amount(cents: Cents) -> str:
    """Two decimals, '.' separator, no grouping: 12340 -> '123.40'."""
    if cents < 0:
        raise ValueError(f"Negative money amount: {cents}")
    return f"{cents // 100}.{cents % 100:02d}"


def format_brl(cents: Cents) -> str:
    """Display format: 123456 -> 'R$ 1.234,56'."""
    sign = "-" if cents < 0 else ""
    whole, frac = divmod(abs(cents), 100)
    grouped = f"{whole:,}".replace(",", ".")
    return f"{sign}R$ {grouped},{frac:02d}"


__all__ = ("to_cents", "format_amount", "format_brl")
