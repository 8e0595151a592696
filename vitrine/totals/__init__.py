"""
Totals — cart totals in exact minor units.

    from vitrine import totals as T

    totals = T.compute_totals(lines, per_store_fee=2000, service_fee=340)
    T.format_amount(totals.grand_total)  # "123.40"
"""

from vitrine.totals._types import CartLine, Totals, ZERO_TOTALS
from vitrine.totals._compute import compute_totals, store_count
from vitrine.totals._money import to_cents, format_amount, format_brl

__all__ = (
    "CartLine",
    "Totals",
    "ZERO_TOTALS",
    "compute_totals",
    "store_count",
    "to_cents",
    "format_amount",
    "format_brl",
)
