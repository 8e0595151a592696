"""
Totals calculator.
"""

from __future__ import annotations

from collections.abc import Iterable

from vitrine._types import Cents
from vitrine.totals._types import CartLine, Totals, ZERO_TOTALS


def store_count(lines: Iterable[CartLine]) -> int:
    """Number of distinct merchants in the cart."""
    return len({line.merchant_id for line in lines})


def compute_totals(
    lines: Iterable[CartLine],
    per_store_fee: Cents,
    service_fee: Cents,
) -> Totals:
    """
    Compute checkout totals.

    Delivery is charged once per distinct merchant, not per line.
    An empty cart costs nothing: no delivery, no service fee.

    Example:
        lines = [
            CartLine("a", "store-1", unit_price=5000, quantity=1),
            CartLine("b", "store-2", unit_price=3000, quantity=1),
        ]
        totals = compute_totals(lines, per_store_fee=2000, service_fee=340)
        totals.grand_total  # 12340
    """
    if per_store_fee < 0 or service_fee < 0:
        raise ValueError("fees must be non-negative")

    snapshot = tuple(lines)
    if not snapshot:
        return ZERO_TOTALS

    stores = store_count(snapshot)
    return Totals(
        subtotal=sum(line.line_total for line in snapshot),
        delivery_fee=per_store_fee * stores,
        service_fee=service_fee,
        store_count=stores,
    )


__all__ = ("compute_totals", "store_count")
