"""
Totals types — cart lines and derived totals.
"""

from __future__ import annotations

from dataclasses import dataclass

from vitrine._types import Cents


# ═══════════════════════════════════════════════════════════════════════════════
# Cart Line — read-only snapshot of a cart entry
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartLine:
    """
    One entry of the customer's cart.

    Owned by the cart store; the engine only reads snapshots of it.
    """

    item_id: str
    merchant_id: str
    unit_price: Cents
    quantity: int
    size_label: str = ""
    name: str | None = None
    merchant_name: str | None = None

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {self.quantity}")
        if self.unit_price < 0:
            raise ValueError(f"unit_price must be >= 0, got {self.unit_price}")

    @property
    def line_total(self) -> Cents:
        return self.unit_price * self.quantity


# ═══════════════════════════════════════════════════════════════════════════════
# Totals — derived, never persisted
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Totals:
    """Checkout totals in centavos."""

    subtotal: Cents
    delivery_fee: Cents
    service_fee: Cents
    store_count: int = 0

    @property
    def grand_total(self) -> Cents:
        return self.subtotal + self.delivery_fee + self.service_fee


ZERO_TOTALS = Totals(subtotal=0, delivery_fee=0, service_fee=0, store_count=0)


__all__ = ("CartLine", "Totals", "ZERO_TOTALS")
