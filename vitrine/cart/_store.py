"""
Cart store — keyed collection of cart lines per customer.

The engine only reads snapshots and clears the cart once checkout is READY.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Protocol

from vitrine.totals import CartLine


# ═══════════════════════════════════════════════════════════════════════════════
# Cart Store Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class CartStore(Protocol):
    """
    What checkout needs from the cart.

    Implement this over whatever holds the cart (session storage, Redis, ...).
    """

    async def lines(self, customer_id: str) -> list[CartLine]:
        """Current lines, in insertion order."""
        ...

    async def clear(self, customer_id: str) -> None:
        """Empty the cart."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Cart — for tests and examples
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryCart:
    """
    In-memory cart keyed by customer, then by item id.

    Note: Adding an item already in the cart bumps its quantity.
    """

    def __init__(self) -> None:
        self._carts: dict[str, dict[str, CartLine]] = {}
        self._lock = asyncio.Lock()
        self.clear_calls = 0

    async def lines(self, customer_id: str) -> list[CartLine]:
        async with self._lock:
            return list(self._carts.get(customer_id, {}).values())

    async def add(self, customer_id: str, line: CartLine) -> None:
        async with self._lock:
            cart = self._carts.setdefault(customer_id, {})
            existing = cart.get(line.item_id)
            if existing is not None:
                line = replace(existing, quantity=existing.quantity + line.quantity)
            cart[line.item_id] = line

    async def update_quantity(self, customer_id: str, item_id: str, quantity: int) -> bool:
        """Set quantity (clamped to 1). Returns False if the item is not in the cart."""
        async with self._lock:
            cart = self._carts.get(customer_id, {})
            existing = cart.get(item_id)
            if existing is None:
                return False
            cart[item_id] = replace(existing, quantity=max(1, quantity))
            return True

    async def remove(self, customer_id: str, item_id: str) -> bool:
        async with self._lock:
            return self._carts.get(customer_id, {}).pop(item_id, None) is not None

    async def clear(self, customer_id: str) -> None:
        async with self._lock:
            self.clear_calls += 1
            self._carts.pop(customer_id, None)


__all__ = ("CartStore", "MemoryCart")
