"""
Order ledger — the system of record for orders.

OrderLedger is the protocol the checkout engine talks to.
All methods return Result for explicit error handling.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol, Callable, Awaitable

from kungfu import Result, Ok, Error

from vitrine._types import Customer
from vitrine.ledger._types import (
    LedgerError,
    LedgerOrder,
    LedgerReceipt,
    Order,
    OrderDraft,
)


# ═══════════════════════════════════════════════════════════════════════════════
# Ledger Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class OrderLedger(Protocol):
    """
    Order ledger protocol.

    Example — a thin wrapper over an existing repository:

        class RepoLedger:
            def __init__(self, repo: OrderRepo):
                self.repo = repo

            async def submit_order(self, draft: OrderDraft) -> Result[LedgerReceipt, LedgerError]:
                try:
                    order_id = await self.repo.insert(draft)
                    return Ok(LedgerReceipt(order_id))
                except Exception as e:
                    return Error(LedgerError(LedgerErrorKind.UNAVAILABLE, str(e)))

            # ... list_orders
    """

    async def submit_order(self, draft: OrderDraft) -> Result[LedgerReceipt, LedgerError]:
        """Record one order. Not idempotent: call it once per checkout."""
        ...

    async def list_orders(self, customer: Customer) -> Result[list[LedgerOrder], LedgerError]:
        """Orders placed by the customer, newest first."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Ledger — for tests and examples
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryLedger:
    """
    In-memory ledger.

    Knobs for tests:
        fail_with: every submit returns this error.
        gate: submit waits on it before recording (simulates a slow ledger).
        entered: set as soon as a submit starts waiting on the gate.

    Example:
        ledger = MemoryLedger()
        ledger.gate = asyncio.Event()      # hang until ledger.gate.set()
    """

    def __init__(self, fail_with: LedgerError | None = None) -> None:
        self.fail_with = fail_with
        self.gate: asyncio.Event | None = None
        self.entered = asyncio.Event()
        self.submit_calls = 0
        self.orders: dict[str, Order] = {}
        self._sequence = 0

    async def submit_order(self, draft: OrderDraft) -> Result[LedgerReceipt, LedgerError]:
        self.submit_calls += 1
        self.entered.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            return Error(self.fail_with)

        self._sequence += 1
        receipt = LedgerReceipt(order_id=f"ORD{self._sequence:06d}")
        self.orders[receipt.order_id] = Order.recorded(draft, receipt)
        return Ok(receipt)

    async def list_orders(self, customer: Customer) -> Result[list[LedgerOrder], LedgerError]:
        if self.fail_with is not None:
            return Error(self.fail_with)
        mine = [o for o in self.orders.values() if o.customer_id == customer.customer_id]
        return Ok([
            LedgerOrder(
                order_id=o.order_id,
                status=o.status.value,
                totals=o.totals,
                item_count=sum(line.quantity for line in o.lines),
            )
            for o in reversed(mine)
        ])


# ═══════════════════════════════════════════════════════════════════════════════
# Function-based Ledger Builder
# ═══════════════════════════════════════════════════════════════════════════════

type SubmitFn = Callable[[OrderDraft], Awaitable[Result[LedgerReceipt, LedgerError]]]
type ListFn = Callable[[Customer], Awaitable[Result[list[LedgerOrder], LedgerError]]]


async def _no_orders(customer: Customer) -> Result[list[LedgerOrder], LedgerError]:
    return Ok([])


@dataclass(frozen=True)
class FunctionalLedger:
    """
    Ledger built from functions.

    Example:
        ledger = ledger_from(
            submit=orders_api.create,
            list_orders=orders_api.by_customer,
        )
    """

    _submit: SubmitFn
    _list: ListFn

    async def submit_order(self, draft: OrderDraft) -> Result[LedgerReceipt, LedgerError]:
        return await self._submit(draft)

    async def list_orders(self, customer: Customer) -> Result[list[LedgerOrder], LedgerError]:
        return await self._list(customer)


def ledger_from(
    submit: SubmitFn,
    list_orders: ListFn | None = None,
) -> FunctionalLedger:
    """Create an OrderLedger from functions. Without list_orders the read path is empty."""
    return FunctionalLedger(_submit=submit, _list=list_orders or _no_orders)


__all__ = (
    "OrderLedger",
    "MemoryLedger",
    "SubmitFn",
    "ListFn",
    "FunctionalLedger",
    "ledger_from",
)
