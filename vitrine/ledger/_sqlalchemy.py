"""
SQLAlchemy ledger — orders recorded in the local database.

Usage:
    session_factory, engine = await create_database("sqlite+aiosqlite:///shop.db")
    ledger = SQLAlchemyLedger(session_factory)

    match await ledger.submit_order(draft):
        case Ok(receipt):
            receipt.order_id   # "ORD3F9A1C0B2D4E6F80"
        case Error(e):
            e.kind             # LedgerErrorKind.UNAVAILABLE
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kungfu import Result, Ok, Error

from vitrine._types import Customer
from vitrine.db import OrderTable
from vitrine.ledger._items import count_items, dump_items
from vitrine.ledger._types import (
    LedgerError,
    LedgerErrorKind,
    LedgerOrder,
    LedgerReceipt,
    OrderDraft,
)
from vitrine.totals import Totals


def new_order_id() -> str:
    """Alphanumeric, fits the 25-char payment reference."""
    return "ORD" + uuid.uuid4().hex[:16].upper()


class SQLAlchemyLedger:
    """OrderLedger over the orders table."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        new_id: Callable[[], str] = new_order_id,
    ) -> None:
        self._session_factory = session_factory
        self._new_id = new_id

    def _to_row(self, order_id: str, draft: OrderDraft) -> OrderTable:
        address = draft.address
        totals = draft.totals
        return OrderTable(
            id=order_id,
            customer_id=draft.customer.customer_id,
            customer_email=(draft.customer.email or "").lower() or None,
            contact_name=draft.contact.name,
            contact_phone=draft.contact.phone,
            contact_tax_id=draft.contact.tax_id,
            postal_code=address.postal_code,
            street=address.street,
            number=address.number,
            complement=address.complement,
            neighborhood=address.neighborhood,
            city=address.city,
            region=address.region,
            items=dump_items(draft.lines),
            subtotal_cents=totals.subtotal,
            delivery_cents=totals.delivery_fee,
            service_cents=totals.service_fee,
            total_cents=totals.grand_total,
            store_count=totals.store_count,
            payment_method=draft.payment_method,
            status="awaiting_payment",
            created_at=datetime.now(),
        )

    async def submit_order(self, draft: OrderDraft) -> Result[LedgerReceipt, LedgerError]:
        """Insert one order row."""
        order_id = self._new_id()
        try:
            async with self._session_factory() as session:
                session.add(self._to_row(order_id, draft))
                await session.commit()
        except Exception as e:
            return Error(LedgerError(LedgerErrorKind.UNAVAILABLE, f"Failed to record order: {e}"))
        return Ok(LedgerReceipt(order_id=order_id))

    async def list_orders(self, customer: Customer) -> Result[list[LedgerOrder], LedgerError]:
        """Orders of the customer, newest first."""
        try:
            async with self._session_factory() as session:
                stmt = (
                    select(OrderTable)
                    .where(OrderTable.customer_id == customer.customer_id)
                    .order_by(OrderTable.created_at.desc())
                )
                rows = (await session.execute(stmt)).scalars().all()
        except Exception as e:
            return Error(LedgerError(LedgerErrorKind.UNAVAILABLE, f"Failed to list orders: {e}"))

        return Ok([
            LedgerOrder(
                order_id=row.id,
                status=row.status,
                totals=Totals(
                    subtotal=row.subtotal_cents,
                    delivery_fee=row.delivery_cents,
                    service_fee=row.service_cents,
                    store_count=row.store_count,
                ),
                item_count=count_items(row.items),
                created_at=row.created_at,
            )
            for row in rows
        ])


__all__ = ("new_order_id", "SQLAlchemyLedger")
