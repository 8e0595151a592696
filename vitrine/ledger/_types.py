"""
Ledger types — what is submitted, what comes back, what can go wrong.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto

from vitrine._types import Cents, Customer, DeliveryAddress
from vitrine.totals import CartLine, Totals

PIX = "pix"


class OrderStatus(Enum):
    """Lifecycle of an order as the ledger records it."""

    AWAITING_PAYMENT = "awaiting_payment"
    PAID = "paid"
    CANCELLED = "cancelled"


# ═══════════════════════════════════════════════════════════════════════════════
# Order Draft — handed to the ledger
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Contact:
    """Profile details copied onto the order."""

    name: str | None = None
    phone: str | None = None
    tax_id: str | None = None


@dataclass(frozen=True, slots=True)
class OrderDraft:
    """
    Everything the ledger needs to record one order.

    Note: lines is the cart snapshot taken when checkout proceeded,
    not whatever the cart holds at submit time.
    """

    customer: Customer
    lines: tuple[CartLine, ...]
    totals: Totals
    address: DeliveryAddress
    payment_method: str = PIX
    contact: Contact = Contact()


@dataclass(frozen=True, slots=True)
class LedgerReceipt:
    """Acknowledgement of a recorded order."""

    order_id: str
    status: OrderStatus = OrderStatus.AWAITING_PAYMENT


@dataclass(frozen=True, slots=True)
class Order:
    """An order the ledger has accepted."""

    order_id: str
    customer_id: str
    lines: tuple[CartLine, ...]
    totals: Totals
    address: DeliveryAddress
    payment_method: str
    status: OrderStatus

    @classmethod
    def recorded(cls, draft: OrderDraft, receipt: LedgerReceipt) -> Order:
        return cls(
            order_id=receipt.order_id,
            customer_id=draft.customer.customer_id,
            lines=draft.lines,
            totals=draft.totals,
            address=draft.address,
            payment_method=draft.payment_method,
            status=receipt.status,
        )

    @property
    def amount(self) -> Cents:
        return self.totals.grand_total


@dataclass(frozen=True, slots=True)
class LedgerOrder:
    """Summary row returned by the read path."""

    order_id: str
    status: str
    totals: Totals
    item_count: int = 0
    created_at: datetime | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class LedgerErrorKind(Enum):
    """Kinds of ledger errors."""

    UNAVAILABLE = auto()  # Network / transport failure
    REJECTED = auto()  # Ledger answered with an error
    MALFORMED = auto()  # Answer did not carry an order id
    TIMEOUT = auto()  # No answer in time


@dataclass(frozen=True, slots=True)
class LedgerError:
    """
    The ledger could not record or list orders.

    Note: Never retried by the engine. The customer retries explicitly.
    """

    kind: LedgerErrorKind
    message: str
    status_code: int | None = None

    code = "ledger_error"


__all__ = (
    "PIX",
    "OrderStatus",
    "Contact",
    "OrderDraft",
    "LedgerReceipt",
    "Order",
    "LedgerOrder",
    "LedgerErrorKind",
    "LedgerError",
)
