"""
Ledger — where orders are recorded.

    from vitrine import ledger as LG

    ledger = LG.MemoryLedger()
    ledger = LG.SQLAlchemyLedger(session_factory)
    ledger = LG.AirtableLedger(api_key, base_id, "Orders")
    ledger = LG.ledger_from(submit=create_order)

    match await ledger.submit_order(draft):
        case Ok(receipt):
            receipt.order_id
        case Error(LG.LedgerError(kind=LG.LedgerErrorKind.UNAVAILABLE)):
            ...
"""

from vitrine.ledger._types import (
    PIX,
    OrderStatus,
    Contact,
    OrderDraft,
    LedgerReceipt,
    Order,
    LedgerOrder,
    LedgerErrorKind,
    LedgerError,
)
from vitrine.ledger._client import (
    OrderLedger,
    MemoryLedger,
    FunctionalLedger,
    ledger_from,
)
from vitrine.ledger._items import dump_items, count_items
from vitrine.ledger._sqlalchemy import SQLAlchemyLedger, new_order_id
from vitrine.ledger._airtable import (
    AirtableLedger,
    order_fields,
    customer_formula,
)

__all__ = (
    # Types
    "PIX",
    "OrderStatus",
    "Contact",
    "OrderDraft",
    "LedgerReceipt",
    "Order",
    "LedgerOrder",
    "LedgerErrorKind",
    "LedgerError",
    # Protocol + implementations
    "OrderLedger",
    "MemoryLedger",
    "FunctionalLedger",
    "ledger_from",
    "SQLAlchemyLedger",
    "new_order_id",
    "AirtableLedger",
    # Helpers
    "dump_items",
    "count_items",
    "order_fields",
    "customer_formula",
)
