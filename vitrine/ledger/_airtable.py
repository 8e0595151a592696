"""
Airtable ledger — orders kept in an Airtable table over its REST API.

Column layout (what the storefront's order pages read):

    User ID, User Email, User Name, Whatsapp, CPF,
    Street       "Rua Augusta, 1200"
    Address      "Apto 12, Consolação"
    City         "São Paulo, SP - 01310100"
    Items        JSON list of cart lines
    Subtotal, Delivery, Operation Fee, Total
    Status       "Aguardando Pagamento"
    Created At   (computed by Airtable, used for sorting)

Usage:
    async with httpx.AsyncClient(timeout=10) as client:
        ledger = AirtableLedger(api_key, base_id, "Orders", client=client)
        result = await ledger.submit_order(draft)
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx
from combinators import lift as L
from kungfu import Result, Ok, Error

from vitrine._types import Customer
from vitrine.ledger._items import count_items, dump_items
from vitrine.ledger._types import (
    LedgerError,
    LedgerErrorKind,
    LedgerOrder,
    LedgerReceipt,
    OrderDraft,
    OrderStatus,
)
from vitrine.totals import Totals, format_amount, to_cents

API_URL = "https://api.airtable.com/v0"

STATUS_LABELS = {
    OrderStatus.AWAITING_PAYMENT: "Aguardando Pagamento",
    OrderStatus.PAID: "Pago",
    OrderStatus.CANCELLED: "Cancelado",
}


def _unavailable(e: Exception) -> LedgerError:
    return LedgerError(LedgerErrorKind.UNAVAILABLE, f"Airtable unreachable: {e}")


def _rejected(response: httpx.Response) -> LedgerError:
    return LedgerError(
        LedgerErrorKind.REJECTED,
        f"Airtable {response.status_code}: {response.text[:200]}",
        status_code=response.status_code,
    )


def _json(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _cents(value: object) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        return to_cents(str(value))
    except ValueError:
        return 0


# ═══════════════════════════════════════════════════════════════════════════════
# Field mapping
# ═══════════════════════════════════════════════════════════════════════════════


def order_fields(draft: OrderDraft) -> dict[str, Any]:
    """Row written for one order. Amounts are decimal strings; typecast converts them."""
    address = draft.address
    totals = draft.totals
    return {
        "User ID": draft.customer.customer_id,
        "User Email": draft.customer.email,
        "User Name": draft.contact.name or draft.customer.email,
        "Whatsapp": draft.contact.phone,
        "CPF": draft.contact.tax_id,
        "Street": address.street_line,
        "Address": address.district_line,
        "City": address.city_line,
        "Items": dump_items(draft.lines),
        "Subtotal": format_amount(totals.subtotal),
        "Delivery": format_amount(totals.delivery_fee),
        "Operation Fee": format_amount(totals.service_fee),
        "Total": format_amount(totals.grand_total),
        "Payment Method": draft.payment_method,
        "Status": STATUS_LABELS[OrderStatus.AWAITING_PAYMENT],
    }


def customer_formula(customer: Customer) -> str:
    """filterByFormula matching the customer's rows (e-mail compared lower-cased)."""
    if customer.email:
        email = customer.email.lower().replace("'", "\\'")
        return f"LOWER({{User Email}})='{email}'"
    customer_id = customer.customer_id.replace("'", "\\'")
    return f"{{User ID}}='{customer_id}'"


def ledger_order(record: dict[str, Any]) -> LedgerOrder:
    fields = record.get("fields") or {}
    created = record.get("createdTime")
    return LedgerOrder(
        order_id=str(record.get("id", "")),
        status=str(fields.get("Status", "")),
        totals=Totals(
            subtotal=_cents(fields.get("Subtotal")),
            delivery_fee=_cents(fields.get("Delivery")),
            service_fee=_cents(fields.get("Operation Fee")),
        ),
        item_count=count_items(fields.get("Items")),
        created_at=datetime.fromisoformat(created) if isinstance(created, str) else None,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Airtable Ledger
# ═══════════════════════════════════════════════════════════════════════════════


class AirtableLedger:
    """
    OrderLedger over one Airtable table.

    Note: The record id Airtable assigns ("rec" + 14 alphanumerics) is the
    order id, so it fits the payment reference as-is.
    """

    def __init__(
        self,
        api_key: str,
        base_id: str,
        table: str = "Orders",
        client: httpx.AsyncClient | None = None,
        api_url: str = API_URL,
    ) -> None:
        if not api_key or not base_id:
            raise ValueError("Airtable api_key and base_id are required")
        self._url = f"{api_url.rstrip('/')}/{base_id}/{quote(table, safe='')}"
        self._headers = {"Authorization": f"Bearer {api_key}"}
        self._client = client or httpx.AsyncClient(timeout=10.0)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def submit_order(self, draft: OrderDraft) -> Result[LedgerReceipt, LedgerError]:
        body = {"records": [{"fields": order_fields(draft)}], "typecast": True}
        sent = await L.catching_async(
            lambda: self._client.post(self._url, json=body, headers=self._headers),
            on_error=_unavailable,
        )
        match sent:
            case Ok(response):
                pass
            case Error(e):
                return Error(e)

        if not response.is_success:
            return Error(_rejected(response))

        records = _json(response).get("records") or []
        record_id = records[0].get("id") if records and isinstance(records[0], dict) else None
        if not record_id:
            return Error(LedgerError(
                LedgerErrorKind.MALFORMED,
                "Airtable response carried no record id",
                status_code=response.status_code,
            ))
        return Ok(LedgerReceipt(order_id=str(record_id)))

    async def list_orders(self, customer: Customer) -> Result[list[LedgerOrder], LedgerError]:
        params = {
            "filterByFormula": customer_formula(customer),
            "sort[0][field]": "Created At",
            "sort[0][direction]": "desc",
        }
        sent = await L.catching_async(
            lambda: self._client.get(self._url, params=params, headers=self._headers),
            on_error=_unavailable,
        )
        match sent:
            case Ok(response):
                pass
            case Error(e):
                return Error(e)

        if not response.is_success:
            return Error(_rejected(response))

        records = _json(response).get("records") or []
        return Ok([ledger_order(r) for r in records if isinstance(r, dict)])


__all__ = (
    "API_URL",
    "STATUS_LABELS",
    "order_fields",
    "customer_formula",
    "ledger_order",
    "AirtableLedger",
)
