"""
Wire schemas — pydantic models with to_domain() / from_domain().
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from vitrine._types import DeliveryAddress
from vitrine.checkout import Cancelled, CheckoutSession, InFlight, NotReady
from vitrine.ledger import LedgerError, LedgerOrder
from vitrine.pix import ConfigurationProblem, PaymentCode
from vitrine.profile import PostalLookupError, PostalMatch
from vitrine.totals import CartLine, Totals, format_amount, format_brl
from vitrine.validate import AddressDraft, ServiceabilityProblem, ValidationProblem


# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════


class PostalCodeIn(BaseModel):
    postal_code: str

    def to_domain(self) -> str:
        return self.postal_code


class AddressIn(BaseModel):
    """Partial update: omitted fields keep their value."""

    postal_code: str | None = None
    street: str | None = None
    number: str | None = None
    complement: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    region: str | None = None

    def to_domain(self) -> dict[str, str]:
        return {k: v for k, v in self.model_dump().items() if v is not None}


# ═══════════════════════════════════════════════════════════════════════════════
# Responses
# ═══════════════════════════════════════════════════════════════════════════════


class TotalsOut(BaseModel):
    subtotal: str
    delivery_fee: str
    service_fee: str
    grand_total: str
    grand_total_display: str
    store_count: int

    @classmethod
    def from_domain(cls, totals: Totals) -> TotalsOut:
        return cls(
            subtotal=format_amount(totals.subtotal),
            delivery_fee=format_amount(totals.delivery_fee),
            service_fee=format_amount(totals.service_fee),
            grand_total=format_amount(totals.grand_total),
            grand_total_display=format_brl(totals.grand_total),
            store_count=totals.store_count,
        )


class LineOut(BaseModel):
    item_id: str
    merchant_id: str
    name: str | None
    size_label: str
    quantity: int
    unit_price: str
    line_total: str

    @classmethod
    def from_domain(cls, line: CartLine) -> LineOut:
        return cls(
            item_id=line.item_id,
            merchant_id=line.merchant_id,
            name=line.name,
            size_label=line.size_label,
            quantity=line.quantity,
            unit_price=format_amount(line.unit_price),
            line_total=format_amount(line.line_total),
        )


class DraftOut(BaseModel):
    postal_code: str
    street: str
    number: str
    complement: str
    neighborhood: str
    city: str
    region: str

    @classmethod
    def from_domain(cls, draft: AddressDraft) -> DraftOut:
        return cls(
            postal_code=draft.postal_code,
            street=draft.street,
            number=draft.number,
            complement=draft.complement,
            neighborhood=draft.neighborhood,
            city=draft.city,
            region=draft.region,
        )


class PaymentOut(BaseModel):
    payload: str
    order_id: str
    initiation: str

    @classmethod
    def from_domain(cls, code: PaymentCode) -> PaymentOut:
        return cls(
            payload=code.payload,
            order_id=code.bound_order_id,
            initiation=code.initiation.name.lower(),
        )


class AddressOut(BaseModel):
    postal_code: str
    street_line: str
    district_line: str
    city_line: str

    @classmethod
    def from_domain(cls, address: DeliveryAddress) -> AddressOut:
        return cls(
            postal_code=address.postal_code,
            street_line=address.street_line,
            district_line=address.district_line,
            city_line=address.city_line,
        )


class FailureOut(BaseModel):
    reason: str
    message: str


class SessionOut(BaseModel):
    session_id: str
    stage: str
    lines: list[LineOut]
    totals: TotalsOut
    address: DraftOut
    problems: dict[str, str]
    in_flight: bool
    order_id: str | None
    confirmed_address: AddressOut | None
    payment: PaymentOut | None
    failure: FailureOut | None

    @classmethod
    def from_domain(cls, session: CheckoutSession) -> SessionOut:
        return cls(
            session_id=session.session_id,
            stage=session.stage.value,
            lines=[LineOut.from_domain(line) for line in session.lines],
            totals=TotalsOut.from_domain(session.totals),
            address=DraftOut.from_domain(session.draft),
            problems=dict(session.problems),
            in_flight=session.in_flight,
            order_id=session.order.order_id if session.order else None,
            confirmed_address=AddressOut.from_domain(session.address) if session.address else None,
            payment=PaymentOut.from_domain(session.payment) if session.payment else None,
            failure=(
                FailureOut(reason=session.failure.reason.value, message=session.failure.message)
                if session.failure
                else None
            ),
        )


class PostalMatchOut(BaseModel):
    found: bool
    postal_code: str | None = None
    street: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    region: str | None = None

    @classmethod
    def from_domain(cls, found: PostalMatch | None) -> PostalMatchOut:
        if found is None:
            return cls(found=False)
        return cls(
            found=True,
            postal_code=found.postal_code,
            street=found.street,
            neighborhood=found.neighborhood,
            city=found.city,
            region=found.region,
        )


class PostalLookupOut(BaseModel):
    match: PostalMatchOut
    session: SessionOut


class CancelledOut(BaseModel):
    session_id: str
    cancelled: bool
    order_id: str | None

    @classmethod
    def from_domain(cls, session_id: str, cancelled: Cancelled) -> CancelledOut:
        return cls(session_id=session_id, cancelled=True, order_id=cancelled.order_id)


class OrderOut(BaseModel):
    order_id: str
    status: str
    grand_total: str
    item_count: int
    created_at: datetime | None

    @classmethod
    def from_domain(cls, order: LedgerOrder) -> OrderOut:
        return cls(
            order_id=order.order_id,
            status=order.status,
            grand_total=format_amount(order.totals.grand_total),
            item_count=order.item_count,
            created_at=order.created_at,
        )


class ProblemOut(BaseModel):
    """Body of every non-2xx answer."""

    code: str
    message: str
    problems: dict[str, str] | None = None
    next: str | None = None
    order_id: str | None = None

    @classmethod
    def from_domain(cls, error: Any) -> ProblemOut:
        match error:
            case ValidationProblem(fields=fields):
                return cls(code=error.code, message=error.message, problems=dict(fields))
            case ServiceabilityProblem():
                return cls(code=error.code, message=error.message, problems={error.field: error.message})
            case NotReady(reason=reason, next=next_url):
                return cls(code=reason.value, message=error.message, next=next_url)
            case Cancelled(order_id=order_id):
                return cls(code=error.code, message=error.message, order_id=order_id)
            case LedgerError(kind=kind, message=message):
                return cls(code=f"{error.code}.{kind.name.lower()}", message=message)
            case ConfigurationProblem(setting=setting, message=message):
                return cls(code=error.code, message=message, problems={setting: message})
            case PostalLookupError(kind=kind, message=message):
                return cls(code=f"postal_lookup.{kind.name.lower()}", message=message)
            case InFlight():
                return cls(code=error.code, message=error.message)
            case _:
                return cls(code="error", message=str(error))


__all__ = (
    "PostalCodeIn",
    "AddressIn",
    "TotalsOut",
    "LineOut",
    "DraftOut",
    "PaymentOut",
    "FailureOut",
    "SessionOut",
    "PostalMatchOut",
    "PostalLookupOut",
    "CancelledOut",
    "OrderOut",
    "AddressOut",
    "ProblemOut",
)
