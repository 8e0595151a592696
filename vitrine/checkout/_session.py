"""
Checkout session — the mutable state of one checkout attempt.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from vitrine._types import Customer, DeliveryAddress
from vitrine.checkout._state import (
    TERMINAL,
    Failure,
    IllegalTransition,
    Stage,
    can_move,
)
from vitrine.ledger import Order
from vitrine.pix import PaymentCode
from vitrine.profile import Profile
from vitrine.totals import ZERO_TOTALS, CartLine, Totals
from vitrine.validate import AddressDraft


def new_session_id() -> str:
    return uuid.uuid4().hex


@dataclass(slots=True)
class CheckoutSession:
    """
    One customer, one attempt.

    Note: lines is the cart snapshot taken on proceed. Later cart edits do
    not reach an attempt already under way.
    """

    customer: Customer | None
    session_id: str = field(default_factory=new_session_id)
    stage: Stage = Stage.REVIEWING
    lines: tuple[CartLine, ...] = ()
    totals: Totals = ZERO_TOTALS
    draft: AddressDraft = field(default_factory=AddressDraft)
    profile: Profile | None = None
    problems: dict[str, str] = field(default_factory=dict)
    in_flight: bool = False
    address: DeliveryAddress | None = None
    order: Order | None = None
    payment: PaymentCode | None = None
    failure: Failure | None = None

    @property
    def customer_id(self) -> str | None:
        return self.customer.customer_id if self.customer else None

    @property
    def is_terminal(self) -> bool:
        return self.stage in TERMINAL

    def move(self, target: Stage) -> None:
        """Change stage; raises IllegalTransition on a move the table forbids."""
        if not can_move(self.stage, target):
            raise IllegalTransition(self.stage, target)
        self.stage = target


__all__ = ("new_session_id", "CheckoutSession")
