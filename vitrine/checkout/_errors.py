"""
Checkout errors.

Validation and serviceability problems stay inside CONFIRMING_ADDRESS.
Ledger and configuration errors end in FAILED. NotReady, InFlight and
Cancelled are not failures: they tell the caller what happened instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from vitrine.ledger import LedgerError
from vitrine.pix import ConfigurationProblem
from vitrine.validate import ServiceabilityProblem, ValidationProblem


class NotReadyReason(Enum):
    SIGN_IN_REQUIRED = "sign_in_required"
    EMPTY_CART = "empty_cart"


@dataclass(frozen=True, slots=True)
class NotReady:
    """
    Checkout cannot start yet.

    SIGN_IN_REQUIRED carries where to come back to after signing in.
    """

    reason: NotReadyReason
    next: str | None = None

    code = "not_ready"

    @property
    def message(self) -> str:
        match self.reason:
            case NotReadyReason.SIGN_IN_REQUIRED:
                return "Sign in to check out"
            case NotReadyReason.EMPTY_CART:
                return "Your bag is empty"


@dataclass(frozen=True, slots=True)
class InFlight:
    """A confirm for this session is already running. Nothing was done."""

    session_id: str

    code = "in_flight"

    @property
    def message(self) -> str:
        return "This order is already being placed"


@dataclass(frozen=True, slots=True)
class Cancelled:
    """
    The session was cancelled.

    Note: order_id is set when a ledger call that was already under way
    recorded an order anyway.
    """

    order_id: str | None = None

    code = "cancelled"

    @property
    def message(self) -> str:
        if self.order_id:
            return f"Checkout cancelled after order {self.order_id} was recorded"
        return "Checkout cancelled"


type CheckoutError = (
    ValidationProblem
    | ServiceabilityProblem
    | LedgerError
    | ConfigurationProblem
    | Cancelled
    | InFlight
)


__all__ = (
    "NotReadyReason",
    "NotReady",
    "InFlight",
    "Cancelled",
    "CheckoutError",
)
