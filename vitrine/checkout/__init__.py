"""
Checkout — the state machine from bag review to payment code.

    from vitrine import checkout as CK

    engine = CK.Checkout(cart, profiles, ledger, config, lookup=lookup)

    session = await engine.open(customer)
    match await engine.proceed(session):
        case Error(CK.NotReady(reason=CK.NotReadyReason.SIGN_IN_REQUIRED, next=next_url)):
            ...
    result = await engine.confirm(session)
"""

from vitrine.checkout._state import (
    Stage,
    FailureReason,
    Failure,
    TERMINAL,
    TRANSITIONS,
    IllegalTransition,
    can_move,
)
from vitrine.checkout._errors import (
    NotReadyReason,
    NotReady,
    InFlight,
    Cancelled,
    CheckoutError,
)
from vitrine.checkout._config import DEFAULT_LEDGER_TIMEOUT, CheckoutConfig
from vitrine.checkout._session import CheckoutSession, new_session_id
from vitrine.checkout._orchestrator import (
    SIGN_IN_NEXT,
    Checkout,
    contact_problems,
    problem_fields,
)

__all__ = (
    # State machine
    "Stage",
    "FailureReason",
    "Failure",
    "TERMINAL",
    "TRANSITIONS",
    "IllegalTransition",
    "can_move",
    # Errors
    "NotReadyReason",
    "NotReady",
    "InFlight",
    "Cancelled",
    "CheckoutError",
    # Config
    "DEFAULT_LEDGER_TIMEOUT",
    "CheckoutConfig",
    # Session
    "CheckoutSession",
    "new_session_id",
    # Engine
    "SIGN_IN_NEXT",
    "Checkout",
    "contact_problems",
    "problem_fields",
)
