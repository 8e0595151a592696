"""
Checkout stages and the legal moves between them.

    REVIEWING ──► CONFIRMING_ADDRESS ──► SUBMITTING_ORDER ──► ISSUING_PAYMENT ──► READY
                        ▲                       │                    │
                        │                       ▼                    ▼
                        └──── revise ──────── FAILED ◄───────────────┘
                                                │
                                                └── reissue ──► ISSUING_PAYMENT

    Any non-terminal stage ──► CANCELLED
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Stage(Enum):
    REVIEWING = "reviewing"
    CONFIRMING_ADDRESS = "confirming_address"
    SUBMITTING_ORDER = "submitting_order"
    ISSUING_PAYMENT = "issuing_payment"
    READY = "ready"
    FAILED = "failed"
    CANCELLED = "cancelled"


class FailureReason(Enum):
    LEDGER_ERROR = "ledger_error"
    TIMEOUT = "timeout"
    CONFIGURATION_ERROR = "configuration_error"


@dataclass(frozen=True, slots=True)
class Failure:
    """Why a session is FAILED."""

    reason: FailureReason
    message: str


TERMINAL = frozenset({Stage.READY, Stage.CANCELLED})

TRANSITIONS: dict[Stage, frozenset[Stage]] = {
    Stage.REVIEWING: frozenset({Stage.CONFIRMING_ADDRESS, Stage.CANCELLED}),
    Stage.CONFIRMING_ADDRESS: frozenset({Stage.SUBMITTING_ORDER, Stage.CANCELLED}),
    Stage.SUBMITTING_ORDER: frozenset({Stage.ISSUING_PAYMENT, Stage.FAILED, Stage.CANCELLED}),
    Stage.ISSUING_PAYMENT: frozenset({Stage.READY, Stage.FAILED, Stage.CANCELLED}),
    Stage.FAILED: frozenset({Stage.CONFIRMING_ADDRESS, Stage.ISSUING_PAYMENT, Stage.CANCELLED}),
    Stage.READY: frozenset(),
    Stage.CANCELLED: frozenset(),
}


class IllegalTransition(ValueError):
    """An operation was called in a stage that does not allow it."""

    def __init__(self, current: Stage, wanted: Stage | str) -> None:
        self.current = current
        self.wanted = wanted
        target = wanted.value if isinstance(wanted, Stage) else wanted
        super().__init__(f"Cannot go to {target} from {current.value}")


def can_move(current: Stage, target: Stage) -> bool:
    return target in TRANSITIONS[current]


__all__ = (
    "Stage",
    "FailureReason",
    "Failure",
    "TERMINAL",
    "TRANSITIONS",
    "IllegalTransition",
    "can_move",
)
