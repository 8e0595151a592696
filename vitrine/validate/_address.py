"""
Address verification graph — ALL checks as nodnod nodes.

Architecture:
    AddressCheck (injected)
         │
         ▼
    DraftNode
         │
         ▼
    FieldProblemsNode
         │
         ├──────────────────────────┐
         ▼                          ▼
    WellFormedNode             MalformedNode
         │                          │
         ├── ServiceableNode ───────┤
         └── UnserviceableNode ─────┤
                                    ▼
                      AddressVerdict (@polymorphic)
                                    │
                                    ▼
                               VerdictNode

Note: No 'from __future__ import annotations' here: nodnod reads the
__compose__ type hints at runtime to resolve dependencies.
"""

from dataclasses import dataclass
from typing import Any, cast
from collections.abc import Callable, Coroutine

from kungfu import Result, Ok, Error
from nodnod import EventLoopAgent, NodeError, Scope, Value, case, polymorphic
from nodnod import scalar_node as node

from vitrine._types import DeliveryAddress
from vitrine.validate._digits import is_valid_postal_code, normalize_digits
from vitrine.validate._region import ServiceArea
from vitrine.validate._types import (
    AddressDraft,
    AddressProblem,
    ServiceabilityProblem,
    ValidationProblem,
)

REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("street", "Street is required"),
    ("number", "Number is required"),
    ("neighborhood", "Neighborhood is required"),
    ("city", "City is required"),
    ("region", "State is required"),
)


# ═══════════════════════════════════════════════════════════════════════════════
# Input — injected into the scope
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AddressCheck:
    """Everything the graph needs: a draft snapshot and the delivery area."""

    draft: AddressDraft
    area: ServiceArea


@node
class DraftNode:
    """Entry point: wraps the AddressCheck input."""

    def __init__(self, check: AddressCheck) -> None:
        self.draft = check.draft
        self.area = check.area

    @classmethod
    def __compose__(cls, check: AddressCheck) -> "DraftNode":
        return cls(check)


# ═══════════════════════════════════════════════════════════════════════════════
# Shape checks
# ═══════════════════════════════════════════════════════════════════════════════


@node
class FieldProblemsNode:
    """Collects every field-level problem. Always composes."""

    def __init__(self, problems: dict[str, str]) -> None:
        self.problems = problems

    @classmethod
    def __compose__(cls, draft: DraftNode) -> "FieldProblemsNode":
        d = draft.draft
        problems: dict[str, str] = {}
        if not is_valid_postal_code(d.postal_code):
            problems["postal_code"] = "Postal code must have 8 digits"
        for name, message in REQUIRED_FIELDS:
            if not getattr(d, name).strip():
                problems[name] = message
        return cls(problems)


@node
class MalformedNode:
    """Validates: at least one field problem."""

    def __init__(self, problem: ValidationProblem) -> None:
        self.problem = problem

    @classmethod
    def __compose__(cls, problems: FieldProblemsNode) -> "MalformedNode":
        if not problems.problems:
            raise NodeError("Well formed")
        return cls(ValidationProblem.of(**problems.problems))


@node
class WellFormedNode:
    """Validates: no field problems. Produces the normalised address."""

    def __init__(self, address: DeliveryAddress, area: ServiceArea) -> None:
        self.address = address
        self.area = area

    @classmethod
    def __compose__(
        cls, draft: DraftNode, problems: FieldProblemsNode
    ) -> "WellFormedNode":
        if problems.problems:
            raise NodeError("Field problems")
        d = draft.draft
        address = DeliveryAddress(
            postal_code=normalize_digits(d.postal_code),
            street=d.street.strip(),
            number=d.number.strip(),
            neighborhood=d.neighborhood.strip(),
            city=d.city.strip(),
            region=d.region.strip().upper(),
            complement=d.complement.strip() or None,
        )
        return cls(address, draft.area)


# ═══════════════════════════════════════════════════════════════════════════════
# Coverage checks
# ═══════════════════════════════════════════════════════════════════════════════


@node
class ServiceableNode:
    """Validates: address inside the service area."""

    def __init__(self, address: DeliveryAddress) -> None:
        self.address = address

    @classmethod
    def __compose__(cls, formed: WellFormedNode) -> "ServiceableNode":
        address = formed.address
        if not formed.area.covers(address.city, address.region):
            raise NodeError("Not served")
        return cls(address)


@node
class UnserviceableNode:
    """Validates: address outside the service area."""

    def __init__(self, problem: ServiceabilityProblem) -> None:
        self.problem = problem

    @classmethod
    def __compose__(cls, formed: WellFormedNode) -> "UnserviceableNode":
        address = formed.address
        if formed.area.covers(address.city, address.region):
            raise NodeError("Served")
        return cls(
            ServiceabilityProblem(
                city=address.city,
                region=address.region,
                served=formed.area.labels,
            )
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Polymorphic Verdict
# ═══════════════════════════════════════════════════════════════════════════════

type AddressOutcome = DeliveryAddress | ValidationProblem | ServiceabilityProblem


@polymorphic[AddressOutcome]
class AddressVerdict:
    """Exactly one case composes: the state nodes are mutually exclusive."""

    @case
    def malformed(cls, node: MalformedNode) -> AddressOutcome:
        return node.problem

    @case
    def unserviceable(cls, node: UnserviceableNode) -> AddressOutcome:
        return node.problem

    @case
    def accepted(cls, node: ServiceableNode) -> AddressOutcome:
        return node.address


@node
class VerdictNode:
    """Converts the outcome into a typed Result."""

    def __init__(self, outcome: AddressOutcome) -> None:
        self.outcome = outcome

    @classmethod
    def __compose__(cls, verdict: AddressVerdict) -> "VerdictNode":
        return cls(verdict.value)

    def to_result(self) -> Result[DeliveryAddress, AddressProblem]:
        match self.outcome:
            case DeliveryAddress() as address:
                return Ok(address)
            case problem:
                return Error(problem)


# ═══════════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════════

_agent = EventLoopAgent.build({cast(Any, VerdictNode)})


async def verify_address(
    draft: AddressDraft,
    area: ServiceArea,
) -> Result[DeliveryAddress, AddressProblem]:
    """
    Check a draft address for shape, then for serviceability.

    Example:
        result = await verify_address(draft, ServiceArea.of(("São Paulo", "SP")))
        match result:
            case Ok(address):
                ...
            case Error(ValidationProblem() as problem):
                problem.fields  # {"postal_code": "..."}
            case Error(ServiceabilityProblem() as problem):
                problem.message
    """
    check = AddressCheck(draft=draft.snapshot(), area=area)

    scope = Scope(detail="verify_address")
    async with scope:
        scope.push(Value(AddressCheck, check))
        run_method = cast(
            Callable[[Scope, dict[type[Any], Scope]], Coroutine[Any, Any, None]],
            getattr(_agent, "run"),
        )
        await run_method(scope, {})

        verdict = scope.get(VerdictNode)
        if verdict is None:
            raise RuntimeError("Address graph produced no verdict")
        return cast(VerdictNode, verdict.value).to_result()


__all__ = (
    "REQUIRED_FIELDS",
    "AddressCheck",
    "DraftNode",
    "FieldProblemsNode",
    "MalformedNode",
    "WellFormedNode",
    "ServiceableNode",
    "UnserviceableNode",
    "AddressOutcome",
    "AddressVerdict",
    "VerdictNode",
    "verify_address",
)
