"""
Validation types — address draft and problem records.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from types import MappingProxyType

from vitrine._types import DeliveryAddress


# ═══════════════════════════════════════════════════════════════════════════════
# Address Draft — the customer's working copy
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class AddressDraft:
    """
    Mutable address being edited during checkout.

    Note: Every field is free text until verify_address() accepts it.
    """

    postal_code: str = ""
    street: str = ""
    number: str = ""
    complement: str = ""
    neighborhood: str = ""
    city: str = ""
    region: str = ""

    @classmethod
    def from_address(cls, address: DeliveryAddress | None) -> AddressDraft:
        if address is None:
            return cls()
        return cls(
            postal_code=address.postal_code,
            street=address.street,
            number=address.number,
            complement=address.complement or "",
            neighborhood=address.neighborhood,
            city=address.city,
            region=address.region,
        )

    def update(self, **changes: str | None) -> None:
        """Set the given fields; None leaves a field untouched."""
        known = {f.name for f in fields(self)}
        for name, value in changes.items():
            if name not in known:
                raise ValueError(f"Unknown address field: {name}")
            if value is not None:
                setattr(self, name, value)

    def snapshot(self) -> AddressDraft:
        return replace(self)


# ═══════════════════════════════════════════════════════════════════════════════
# Problems
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ValidationProblem:
    """
    Field-scoped validation failure.

    Local and always recoverable by editing the named fields.
    """

    fields: Mapping[str, str]

    code = "validation_error"

    @classmethod
    def of(cls, **problems: str) -> ValidationProblem:
        return cls(MappingProxyType(dict(problems)))

    @property
    def field(self) -> str:
        """First offending field."""
        return next(iter(self.fields), "")

    @property
    def message(self) -> str:
        return "; ".join(self.fields.values())


@dataclass(frozen=True, slots=True)
class ServiceabilityProblem:
    """Well-formed address outside the delivery area."""

    city: str
    region: str
    served: tuple[str, ...]

    code = "serviceability_error"

    @property
    def field(self) -> str:
        return "city"

    @property
    def message(self) -> str:
        where = f"{self.city}/{self.region.upper()}" if self.region else self.city
        return (
            f"We don't deliver to {where} yet. "
            f"Deliveries currently go to: {', '.join(self.served)}."
        )


type AddressProblem = ValidationProblem | ServiceabilityProblem


__all__ = (
    "AddressDraft",
    "ValidationProblem",
    "ServiceabilityProblem",
    "AddressProblem",
)
