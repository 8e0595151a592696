"""
Core types for vitrine.

Re-exports from kungfu + the records shared by every package.
"""

from __future__ import annotations

from dataclasses import dataclass

from kungfu import Result, Ok, Error

# ═══════════════════════════════════════════════════════════════════════════════
# Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Cents = int
"""Money as an integer count of minor units (centavos)."""

# ═══════════════════════════════════════════════════════════════════════════════
# Customer — what the auth provider hands us
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Customer:
    """Authenticated customer."""

    customer_id: str
    email: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Delivery Address
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class DeliveryAddress:
    """
    A confirmed delivery address.

    Note: postal_code is digits-only once confirmed.
    """

    postal_code: str
    street: str
    number: str
    neighborhood: str
    city: str
    region: str
    complement: str | None = None

    @property
    def street_line(self) -> str:
        return f"{self.street}, {self.number}"

    @property
    def district_line(self) -> str:
        if self.complement:
            return f"{self.complement}, {self.neighborhood}"
        return self.neighborhood

    @property
    def city_line(self) -> str:
        return f"{self.city}, {self.region} - {self.postal_code}"


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    # Aliases
    "Cents",
    # Records
    "Customer",
    "DeliveryAddress",
)
