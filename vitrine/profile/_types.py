"""
Profile types — stored customer details and postal-code matches.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from vitrine._types import DeliveryAddress
from vitrine.ledger import Contact


@dataclass(frozen=True, slots=True)
class Profile:
    """
    What the profile store keeps about a customer.

    Note: address is written back on every confirmed checkout.
    """

    customer_id: str
    name: str | None = None
    phone: str | None = None
    tax_id: str | None = None
    address: DeliveryAddress | None = None

    @property
    def contact(self) -> Contact:
        return Contact(name=self.name, phone=self.phone, tax_id=self.tax_id)


@dataclass(frozen=True, slots=True)
class ProfileError:
    """Profile store operation error."""

    message: str
    cause: Exception | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Postal lookup
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PostalMatch:
    """Address parts a postal code resolves to. Any part may be blank."""

    postal_code: str
    street: str = ""
    neighborhood: str = ""
    city: str = ""
    region: str = ""


class PostalLookupErrorKind(Enum):
    UNAVAILABLE = auto()
    MALFORMED = auto()


@dataclass(frozen=True, slots=True)
class PostalLookupError:
    """Postal lookup failed. Never blocks checkout: the customer types the address."""

    kind: PostalLookupErrorKind
    message: str


__all__ = (
    "Profile",
    "ProfileError",
    "PostalMatch",
    "PostalLookupErrorKind",
    "PostalLookupError",
)
