"""
PIX types — payload fields, configuration, results and errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from vitrine._types import Cents

# ═══════════════════════════════════════════════════════════════════════════════
# Constants
# ═══════════════════════════════════════════════════════════════════════════════

PAYLOAD_FORMAT = "01"
PAYEE_GUI = "br.gov.bcb.pix"
MERCHANT_CATEGORY = "0000"
CURRENCY_BRL = "986"
COUNTRY_BR = "BR"

MAX_NAME = 25
MAX_CITY = 15
MAX_REFERENCE = 25


class Tag:
    """Top-level and nested EMV tags used by the payload."""

    FORMAT = "00"
    INITIATION = "01"
    PAYEE_ACCOUNT = "26"
    CATEGORY = "52"
    CURRENCY = "53"
    AMOUNT = "54"
    COUNTRY = "58"
    MERCHANT_NAME = "59"
    MERCHANT_CITY = "60"
    ADDITIONAL_DATA = "62"
    CRC = "63"

    # inside 26
    PAYEE_GUI = "00"
    PAYEE_KEY = "01"

    # inside 62
    REFERENCE = "05"


# ═══════════════════════════════════════════════════════════════════════════════
# Initiation — static (reusable) vs dynamic (amount-bound)
# ═══════════════════════════════════════════════════════════════════════════════


class Initiation(Enum):
    """
    Point-of-initiation method (tag 01).

    STATIC: reusable code, no amount (tag 54 omitted).
    DYNAMIC: single-use code bound to the order amount.
    """

    STATIC = "11"
    DYNAMIC = "12"

    @classmethod
    def parse(cls, value: str) -> Initiation:
        """Accept 'static'/'dynamic' (any case) or the wire codes."""
        lowered = value.strip().lower()
        for member in cls:
            if lowered in (member.name.lower(), member.value):
                return member
        raise ValueError(f"Unknown initiation method: {value!r}")


# ═══════════════════════════════════════════════════════════════════════════════
# Payment Fields — encoder input
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PaymentFields:
    """
    Structured payload content.

    Note: Truncation (name 25, city 15, reference 25) happens in encode(),
    so the same fields always produce the same payload.
    """

    payee_key: str
    merchant_name: str
    merchant_city: str
    reference: str
    initiation: Initiation = Initiation.STATIC
    amount: Cents | None = None
    currency: str = CURRENCY_BRL
    country: str = COUNTRY_BR
    uppercase_name: bool = False


@dataclass(frozen=True, slots=True)
class DecodedPayload:
    """Fields recovered from a payload string."""

    payload_format: str
    initiation: Initiation
    payee_gui: str
    payee_key: str
    category: str
    currency: str
    amount: Cents | None
    country: str
    merchant_name: str
    merchant_city: str
    reference: str | None
    crc: str
    tags: tuple[tuple[str, str], ...]


# ═══════════════════════════════════════════════════════════════════════════════
# Pix Config — merchant settings the payload is derived from
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PixConfig:
    """
    Merchant payment settings.

    Note: key may be None at startup. Issuance then fails with a
    ConfigurationProblem instead of crashing the process.
    """

    key: str | None
    merchant_name: str
    city: str
    currency: str = CURRENCY_BRL
    initiation: Initiation = Initiation.STATIC
    uppercase_name: bool = False


@dataclass(frozen=True, slots=True)
class PaymentCode:
    """A payload bound to the order it pays for. Recomputable, never stored."""

    payload: str
    bound_order_id: str
    initiation: Initiation


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class PixErrorKind(Enum):
    """Kinds of codec errors."""

    FIELD_TOO_LONG = auto()  # TLV value >= 100 chars
    MISSING_FIELD = auto()  # Required value empty
    MALFORMED = auto()  # Payload does not tokenise
    BAD_CHECKSUM = auto()  # CRC mismatch


@dataclass(frozen=True, slots=True)
class PixError:
    """Codec error."""

    kind: PixErrorKind
    message: str
    tag: str | None = None


@dataclass(frozen=True, slots=True)
class ConfigurationProblem:
    """
    A payment code cannot be derived from the current settings.

    Note: Raised after the order exists. Callers must surface it apart
    from validation and network failures.
    """

    setting: str
    message: str

    code = "configuration_error"


__all__ = (
    "PAYLOAD_FORMAT",
    "PAYEE_GUI",
    "MERCHANT_CATEGORY",
    "CURRENCY_BRL",
    "COUNTRY_BR",
    "MAX_NAME",
    "MAX_CITY",
    "MAX_REFERENCE",
    "Tag",
    "Initiation",
    "PaymentFields",
    "DecodedPayload",
    "PixConfig",
    "PaymentCode",
    "PixErrorKind",
    "PixError",
    "ConfigurationProblem",
)
