"""
Digit helpers — normalisation, postal codes, masks.
"""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")

POSTAL_CODE_LENGTH = 8
MIN_PHONE_DIGITS = 10


def normalize_digits(value: str | None) -> str:
    """Strip every non-digit character. Idempotent; None becomes ''."""
    return _NON_DIGITS.sub("", value or "")


def is_valid_postal_code(value: str | None) -> bool:
    """
    Check postal code (CEP) format.

    Example:
        is_valid_postal_code("01310-100")  # True
        is_valid_postal_code("123")        # False
    """
    return len(normalize_digits(value)) == POSTAL_CODE_LENGTH


def has_contact(phone: str | None) -> bool:
    """Phone carries at least area code + subscriber number."""
    return len(normalize_digits(phone)) >= MIN_PHONE_DIGITS


def mask_postal_code(value: str | None) -> str:
    """'01310100' -> '01310-100'. Partial input is masked as far as it goes."""
    digits = normalize_digits(value)[:POSTAL_CODE_LENGTH]
    if len(digits) <= 5:
        return digits
    return f"{digits[:5]}-{digits[5:]}"


def mask_tax_id(value: str | None) -> str:
    """'12345678909' -> '123.456.789-09'. Partial input is masked as far as it goes."""
    digits = normalize_digits(value)[:11]
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"{digits[:3]}.{digits[3:]}"
    if len(digits) <= 9:
        return f"{digits[:3]}.{digits[3:6]}.{digits[6:]}"
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


__all__ = (
    "POSTAL_CODE_LENGTH",
    "MIN_PHONE_DIGITS",
    "normalize_digits",
    "is_valid_postal_code",
    "has_contact",
    "mask_postal_code",
    "mask_tax_id",
)
