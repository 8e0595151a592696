"""
Tax id (CPF) check digits.
"""

from __future__ import annotations

from vitrine.validate._digits import normalize_digits

TAX_ID_LENGTH = 11


def _check_digit(digits: str) -> int:
    """mod-11 check digit; weights run from len+1 down to 2."""
    weight = len(digits) + 1
    total = sum(int(d) * (weight - i) for i, d in enumerate(digits))
    digit = 11 - total % 11
    return 0 if digit >= 10 else digit


def is_valid_tax_id(value: str | None) -> bool:
    """
    Validate an 11-digit CPF with both mod-11 check digits.

    Punctuation is ignored. Sequences of one repeated digit are rejected
    even though they satisfy the arithmetic.

    Example:
        is_valid_tax_id("529.982.247-25")  # True
        is_valid_tax_id("111.111.111-11")  # False
    """
    digits = normalize_digits(value)
    if len(digits) != TAX_ID_LENGTH:
        return False
    if len(set(digits)) == 1:
        return False

    if _check_digit(digits[:9]) != int(digits[9]):
        return False
    return _check_digit(digits[:10]) == int(digits[10])


__all__ = ("TAX_ID_LENGTH", "is_valid_tax_id")
