"""
TLV — two-digit tag, two-digit decimal length, value.
"""

from __future__ import annotations

from kungfu import Result, Ok, Error

from vitrine.pix._types import PixError, PixErrorKind

MAX_VALUE_LENGTH = 99


def tlv(tag: str, value: str) -> Result[str, PixError]:
    """
    Encode one field.

    Example:
        tlv("00", "01")  # Ok("000201")
    """
    if len(tag) != 2 or not tag.isdigit():
        raise ValueError(f"Tag must be two digits, got {tag!r}")
    if len(value) > MAX_VALUE_LENGTH:
        return Error(PixError(
            kind=PixErrorKind.FIELD_TOO_LONG,
            message=f"Tag {tag} value has {len(value)} chars (max {MAX_VALUE_LENGTH})",
            tag=tag,
        ))
    return Ok(f"{tag}{len(value):02d}{value}")


def join_tlv(fields: list[tuple[str, str]]) -> Result[str, PixError]:
    """Encode fields in the given order; stops at the first oversize value."""
    parts: list[str] = []
    for tag, value in fields:
        match tlv(tag, value):
            case Ok(encoded):
                parts.append(encoded)
            case Error(e):
                return Error(e)
    return Ok("".join(parts))


def split_tlv(data: str) -> Result[list[tuple[str, str]], PixError]:
    """
    Tokenise a TLV string into (tag, value) pairs, in order.

    Example:
        split_tlv("000201010211")  # Ok([("00", "01"), ("01", "11")])
    """
    pairs: list[tuple[str, str]] = []
    pos = 0
    while pos < len(data):
        header = data[pos:pos + 4]
        if len(header) < 4 or not header.isdigit():
            return Error(PixError(
                kind=PixErrorKind.MALFORMED,
                message=f"Bad TLV header at offset {pos}: {header!r}",
            ))
        tag, length = header[:2], int(header[2:])
        start = pos + 4
        value = data[start:start + length]
        if len(value) != length:
            return Error(PixError(
                kind=PixErrorKind.MALFORMED,
                message=f"Tag {tag} declares {length} chars, {len(value)} available",
                tag=tag,
            ))
        pairs.append((tag, value))
        pos = start + length
    return Ok(pairs)


__all__ = ("MAX_VALUE_LENGTH", "tlv", "join_tlv", "split_tlv")
