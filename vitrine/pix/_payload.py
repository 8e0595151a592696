"""
PIX payload — encode structured fields, decode payload strings.

Layout (fixed order):
    00 format "01"
    01 initiation "11" static | "12" dynamic
    26 payee account ─┬─ 00 "br.gov.bcb.pix"
                      └─ 01 key
    52 category "0000"
    53 currency
    54 amount (dynamic only)
    58 country
    59 merchant name (≤ 25)
    60 merchant city (≤ 15)
    62 additional data ── 05 reference (≤ 25)
    63 CRC16 over everything up to and including "6304"
"""

from __future__ import annotations

from kungfu import Result, Ok, Error

from vitrine.totals import format_amount, to_cents
from vitrine.pix._crc import checksum
from vitrine.pix._tlv import join_tlv, split_tlv
from vitrine.pix._types import (
    MAX_CITY,
    MAX_NAME,
    MAX_REFERENCE,
    MERCHANT_CATEGORY,
    PAYEE_GUI,
    PAYLOAD_FORMAT,
    DecodedPayload,
    Initiation,
    PaymentFields,
    PixError,
    PixErrorKind,
    Tag,
)

CRC_PLACEHOLDER = Tag.CRC + "04"
NO_REFERENCE = "***"

_REQUIRED_TAGS = (
    Tag.FORMAT,
    Tag.PAYEE_ACCOUNT,
    Tag.CATEGORY,
    Tag.CURRENCY,
    Tag.COUNTRY,
    Tag.MERCHANT_NAME,
    Tag.MERCHANT_CITY,
)


def _missing(tag: str, what: str) -> Error[PixError]:
    return Error(PixError(kind=PixErrorKind.MISSING_FIELD, message=f"{what} is empty", tag=tag))


def _malformed(message: str, tag: str | None = None) -> Error[PixError]:
    return Error(PixError(kind=PixErrorKind.MALFORMED, message=message, tag=tag))


# ═══════════════════════════════════════════════════════════════════════════════
# encode()
# ═══════════════════════════════════════════════════════════════════════════════


def merchant_name(fields: PaymentFields) -> str:
    name = fields.merchant_name.strip()
    if fields.uppercase_name:
        name = name.upper()
    return name[:MAX_NAME]


def encode(fields: PaymentFields) -> Result[str, PixError]:
    """
    Build the payload string, checksum included.

    Deterministic: equal fields give a byte-identical payload.

    Example:
        encode(PaymentFields(
            payee_key="pix@loja.com.br",
            merchant_name="Loja Exemplo",
            merchant_city="Sao Paulo",
            reference="recA1B2C3",
        ))
    """
    key = fields.payee_key.strip()
    name = merchant_name(fields)
    city = fields.merchant_city.strip()[:MAX_CITY]
    reference = fields.reference.strip()[:MAX_REFERENCE] or NO_REFERENCE

    if not key:
        return _missing(Tag.PAYEE_ACCOUNT, "Payee key")
    if not name:
        return _missing(Tag.MERCHANT_NAME, "Merchant name")
    if not city:
        return _missing(Tag.MERCHANT_CITY, "Merchant city")
    if fields.initiation is Initiation.DYNAMIC and fields.amount is None:
        return _missing(Tag.AMOUNT, "Amount of a single-use code")

    match join_tlv([(Tag.PAYEE_GUI, PAYEE_GUI), (Tag.PAYEE_KEY, key)]):
        case Ok(account):
            pass
        case Error(e):
            return Error(e)

    match join_tlv([(Tag.REFERENCE, reference)]):
        case Ok(additional):
            pass
        case Error(e):
            return Error(e)

    top: list[tuple[str, str]] = [
        (Tag.FORMAT, PAYLOAD_FORMAT),
        (Tag.INITIATION, fields.initiation.value),
        (Tag.PAYEE_ACCOUNT, account),
        (Tag.CATEGORY, MERCHANT_CATEGORY),
        (Tag.CURRENCY, fields.currency),
    ]
    if fields.initiation is Initiation.DYNAMIC and fields.amount is not None:
        top.append((Tag.AMOUNT, format_amount(fields.amount)))
    top.extend([
        (Tag.COUNTRY, fields.country),
        (Tag.MERCHANT_NAME, name),
        (Tag.MERCHANT_CITY, city),
        (Tag.ADDITIONAL_DATA, additional),
    ])

    match join_tlv(top):
        case Ok(body):
            unsigned = body + CRC_PLACEHOLDER
            return Ok(unsigned + checksum(unsigned))
        case Error(e):
            return Error(e)


# ═══════════════════════════════════════════════════════════════════════════════
# decode()
# ═══════════════════════════════════════════════════════════════════════════════


def verify_checksum(payload: str) -> bool:
    """True if the trailing 4 hex digits match the CRC of everything before."""
    text = payload.strip()
    if len(text) < 8 or text[-8:-4] != CRC_PLACEHOLDER:
        return False
    return checksum(text[:-4]) == text[-4:].upper()


def decode(payload: str) -> Result[DecodedPayload, PixError]:
    """
    Re-tokenise a payload by tag and check its CRC.

    Used for round-trip tests and for inspecting codes from the CLI.
    """
    text = payload.strip()
    if len(text) < 8 or text[-8:-4] != CRC_PLACEHOLDER:
        return _malformed("Payload does not end with a CRC field", Tag.CRC)
    if not verify_checksum(text):
        return Error(PixError(
            kind=PixErrorKind.BAD_CHECKSUM,
            message=f"CRC {text[-4:]} does not match {checksum(text[:-4])}",
            tag=Tag.CRC,
        ))

    match split_tlv(text):
        case Ok(pairs):
            pass
        case Error(e):
            return Error(e)

    top = dict(pairs)
    for tag in _REQUIRED_TAGS:
        if tag not in top:
            return _malformed(f"Missing tag {tag}", tag)

    match split_tlv(top[Tag.PAYEE_ACCOUNT]):
        case Ok(account_pairs):
            account = dict(account_pairs)
        case Error(e):
            return Error(e)

    reference: str | None = None
    if Tag.ADDITIONAL_DATA in top:
        match split_tlv(top[Tag.ADDITIONAL_DATA]):
            case Ok(extra_pairs):
                reference = dict(extra_pairs).get(Tag.REFERENCE)
            case Error(e):
                return Error(e)

    # tag 01 is optional; absent means a reusable code
    method = top.get(Tag.INITIATION, Initiation.STATIC.value)
    try:
        initiation = Initiation(method)
    except ValueError:
        return _malformed(f"Unknown initiation {method!r}", Tag.INITIATION)

    amount = None
    if Tag.AMOUNT in top:
        try:
            amount = to_cents(top[Tag.AMOUNT])
        except ValueError:
            return _malformed(f"Bad amount {top[Tag.AMOUNT]!r}", Tag.AMOUNT)

    return Ok(DecodedPayload(
        payload_format=top[Tag.FORMAT],
        initiation=initiation,
        payee_gui=account.get(Tag.PAYEE_GUI, ""),
        payee_key=account.get(Tag.PAYEE_KEY, ""),
        category=top[Tag.CATEGORY],
        currency=top[Tag.CURRENCY],
        amount=amount,
        country=top[Tag.COUNTRY],
        merchant_name=top[Tag.MERCHANT_NAME],
        merchant_city=top[Tag.MERCHANT_CITY],
        reference=reference,
        crc=top[Tag.CRC],
        tags=tuple(pairs),
    ))


__all__ = (
    "CRC_PLACEHOLDER",
    "NO_REFERENCE",
    "merchant_name",
    "encode",
    "verify_checksum",
    "decode",
)
