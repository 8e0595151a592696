"""
Pix — merchant-presented payment payloads ("copia e cola").

    from vitrine import pix as P

    match P.encode(P.PaymentFields(
        payee_key="pix@loja.com.br",
        merchant_name="Loja Exemplo",
        merchant_city="Sao Paulo",
        reference="recA1B2C3",
    )):
        case Ok(payload):
            ...

    decoded = P.decode(payload)  # Result[DecodedPayload, PixError]
"""

from vitrine.pix._types import (
    PAYLOAD_FORMAT,
    PAYEE_GUI,
    MERCHANT_CATEGORY,
    CURRENCY_BRL,
    COUNTRY_BR,
    MAX_NAME,
    MAX_CITY,
    MAX_REFERENCE,
    Tag,
    Initiation,
    PaymentFields,
    DecodedPayload,
    PixConfig,
    PaymentCode,
    PixErrorKind,
    PixError,
    ConfigurationProblem,
)
from vitrine.pix._crc import crc16, checksum
from vitrine.pix._tlv import MAX_VALUE_LENGTH, tlv, join_tlv, split_tlv
from vitrine.pix._payload import (
    CRC_PLACEHOLDER,
    NO_REFERENCE,
    encode,
    decode,
    verify_checksum,
)
from vitrine.pix._issue import payment_fields, issue

__all__ = (
    # Constants
    "PAYLOAD_FORMAT",
    "PAYEE_GUI",
    "MERCHANT_CATEGORY",
    "CURRENCY_BRL",
    "COUNTRY_BR",
    "MAX_NAME",
    "MAX_CITY",
    "MAX_REFERENCE",
    "MAX_VALUE_LENGTH",
    "CRC_PLACEHOLDER",
    "NO_REFERENCE",
    "Tag",
    # Types
    "Initiation",
    "PaymentFields",
    "DecodedPayload",
    "PixConfig",
    "PaymentCode",
    "PixErrorKind",
    "PixError",
    "ConfigurationProblem",
    # Codec
    "crc16",
    "checksum",
    "tlv",
    "join_tlv",
    "split_tlv",
    "encode",
    "decode",
    "verify_checksum",
    # Issuance
    "payment_fields",
    "issue",
)
