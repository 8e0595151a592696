"""
Validate — identity and address checks.

    from vitrine import validate as V

    V.is_valid_tax_id("529.982.247-25")        # True
    V.is_valid_postal_code("01310-100")        # True

    area = V.ServiceArea.parse("São Paulo/SP")
    result = await V.verify_address(draft, area)
"""

from vitrine.validate._digits import (
    POSTAL_CODE_LENGTH,
    MIN_PHONE_DIGITS,
    normalize_digits,
    is_valid_postal_code,
    has_contact,
    mask_postal_code,
    mask_tax_id,
)
from vitrine.validate._tax_id import TAX_ID_LENGTH, is_valid_tax_id
from vitrine.validate._region import (
    fold,
    region_key,
    Locality,
    ServiceArea,
    is_serviceable_region,
)
from vitrine.validate._types import (
    AddressDraft,
    ValidationProblem,
    ServiceabilityProblem,
    AddressProblem,
)
from vitrine.validate._address import (
    REQUIRED_FIELDS,
    AddressCheck,
    AddressVerdict,
    VerdictNode,
    verify_address,
)

__all__ = (
    # Digits
    "POSTAL_CODE_LENGTH",
    "MIN_PHONE_DIGITS",
    "normalize_digits",
    "is_valid_postal_code",
    "has_contact",
    "mask_postal_code",
    "mask_tax_id",
    # Tax id
    "TAX_ID_LENGTH",
    "is_valid_tax_id",
    # Region
    "fold",
    "region_key",
    "Locality",
    "ServiceArea",
    "is_serviceable_region",
    # Types
    "AddressDraft",
    "ValidationProblem",
    "ServiceabilityProblem",
    "AddressProblem",
    # Graph
    "REQUIRED_FIELDS",
    "AddressCheck",
    "AddressVerdict",
    "VerdictNode",
    "verify_address",
)
