"""
vitrine — checkout and PIX payment codes for a multi-store storefront.

    from vitrine import totals as T     # Cart totals and money
    from vitrine import validate as V   # CPF, CEP, delivery area
    from vitrine import pix as P        # Payment payload codec
    from vitrine import checkout as CK  # The checkout state machine
"""

from vitrine import totals
from vitrine import validate
from vitrine import pix
from vitrine import cart
from vitrine import ledger
from vitrine import profile
from vitrine import checkout
from vitrine._types import (
    Cents,
    Customer,
    DeliveryAddress,
)

__version__ = "0.1.0"

__all__ = (
    "totals",
    "validate",
    "pix",
    "cart",
    "ledger",
    "profile",
    "checkout",
    "Cents",
    "Customer",
    "DeliveryAddress",
)
