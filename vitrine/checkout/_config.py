"""
Checkout configuration — built once at startup, frozen afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass

from vitrine._types import Cents
from vitrine.pix import PixConfig
from vitrine.validate import ServiceArea

DEFAULT_LEDGER_TIMEOUT = 10.0


@dataclass(frozen=True, slots=True)
class CheckoutConfig:
    """
    Fees, delivery area and payment settings.

    Example:
        CheckoutConfig(
            per_store_fee=2000,
            service_fee=340,
            area=ServiceArea.parse("São Paulo/SP"),
            pix=PixConfig(key="pix@loja.com.br", merchant_name="Loja", city="Sao Paulo"),
        )
    """

    per_store_fee: Cents
    service_fee: Cents
    area: ServiceArea
    pix: PixConfig
    ledger_timeout: float = DEFAULT_LEDGER_TIMEOUT

    def __post_init__(self) -> None:
        if self.per_store_fee < 0 or self.service_fee < 0:
            raise ValueError("Fees must be >= 0")
        if self.ledger_timeout <= 0:
            raise ValueError("ledger_timeout must be > 0")


__all__ = ("DEFAULT_LEDGER_TIMEOUT", "CheckoutConfig")
