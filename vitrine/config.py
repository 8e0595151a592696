"""
Settings — environment-driven configuration (VITRINE_* variables, optional .env).

    VITRINE_DELIVERY_FEE=20.00
    VITRINE_SERVICE_FEE=3.40
    VITRINE_SERVICEABLE_REGIONS="São Paulo/SP; Santos/SP"
    VITRINE_PIX_KEY=pix@loja.com.br
"""

from decimal import Decimal
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vitrine.checkout import CheckoutConfig
from vitrine.pix import CURRENCY_BRL, Initiation, PixConfig
from vitrine.profile import VIACEP_URL
from vitrine.totals import to_cents
from vitrine.validate import ServiceArea


class Settings(BaseSettings):
    # Fees, in reais
    delivery_fee: Decimal = Field(ge=0)
    service_fee: Decimal = Field(ge=0)

    # "City/UF; City/UF"
    serviceable_regions: str

    # PIX
    pix_key: str | None = None
    pix_merchant_name: str = "LOOK PAGAMENTOS"
    pix_city: str = "SAO PAULO"
    pix_currency: str = CURRENCY_BRL
    pix_initiation: Literal["static", "dynamic"] = "static"
    pix_uppercase_name: bool = False

    # Ledger
    ledger_backend: Literal["memory", "database", "airtable"] = "memory"
    ledger_timeout: float = Field(default=10.0, gt=0)
    database_url: str = "sqlite+aiosqlite:///:memory:"
    airtable_api_key: str | None = None
    airtable_base_id: str | None = None
    airtable_table: str = "Orders"

    # Postal lookup; empty disables it
    postal_lookup_url: str = VIACEP_URL

    # Logging
    log_level: str = "info"
    log_json: bool = True

    model_config = SettingsConfigDict(
        env_prefix="VITRINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("serviceable_regions")
    @classmethod
    def regions_parse(cls, value: str) -> str:
        ServiceArea.parse(value)
        return value

    @field_validator("pix_currency")
    @classmethod
    def currency_numeric(cls, value: str) -> str:
        if len(value) != 3 or not value.isdigit():
            raise ValueError("pix_currency must be a 3-digit ISO 4217 code")
        return value

    def checkout_config(self) -> CheckoutConfig:
        """
        Frozen engine configuration.

        Note: A missing pix_key is allowed here. Issuance then fails with
        FAILED(CONFIGURATION_ERROR) and the order is kept.
        """
        return CheckoutConfig(
            per_store_fee=to_cents(self.delivery_fee),
            service_fee=to_cents(self.service_fee),
            area=ServiceArea.parse(self.serviceable_regions),
            pix=PixConfig(
                key=self.pix_key,
                merchant_name=self.pix_merchant_name,
                city=self.pix_city,
                currency=self.pix_currency,
                initiation=Initiation.parse(self.pix_initiation),
                uppercase_name=self.pix_uppercase_name,
            ),
            ledger_timeout=self.ledger_timeout,
        )


__all__ = ("Settings",)
