"""
Issuance — derive the payment code for an order from merchant settings.
"""

from __future__ import annotations

from kungfu import Result, Ok, Error

from vitrine._types import Cents
from vitrine.pix._payload import encode
from vitrine.pix._types import (
    ConfigurationProblem,
    Initiation,
    PaymentCode,
    PaymentFields,
    PixConfig,
    PixErrorKind,
    Tag,
)

_SETTING_BY_TAG = {
    Tag.PAYEE_ACCOUNT: "pix_key",
    Tag.MERCHANT_NAME: "pix_merchant_name",
    Tag.MERCHANT_CITY: "pix_city",
    Tag.CURRENCY: "pix_currency",
}


def payment_fields(order_id: str, amount: Cents, config: PixConfig) -> PaymentFields:
    """Map an order and the merchant settings onto payload fields."""
    return PaymentFields(
        payee_key=config.key or "",
        merchant_name=config.merchant_name,
        merchant_city=config.city,
        reference=order_id,
        initiation=config.initiation,
        amount=amount if config.initiation is Initiation.DYNAMIC else None,
        currency=config.currency,
        uppercase_name=config.uppercase_name,
    )


def issue(
    order_id: str,
    amount: Cents,
    config: PixConfig,
) -> Result[PaymentCode, ConfigurationProblem]:
    """
    Derive the payment code bound to an order.

    Pure: no I/O, no clock. Issuing twice for the same order gives the
    same payload, so a retry after fixing configuration is safe.
    """
    if not (config.key or "").strip():
        return Error(ConfigurationProblem("pix_key", "PIX key is not configured"))

    match encode(payment_fields(order_id, amount, config)):
        case Ok(payload):
            return Ok(PaymentCode(
                payload=payload,
                bound_order_id=order_id,
                initiation=config.initiation,
            ))
        case Error(e):
            setting = _SETTING_BY_TAG.get(e.tag or "", "pix")
            if e.kind is PixErrorKind.FIELD_TOO_LONG:
                return Error(ConfigurationProblem(setting, f"{setting} is too long: {e.message}"))
            return Error(ConfigurationProblem(setting, e.message))


__all__ = ("payment_fields", "issue")
