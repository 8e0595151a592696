"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine

from vitrine._types import Customer
from vitrine.cart import MemoryCart
from vitrine.checkout import Checkout, CheckoutConfig
from vitrine.ledger import MemoryLedger
from vitrine.pix import PixConfig
from vitrine.profile import MemoryPostalLookup, MemoryProfileStore, PostalMatch, Profile
from vitrine.totals import CartLine
from vitrine.validate import ServiceArea

ANA = Customer("cust_ana", "ana@example.com")

CONFIG = CheckoutConfig(
    per_store_fee=2000,
    service_fee=340,
    area=ServiceArea.parse("São Paulo/SP; Santos/SP"),
    pix=PixConfig(key="pix@vitrine.com.br", merchant_name="Vitrine Pagamentos", city="SAO PAULO"),
    ledger_timeout=2.0,
)


# Fake storefront
async def stocked_cart(customer: Customer) -> MemoryCart:
    cart = MemoryCart()
    await cart.add(customer.customer_id, CartLine("dress", "store-a", 5000, 1, "M", "Vestido Midi"))
    await cart.add(customer.customer_id, CartLine("shirt", "store-b", 3000, 1, "P", "Camisa Linho"))
    return cart


def postal_codes() -> MemoryPostalLookup:
    return MemoryPostalLookup(
        PostalMatch("01310100", "Avenida Paulista", "Bela Vista", "São Paulo", "SP"),
        PostalMatch("22041001", "Avenida Atlântica", "Copacabana", "Rio de Janeiro", "RJ"),
    )


async def engine(
    customer: Customer = ANA,
    ledger: MemoryLedger | None = None,
    config: CheckoutConfig = CONFIG,
) -> Checkout:
    profiles = MemoryProfileStore(
        Profile(customer.customer_id, name="Ana Souza", phone="11987654321", tax_id="529.982.247-25")
    )
    return Checkout(
        await stocked_cart(customer),
        profiles,
        ledger or MemoryLedger(),
        config,
        lookup=postal_codes(),
    )


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    asyncio.run(main())
