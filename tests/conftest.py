from dataclasses import replace

import pytest
from kungfu import Ok, Error

from vitrine._types import Customer, DeliveryAddress
from vitrine.cart import MemoryCart
from vitrine.checkout import Checkout, CheckoutConfig
from vitrine.ledger import MemoryLedger
from vitrine.pix import PixConfig
from vitrine.profile import MemoryPostalLookup, MemoryProfileStore, PostalMatch, Profile
from vitrine.totals import CartLine
from vitrine.validate import ServiceArea

CUSTOMER = Customer(customer_id="cust_1", email="Ana@Example.com")

PAULISTA = DeliveryAddress(
    postal_code="01310100",
    street="Avenida Paulista",
    number="1578",
    neighborhood="Bela Vista",
    city="São Paulo",
    region="SP",
    complement="Apto 12",
)

RIO = replace(
    PAULISTA,
    postal_code="22041001",
    street="Avenida Atlântica",
    number="1702",
    neighborhood="Copacabana",
    city="Rio de Janeiro",
    region="RJ",
    complement=None,
)

LINES = (
    CartLine("dress", "store-a", unit_price=5000, quantity=1, size_label="M", name="Vestido"),
    CartLine("shirt", "store-b", unit_price=3000, quantity=1, size_label="P", name="Camisa"),
)


@pytest.fixture
def config() -> CheckoutConfig:
    return CheckoutConfig(
        per_store_fee=2000,
        service_fee=340,
        area=ServiceArea.parse("São Paulo/SP; Santos/SP"),
        pix=PixConfig(key="pix@vitrine.com.br", merchant_name="Vitrine Pagamentos", city="SAO PAULO"),
        ledger_timeout=1.0,
    )


@pytest.fixture
async def cart() -> MemoryCart:
    store = MemoryCart()
    for line in LINES:
        await store.add(CUSTOMER.customer_id, line)
    return store


@pytest.fixture
def profiles() -> MemoryProfileStore:
    return MemoryProfileStore(
        Profile(
            customer_id=CUSTOMER.customer_id,
            name="Ana Souza",
            phone="(11) 98765-4321",
            tax_id="529.982.247-25",
            address=PAULISTA,
        )
    )


@pytest.fixture
def ledger() -> MemoryLedger:
    return MemoryLedger()


@pytest.fixture
def lookup() -> MemoryPostalLookup:
    return MemoryPostalLookup(
        PostalMatch(
            postal_code="01310-100",
            street="Avenida Paulista",
            neighborhood="Bela Vista",
            city="São Paulo",
            region="SP",
        ),
        PostalMatch(
            postal_code="22041001",
            street="Avenida Atlântica",
            neighborhood="Copacabana",
            city="Rio de Janeiro",
            region="RJ",
        ),
    )


@pytest.fixture
def checkout(
    cart: MemoryCart,
    profiles: MemoryProfileStore,
    ledger: MemoryLedger,
    config: CheckoutConfig,
    lookup: MemoryPostalLookup,
) -> Checkout:
    return Checkout(cart, profiles, ledger, config, lookup=lookup)


def ok(result):
    """Unwrap an Ok or fail the test."""
    match result:
        case Ok(value):
            return value
        case Error(e):
            pytest.fail(f"unexpected error {e!r}")


def failure(result):
    """Unwrap an Error or fail the test."""
    match result:
        case Error(e):
            return e
        case Ok(value):
            pytest.fail(f"expected an error, got {value!r}")
