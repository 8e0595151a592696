"""
Wiring — build a Checkout from Settings.

    settings = Settings()
    checkout, close = await build_checkout(settings, cart)
    ...
    await close()
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import httpx

from vitrine.cart import CartStore
from vitrine.checkout import Checkout
from vitrine.config import Settings
from vitrine.db import create_database
from vitrine.ledger import AirtableLedger, MemoryLedger, OrderLedger, SQLAlchemyLedger
from vitrine.profile import (
    MemoryProfileStore,
    PostalLookup,
    ProfileStore,
    SQLAlchemyProfileStore,
    ViaCepLookup,
)

type Close = Callable[[], Awaitable[None]]


async def build_checkout(
    settings: Settings,
    cart: CartStore,
) -> tuple[Checkout, Close]:
    """
    Engine plus one close() that releases the HTTP client and the engine.

    Raises ValueError on settings that cannot work (e.g. airtable without keys).
    """
    config = settings.checkout_config()
    client = httpx.AsyncClient(timeout=settings.ledger_timeout)
    session_factory, engine = await create_database(settings.database_url)

    ledger: OrderLedger
    match settings.ledger_backend:
        case "airtable":
            if not settings.airtable_api_key or not settings.airtable_base_id:
                await client.aclose()
                await engine.dispose()
                raise ValueError("airtable ledger needs airtable_api_key and airtable_base_id")
            ledger = AirtableLedger(
                settings.airtable_api_key,
                settings.airtable_base_id,
                settings.airtable_table,
                client=client,
            )
        case "database":
            ledger = SQLAlchemyLedger(session_factory)
        case _:
            ledger = MemoryLedger()

    profiles: ProfileStore = (
        MemoryProfileStore()
        if settings.ledger_backend == "memory"
        else SQLAlchemyProfileStore(session_factory)
    )
    lookup: PostalLookup | None = (
        ViaCepLookup(client=client, url_template=settings.postal_lookup_url)
        if settings.postal_lookup_url
        else None
    )

    async def close() -> None:
        await client.aclose()
        await engine.dispose()

    return Checkout(cart, profiles, ledger, config, lookup=lookup), close


__all__ = ("Close", "build_checkout")
