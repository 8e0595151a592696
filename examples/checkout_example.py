"""
Checkout Example — bag review to payment code, and the ways it can stop.

Run: uv run python -m examples.checkout_example
"""

import asyncio
from dataclasses import replace

from kungfu import Ok, Error

from vitrine import log
from vitrine.checkout import Checkout
from vitrine.ledger import LedgerError, LedgerErrorKind, MemoryLedger
from vitrine.pix import decode
from vitrine.totals import format_brl
from examples._infra import ANA, CONFIG, banner, engine, run


async def at_address(checkout: Checkout):
    session = await checkout.open(ANA)
    await checkout.proceed(session)
    await checkout.lookup_postal_code(session, "01310-100")
    checkout.edit_address(session, number="1578", complement="Apto 12")
    return session


# ═══════════════════════════════════════════════════════════════════════════════
# Demos
# ═══════════════════════════════════════════════════════════════════════════════


async def happy_path() -> None:
    banner("1. Happy path")
    checkout = await engine()
    session = await at_address(checkout)
    print(f"  Total: {format_brl(session.totals.grand_total)} ({session.totals.store_count} stores)")

    match await checkout.confirm(session):
        case Ok(code):
            print(f"  Stage: {session.stage.value}")
            print(f"  Copy and paste: {code.payload}")
            match decode(code.payload):
                case Ok(fields):
                    print(f"  Reference: {fields.reference}")
                case Error(e):
                    print(f"  Decode failed: {e.message}")
        case Error(e):
            print(f"  Failed: {e.message}")


async def out_of_area() -> None:
    banner("2. Address outside the delivery area")
    checkout = await engine()
    session = await at_address(checkout)
    await checkout.lookup_postal_code(session, "22041-001")
    checkout.edit_address(session, number="1702", complement="")

    match await checkout.confirm(session):
        case Ok(_):
            print("  Unexpected: accepted")
        case Error(e):
            print(f"  {e.code}: {e.message}")
            print(f"  Still at: {session.stage.value}")


async def double_submit() -> None:
    banner("3. Confirm pressed twice")
    ledger = MemoryLedger()
    ledger.gate = asyncio.Event()
    checkout = await engine(ledger=ledger)
    session = await at_address(checkout)

    first = asyncio.create_task(checkout.confirm(session))
    await ledger.entered.wait()
    match await checkout.confirm(session):
        case Error(e):
            print(f"  Second press: {e.code}")
        case Ok(_):
            print("  Unexpected: second press went through")

    ledger.gate.set()
    await first
    print(f"  Ledger calls: {ledger.submit_calls}")


async def ledger_down() -> None:
    banner("4. Ledger rejects the order")
    ledger = MemoryLedger(fail_with=LedgerError(LedgerErrorKind.REJECTED, "Airtable 422"))
    checkout = await engine(ledger=ledger)
    session = await at_address(checkout)

    match await checkout.confirm(session):
        case Error(e):
            print(f"  {e.code}: {e.message}")
            print(f"  Stage: {session.stage.value}, cart kept: {len(await checkout.cart.lines(ANA.customer_id))} lines")
        case Ok(_):
            print("  Unexpected: accepted")

    checkout.revise(session)
    ledger.fail_with = None
    match await checkout.confirm(session):
        case Ok(code):
            print(f"  Retry: {session.stage.value}, order {code.bound_order_id}")
        case Error(e):
            print(f"  Retry failed: {e.message}")


async def missing_pix_key() -> None:
    banner("5. PIX key missing, fixed, reissued")
    checkout = await engine(config=replace(CONFIG, pix=replace(CONFIG.pix, key=None)))
    session = await at_address(checkout)

    match await checkout.confirm(session):
        case Error(e):
            print(f"  {e.code}: {e.message}")
        case Ok(_):
            print("  Unexpected: issued")
    print(f"  Order kept: {session.order.order_id if session.order else None}")

    checkout.config = CONFIG
    match await checkout.reissue(session):
        case Ok(code):
            print(f"  Reissued for {code.bound_order_id}: {session.stage.value}")
        case Error(e):
            print(f"  Still failing: {e.message}")


async def main() -> None:
    log.configure("warning", json=False)
    await happy_path()
    await out_of_area()
    await double_submit()
    await ledger_down()
    await missing_pix_key()


if __name__ == "__main__":
    run(main)
