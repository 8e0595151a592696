import asyncio
from dataclasses import replace

import pytest

from vitrine._types import Customer
from vitrine.cart import MemoryCart
from vitrine.checkout import (
    Cancelled,
    Checkout,
    CheckoutConfig,
    CheckoutSession,
    FailureReason,
    IllegalTransition,
    InFlight,
    NotReady,
    NotReadyReason,
    Stage,
    can_move,
)
from vitrine.ledger import LedgerError, LedgerErrorKind, MemoryLedger, OrderStatus
from vitrine.pix import ConfigurationProblem, decode
from vitrine.profile import MemoryPostalLookup, MemoryProfileStore, Profile
from vitrine.totals import CartLine
from vitrine.validate import ServiceabilityProblem, ValidationProblem

from tests.conftest import CUSTOMER, LINES, PAULISTA, RIO, failure, ok


async def confirming(checkout: Checkout, customer: Customer = CUSTOMER) -> CheckoutSession:
    session = await checkout.open(customer)
    ok(await checkout.proceed(session))
    assert session.stage is Stage.CONFIRMING_ADDRESS
    return session


class HeldClearCart(MemoryCart):
    """Cart whose clear waits until released."""

    def __init__(self) -> None:
        super().__init__()
        self.clearing = asyncio.Event()
        self.release = asyncio.Event()

    async def clear(self, customer_id: str) -> None:
        self.clearing.set()
        await self.release.wait()
        await super().clear(customer_id)


def move_to_rio(checkout: Checkout, session: CheckoutSession) -> None:
    checkout.edit_address(
        session,
        postal_code=RIO.postal_code,
        street=RIO.street,
        number=RIO.number,
        complement="",
        neighborhood=RIO.neighborhood,
        city=RIO.city,
        region=RIO.region,
    )


class TestStages:
    def test_table(self) -> None:
        assert can_move(Stage.REVIEWING, Stage.CONFIRMING_ADDRESS)
        assert can_move(Stage.SUBMITTING_ORDER, Stage.CANCELLED)
        assert can_move(Stage.FAILED, Stage.ISSUING_PAYMENT)
        assert not can_move(Stage.READY, Stage.CANCELLED)
        assert not can_move(Stage.REVIEWING, Stage.SUBMITTING_ORDER)

    def test_session_move(self) -> None:
        session = CheckoutSession(customer=CUSTOMER)

        with pytest.raises(IllegalTransition):
            session.move(Stage.READY)
        assert session.stage is Stage.REVIEWING


class TestOpenAndProceed:
    async def test_open_previews_totals(self, checkout: Checkout) -> None:
        session = await checkout.open(CUSTOMER)

        assert session.stage is Stage.REVIEWING
        assert session.totals.grand_total == 12340
        assert checkout.get(session.session_id) is session

    async def test_proceed_snapshots_cart_and_prefills_address(self, checkout: Checkout) -> None:
        session = await confirming(checkout)

        assert session.lines == LINES
        assert session.totals.subtotal == 8000
        assert session.totals.delivery_fee == 4000
        assert session.totals.service_fee == 340
        assert session.draft.street == "Avenida Paulista"
        assert session.draft.complement == "Apto 12"
        assert session.profile is not None and session.profile.name == "Ana Souza"

    async def test_signed_out(self, checkout: Checkout) -> None:
        session = await checkout.open(None)

        error = failure(await checkout.proceed(session))

        assert error == NotReady(NotReadyReason.SIGN_IN_REQUIRED, next="/bag")
        assert session.stage is Stage.CANCELLED
        assert checkout.get(session.session_id) is None

    async def test_empty_cart(self, checkout: Checkout) -> None:
        session = await checkout.open(Customer("cust_empty"))

        error = failure(await checkout.proceed(session))

        assert error == NotReady(NotReadyReason.EMPTY_CART)
        assert error.message == "Your bag is empty"
        assert session.stage is Stage.REVIEWING

    async def test_proceed_twice(self, checkout: Checkout) -> None:
        session = await confirming(checkout)

        with pytest.raises(IllegalTransition):
            await checkout.proceed(session)

    async def test_edit_outside_confirming_address(self, checkout: Checkout) -> None:
        session = await checkout.open(CUSTOMER)

        with pytest.raises(IllegalTransition):
            checkout.edit_address(session, number="10")


class TestPostalLookup:
    @pytest.fixture
    def fresh(self, cart: MemoryCart, ledger: MemoryLedger, config: CheckoutConfig, lookup: MemoryPostalLookup):
        return Checkout(cart, MemoryProfileStore(), ledger, config, lookup=lookup)

    async def test_prefills_draft(self, fresh: Checkout) -> None:
        session = await confirming(fresh)
        assert session.draft.street == ""

        found = ok(await fresh.lookup_postal_code(session, "01310-100"))

        assert found is not None
        assert session.draft.postal_code == "01310-100"
        assert session.draft.street == "Avenida Paulista"
        assert session.draft.neighborhood == "Bela Vista"
        assert session.draft.city == "São Paulo"
        assert session.draft.region == "SP"

    async def test_unknown_code_keeps_draft(self, fresh: Checkout) -> None:
        session = await confirming(fresh)
        fresh.edit_address(session, street="Rua Augusta")

        assert ok(await fresh.lookup_postal_code(session, "99999-999")) is None
        assert session.draft.street == "Rua Augusta"
        assert session.draft.postal_code == "99999-999"

    async def test_invalid_code_skips_lookup(self, fresh: Checkout, lookup: MemoryPostalLookup) -> None:
        session = await confirming(fresh)

        assert ok(await fresh.lookup_postal_code(session, "0131")) is None
        assert lookup.calls == 0

    async def test_lookup_then_confirm(self, fresh: Checkout, cart: MemoryCart) -> None:
        session = await confirming(fresh)
        await fresh.lookup_postal_code(session, "01310-100")
        fresh.edit_address(session, number="1578")

        code = ok(await fresh.confirm(session))

        assert session.stage is Stage.READY
        assert code.bound_order_id == "ORD000001"
        assert ok(await fresh.profiles.get(CUSTOMER.customer_id)).address == session.address


class TestConfirm:
    async def test_happy_path(
        self,
        checkout: Checkout,
        cart: MemoryCart,
        ledger: MemoryLedger,
        profiles: MemoryProfileStore,
    ) -> None:
        session = await confirming(checkout)

        code = ok(await checkout.confirm(session))

        assert session.stage is Stage.READY
        assert session.payment == code
        assert session.order is not None
        assert session.order.order_id == "ORD000001"
        assert session.order.status is OrderStatus.AWAITING_PAYMENT
        assert ledger.submit_calls == 1
        assert ledger.orders["ORD000001"].amount == 12340
        assert await cart.lines(CUSTOMER.customer_id) == []
        assert profiles.upsert_calls == 1
        assert checkout.get(session.session_id) is None

        decoded = ok(decode(code.payload))
        assert decoded.reference == "ORD000001"
        assert decoded.payee_key == "pix@vitrine.com.br"
        assert decoded.merchant_name == "Vitrine Pagamentos"

    async def test_order_carries_contact(self, checkout: Checkout, ledger: MemoryLedger) -> None:
        session = await confirming(checkout)
        await checkout.confirm(session)

        assert session.address == PAULISTA
        assert ledger.orders["ORD000001"].address == PAULISTA

    async def test_cart_edits_after_proceed_are_ignored(
        self, checkout: Checkout, cart: MemoryCart, ledger: MemoryLedger
    ) -> None:
        session = await confirming(checkout)
        await cart.add(CUSTOMER.customer_id, CartLine("bag", "store-c", unit_price=9000, quantity=1))

        ok(await checkout.confirm(session))

        assert ledger.orders["ORD000001"].lines == LINES
        assert ledger.orders["ORD000001"].amount == 12340

    async def test_ready_session_answers_with_same_code(self, checkout: Checkout, ledger: MemoryLedger) -> None:
        session = await confirming(checkout)
        first = ok(await checkout.confirm(session))

        assert ok(await checkout.confirm(session)) == first
        assert ledger.submit_calls == 1

    async def test_out_of_area(
        self, checkout: Checkout, ledger: MemoryLedger, profiles: MemoryProfileStore
    ) -> None:
        session = await confirming(checkout)
        move_to_rio(checkout, session)

        problem = failure(await checkout.confirm(session))

        assert isinstance(problem, ServiceabilityProblem)
        assert session.stage is Stage.CONFIRMING_ADDRESS
        assert list(session.problems) == ["city"]
        assert ledger.submit_calls == 0
        assert profiles.upsert_calls == 0

    async def test_missing_fields(self, checkout: Checkout, ledger: MemoryLedger) -> None:
        session = await confirming(checkout)
        checkout.edit_address(session, number="", postal_code="0131")

        problem = failure(await checkout.confirm(session))

        assert isinstance(problem, ValidationProblem)
        assert set(session.problems) == {"number", "postal_code"}
        assert ledger.submit_calls == 0

        checkout.edit_address(session, number="1578", postal_code="01310-100")
        assert session.problems == {}
        ok(await checkout.confirm(session))

    async def test_invalid_profile_tax_id(
        self, cart: MemoryCart, ledger: MemoryLedger, config: CheckoutConfig
    ) -> None:
        profiles = MemoryProfileStore(
            Profile(CUSTOMER.customer_id, tax_id="111.111.111-11", phone="123", address=PAULISTA)
        )
        checkout = Checkout(cart, profiles, ledger, config)
        session = await confirming(checkout)

        problem = failure(await checkout.confirm(session))

        assert isinstance(problem, ValidationProblem)
        assert set(problem.fields) == {"tax_id", "phone"}
        assert ledger.submit_calls == 0

    async def test_unserviceable_city_reported_before_contact(
        self, cart: MemoryCart, ledger: MemoryLedger, config: CheckoutConfig
    ) -> None:
        profiles = MemoryProfileStore(
            Profile(CUSTOMER.customer_id, tax_id="111.111.111-11", address=RIO)
        )
        checkout = Checkout(cart, profiles, ledger, config)
        session = await confirming(checkout)

        problem = failure(await checkout.confirm(session))

        assert isinstance(problem, ServiceabilityProblem)
        assert list(session.problems) == ["city"]
        assert ledger.submit_calls == 0

    async def test_second_confirm_while_in_flight(self, checkout: Checkout, ledger: MemoryLedger) -> None:
        ledger.gate = asyncio.Event()
        session = await confirming(checkout)

        first = asyncio.create_task(checkout.confirm(session))
        await ledger.entered.wait()
        assert session.in_flight
        assert session.stage is Stage.SUBMITTING_ORDER

        second = failure(await checkout.confirm(session))
        assert second == InFlight(session.session_id)

        ledger.gate.set()
        ok(await first)

        assert ledger.submit_calls == 1
        assert session.stage is Stage.READY
        assert not session.in_flight

    async def test_ledger_failure_keeps_cart(
        self, checkout: Checkout, cart: MemoryCart, ledger: MemoryLedger
    ) -> None:
        ledger.fail_with = LedgerError(LedgerErrorKind.REJECTED, "Airtable 422", status_code=422)
        session = await confirming(checkout)

        error = failure(await checkout.confirm(session))

        assert error.kind is LedgerErrorKind.REJECTED
        assert session.stage is Stage.FAILED
        assert session.failure is not None
        assert session.failure.reason is FailureReason.LEDGER_ERROR
        assert session.order is None
        assert await cart.lines(CUSTOMER.customer_id) == list(LINES)
        assert cart.clear_calls == 0

        checkout.revise(session)
        assert session.stage is Stage.CONFIRMING_ADDRESS
        assert session.failure is None

        ledger.fail_with = None
        ok(await checkout.confirm(session))
        assert ledger.submit_calls == 2
        assert session.stage is Stage.READY

    async def test_crashing_ledger_is_a_ledger_error(
        self, cart: MemoryCart, profiles: MemoryProfileStore, config: CheckoutConfig
    ) -> None:
        class Broken(MemoryLedger):
            async def submit_order(self, draft):
                raise ConnectionResetError("peer reset")

        checkout = Checkout(cart, profiles, Broken(), config)
        session = await confirming(checkout)

        error = failure(await checkout.confirm(session))

        assert error.kind is LedgerErrorKind.UNAVAILABLE
        assert session.stage is Stage.FAILED

    async def test_timeout(self, checkout: Checkout, config: CheckoutConfig, ledger: MemoryLedger) -> None:
        checkout.config = replace(config, ledger_timeout=0.05)
        ledger.gate = asyncio.Event()
        session = await confirming(checkout)

        error = failure(await checkout.confirm(session))

        assert error.kind is LedgerErrorKind.TIMEOUT
        assert session.stage is Stage.FAILED
        assert session.failure is not None
        assert session.failure.reason is FailureReason.TIMEOUT
        assert not session.in_flight


class TestPaymentConfiguration:
    async def test_missing_key_then_reissue(
        self,
        checkout: Checkout,
        config: CheckoutConfig,
        cart: MemoryCart,
        ledger: MemoryLedger,
    ) -> None:
        checkout.config = replace(config, pix=replace(config.pix, key=None))
        session = await confirming(checkout)

        problem = failure(await checkout.confirm(session))

        assert problem == ConfigurationProblem("pix_key", "PIX key is not configured")
        assert session.stage is Stage.FAILED
        assert session.failure is not None
        assert session.failure.reason is FailureReason.CONFIGURATION_ERROR
        assert session.order is not None
        assert len(await cart.lines(CUSTOMER.customer_id)) == 2

        with pytest.raises(IllegalTransition):
            checkout.revise(session)

        checkout.config = config
        code = ok(await checkout.reissue(session))

        assert code.bound_order_id == session.order.order_id
        assert session.stage is Stage.READY
        assert ledger.submit_calls == 1
        assert await cart.lines(CUSTOMER.customer_id) == []

    async def test_reissue_without_order(self, checkout: Checkout) -> None:
        session = await confirming(checkout)

        with pytest.raises(IllegalTransition):
            await checkout.reissue(session)


class TestCancel:
    async def test_cancel_before_confirm(self, checkout: Checkout, ledger: MemoryLedger) -> None:
        session = await confirming(checkout)

        assert checkout.cancel(session) == Cancelled()
        assert session.stage is Stage.CANCELLED
        assert checkout.get(session.session_id) is None
        assert checkout.cancel(session) == Cancelled()
        assert failure(await checkout.confirm(session)) == Cancelled()
        assert ledger.submit_calls == 0

    async def test_cancel_while_submitting(
        self, checkout: Checkout, cart: MemoryCart, ledger: MemoryLedger
    ) -> None:
        ledger.gate = asyncio.Event()
        session = await confirming(checkout)

        confirm = asyncio.create_task(checkout.confirm(session))
        await ledger.entered.wait()
        assert checkout.cancel(session) == Cancelled()

        ledger.gate.set()
        result = failure(await confirm)

        assert result == Cancelled(order_id="ORD000001")
        assert session.stage is Stage.CANCELLED
        assert session.payment is None
        assert len(await cart.lines(CUSTOMER.customer_id)) == 2

        code = ok(await checkout.reissue(session))
        assert code.bound_order_id == "ORD000001"
        assert session.stage is Stage.CANCELLED

    async def test_cancel_while_cart_clears(
        self, profiles: MemoryProfileStore, ledger: MemoryLedger, config: CheckoutConfig
    ) -> None:
        cart = HeldClearCart()
        for line in LINES:
            await cart.add(CUSTOMER.customer_id, line)
        checkout = Checkout(cart, profiles, ledger, config)
        session = await confirming(checkout)

        confirm = asyncio.create_task(checkout.confirm(session))
        await cart.clearing.wait()

        assert session.stage is Stage.READY
        assert checkout.get(session.session_id) is None
        with pytest.raises(IllegalTransition):
            checkout.cancel(session)

        cart.release.set()
        code = ok(await confirm)

        assert code.bound_order_id == "ORD000001"
        assert session.stage is Stage.READY
        assert await cart.lines(CUSTOMER.customer_id) == []

    async def test_ready_cannot_be_cancelled(self, checkout: Checkout) -> None:
        session = await confirming(checkout)
        ok(await checkout.confirm(session))

        with pytest.raises(IllegalTransition):
            checkout.cancel(session)


class TestOrders:
    async def test_lists_after_checkout(self, checkout: Checkout) -> None:
        session = await confirming(checkout)
        ok(await checkout.confirm(session))

        (order,) = ok(await checkout.orders(CUSTOMER))

        assert order.order_id == "ORD000001"
        assert order.totals.grand_total == 12340
        assert order.item_count == 2

    async def test_ledger_down(self, checkout: Checkout, ledger: MemoryLedger) -> None:
        ledger.fail_with = LedgerError(LedgerErrorKind.UNAVAILABLE, "down")

        assert failure(await checkout.orders(CUSTOMER)).kind is LedgerErrorKind.UNAVAILABLE
