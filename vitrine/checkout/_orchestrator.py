"""
Checkout orchestrator — drives one session from bag review to payment code.

    session = await checkout.open(customer)
    await checkout.proceed(session)                 # snapshot cart, prefill address
    await checkout.lookup_postal_code(session, "01310-100")
    checkout.edit_address(session, number="1200")

    match await checkout.confirm(session):
        case Ok(code):
            code.payload                            # "000201010211..."
        case Error(ValidationProblem() as p):
            session.problems                        # {"postal_code": "..."}
        case Error(LedgerError()):
            ...                                     # FAILED, cart intact, retry later
        case Error(ConfigurationProblem()):
            ...                                     # order exists, fix settings, reissue()

External calls go through L.catching_async: an adapter that raises is
treated like one that returned an error.
"""

from __future__ import annotations

import asyncio
from typing import Any

from combinators import lift as L
from kungfu import Result, Ok, Error

from vitrine import log
from vitrine._types import Customer, DeliveryAddress
from vitrine.cart import CartStore
from vitrine.checkout._config import CheckoutConfig
from vitrine.checkout._errors import (
    Cancelled,
    CheckoutError,
    InFlight,
    NotReady,
    NotReadyReason,
)
from vitrine.checkout._session import CheckoutSession
from vitrine.checkout._state import Failure, FailureReason, IllegalTransition, Stage
from vitrine.ledger import (
    Contact,
    LedgerError,
    LedgerErrorKind,
    LedgerOrder,
    LedgerReceipt,
    Order,
    OrderDraft,
    OrderLedger,
)
from vitrine.pix import ConfigurationProblem, PaymentCode, issue
from vitrine.profile import (
    PostalLookup,
    PostalLookupError,
    PostalLookupErrorKind,
    PostalMatch,
    Profile,
    ProfileStore,
)
from vitrine.totals import CartLine, Totals, compute_totals
from vitrine.validate import (
    AddressDraft,
    AddressProblem,
    ServiceabilityProblem,
    ValidationProblem,
    has_contact,
    is_valid_postal_code,
    is_valid_tax_id,
    normalize_digits,
    verify_address,
)

SIGN_IN_NEXT = "/bag"

logger = log.get_logger(__name__)


def contact_problems(profile: Profile | None) -> dict[str, str]:
    """Tax id and phone are optional, but must be valid when present."""
    problems: dict[str, str] = {}
    if profile is None:
        return problems
    if profile.tax_id and not is_valid_tax_id(profile.tax_id):
        problems["tax_id"] = "Tax id (CPF) is not valid"
    if profile.phone and not has_contact(profile.phone):
        problems["phone"] = "Phone needs at least 10 digits"
    return problems


def problem_fields(problem: AddressProblem) -> dict[str, str]:
    match problem:
        case ValidationProblem(fields=fields):
            return dict(fields)
        case ServiceabilityProblem():
            return {problem.field: problem.message}


def _ledger_crashed(e: Exception) -> LedgerError:
    return LedgerError(LedgerErrorKind.UNAVAILABLE, f"Ledger call failed: {e}")


def _lookup_crashed(e: Exception) -> PostalLookupError:
    return PostalLookupError(PostalLookupErrorKind.UNAVAILABLE, f"Postal lookup failed: {e}")


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout
# ═══════════════════════════════════════════════════════════════════════════════


class Checkout:
    """
    The checkout engine.

    Holds the open sessions of this process. Sessions share nothing:
    each carries its own cart snapshot, draft and in-flight guard.
    """

    def __init__(
        self,
        cart: CartStore,
        profiles: ProfileStore,
        ledger: OrderLedger,
        config: CheckoutConfig,
        lookup: PostalLookup | None = None,
    ) -> None:
        self.cart = cart
        self.profiles = profiles
        self.ledger = ledger
        self.config = config
        self.lookup = lookup
        self._sessions: dict[str, CheckoutSession] = {}

    # ─── registry ─────────────────────────────────────────────────────────────

    def get(self, session_id: str) -> CheckoutSession | None:
        return self._sessions.get(session_id)

    def _discard(self, session: CheckoutSession) -> None:
        self._sessions.pop(session.session_id, None)

    def _log(self, session: CheckoutSession) -> Any:
        return logger.bind(session_id=session.session_id, customer_id=session.customer_id)

    def _totals(self, lines: tuple[CartLine, ...] | list[CartLine]) -> Totals:
        return compute_totals(lines, self.config.per_store_fee, self.config.service_fee)

    @staticmethod
    def _require(session: CheckoutSession, operation: str, *stages: Stage) -> None:
        if session.stage not in stages:
            raise IllegalTransition(session.stage, operation)

    # ─── REVIEWING ────────────────────────────────────────────────────────────

    async def open(self, customer: Customer | None) -> CheckoutSession:
        """New session in REVIEWING with a totals preview of the current cart."""
        session = CheckoutSession(customer=customer)
        if customer is not None:
            session.totals = self._totals(await self.cart.lines(customer.customer_id))
        self._sessions[session.session_id] = session
        self._log(session).info("checkout_opened", grand_total=session.totals.grand_total)
        return session

    async def proceed(self, session: CheckoutSession) -> Result[CheckoutSession, NotReady]:
        """
        REVIEWING → CONFIRMING_ADDRESS.

        A signed-out customer gets NotReady(SIGN_IN_REQUIRED) and the session
        is discarded. An empty cart leaves the session in REVIEWING.
        """
        self._require(session, "proceed", Stage.REVIEWING)
        bound = self._log(session)

        if session.customer is None:
            session.move(Stage.CANCELLED)
            self._discard(session)
            bound.info("sign_in_required")
            return Error(NotReady(NotReadyReason.SIGN_IN_REQUIRED, next=SIGN_IN_NEXT))

        lines = tuple(await self.cart.lines(session.customer.customer_id))
        if not lines:
            return Error(NotReady(NotReadyReason.EMPTY_CART))

        session.lines = lines
        session.totals = self._totals(lines)
        session.profile = await self._load_profile(session)
        session.draft = AddressDraft.from_address(
            session.profile.address if session.profile else None
        )
        session.move(Stage.CONFIRMING_ADDRESS)
        bound.info(
            "checkout_proceeded",
            lines=len(lines),
            stores=session.totals.store_count,
            grand_total=session.totals.grand_total,
        )
        return Ok(session)

    async def _load_profile(self, session: CheckoutSession) -> Profile | None:
        assert session.customer is not None
        customer_id = session.customer.customer_id
        fetched = await L.catching_async(
            lambda: self.profiles.get(customer_id),
            on_error=str,
        )
        match fetched:
            case Ok(Ok(profile)):
                return profile
            case Ok(Error(e)):
                self._log(session).warning("profile_unavailable", error=e.message)
            case Error(e):
                self._log(session).warning("profile_unavailable", error=e)
        return None

    # ─── CONFIRMING_ADDRESS ───────────────────────────────────────────────────

    async def lookup_postal_code(
        self,
        session: CheckoutSession,
        postal_code: str,
    ) -> Result[PostalMatch | None, PostalLookupError]:
        """
        Prefill street / neighborhood / city / state from the postal code.

        Never validates: an unknown code or a failed lookup leaves the rest
        of the draft as it was.
        """
        self._require(session, "lookup_postal_code", Stage.CONFIRMING_ADDRESS)
        session.draft.update(postal_code=postal_code.strip())

        digits = normalize_digits(postal_code)
        if self.lookup is None or not is_valid_postal_code(digits):
            return Ok(None)

        lookup = self.lookup
        fetched = await L.catching_async(lambda: lookup.lookup(digits), on_error=_lookup_crashed)
        match fetched:
            case Ok(Ok(None)):
                return Ok(None)
            case Ok(Ok(found)):
                session.draft.update(
                    street=found.street or None,
                    neighborhood=found.neighborhood or None,
                    city=found.city or None,
                    region=found.region or None,
                )
                return Ok(found)
            case Ok(Error(e)) | Error(e):
                self._log(session).warning("postal_lookup_failed", postal_code=digits, error=e.message)
                return Error(e)

    def edit_address(self, session: CheckoutSession, **fields: str | None) -> CheckoutSession:
        """Update draft fields; clears recorded problems."""
        self._require(session, "edit_address", Stage.CONFIRMING_ADDRESS)
        session.draft.update(**fields)
        session.problems = {}
        return session

    async def _verify(self, session: CheckoutSession) -> Result[DeliveryAddress, AddressProblem]:
        contact = contact_problems(session.profile)
        verified = await verify_address(session.draft, self.config.area)
        if not contact:
            return verified
        match verified:
            case Error(ValidationProblem(fields=fields)):
                return Error(ValidationProblem.of(**{**fields, **contact}))
            case Error(ServiceabilityProblem()):
                return verified
            case _:
                return Error(ValidationProblem.of(**contact))

    async def _save_address(self, session: CheckoutSession, address: DeliveryAddress) -> None:
        assert session.customer is not None
        customer_id = session.customer.customer_id
        saved = await L.catching_async(
            lambda: self.profiles.upsert_address(customer_id, address),
            on_error=str,
        )
        match saved:
            case Ok(Ok(_)):
                pass
            case Ok(Error(e)):
                self._log(session).warning("profile_address_not_saved", error=e.message)
            case Error(e):
                self._log(session).warning("profile_address_not_saved", error=e)

    # ─── confirm ──────────────────────────────────────────────────────────────

    async def confirm(self, session: CheckoutSession) -> Result[PaymentCode, CheckoutError]:
        """
        CONFIRMING_ADDRESS → SUBMITTING_ORDER → ISSUING_PAYMENT → READY.

        At most one ledger call per attempt: a confirm while another is
        running returns InFlight and does nothing. A READY session answers
        with its payment code again.
        """
        if session.in_flight:
            self._log(session).info("confirm_ignored_in_flight")
            return Error(InFlight(session.session_id))

        match session.stage:
            case Stage.READY if session.payment is not None:
                return Ok(session.payment)
            case Stage.CANCELLED:
                return Error(Cancelled(order_id=session.order.order_id if session.order else None))
            case Stage.CONFIRMING_ADDRESS:
                pass
            case stage:
                raise IllegalTransition(stage, "confirm")

        session.in_flight = True
        try:
            return await self._confirm(session)
        finally:
            session.in_flight = False

    async def _confirm(self, session: CheckoutSession) -> Result[PaymentCode, CheckoutError]:
        bound = self._log(session)
        customer = session.customer
        if customer is None:
            raise IllegalTransition(session.stage, "confirm")

        match await self._verify(session):
            case Ok(address):
                pass
            case Error(problem):
                session.problems = problem_fields(problem)
                bound.info("address_rejected", code=problem.code, fields=sorted(session.problems))
                return Error(problem)

        if session.stage is Stage.CANCELLED:
            return Error(Cancelled())

        session.problems = {}
        session.address = address
        await self._save_address(session, address)
        if session.stage is Stage.CANCELLED:
            return Error(Cancelled())

        session.move(Stage.SUBMITTING_ORDER)
        draft = OrderDraft(
            customer=customer,
            lines=session.lines,
            totals=session.totals,
            address=address,
            contact=session.profile.contact if session.profile else Contact(),
        )

        match await self._submit(draft):
            case Ok(receipt):
                session.order = Order.recorded(draft, receipt)
                bound.info(
                    "order_submitted",
                    order_id=receipt.order_id,
                    grand_total=draft.totals.grand_total,
                )
            case Error(e):
                if session.stage is Stage.CANCELLED:
                    return Error(Cancelled())
                reason = (
                    FailureReason.TIMEOUT
                    if e.kind is LedgerErrorKind.TIMEOUT
                    else FailureReason.LEDGER_ERROR
                )
                session.failure = Failure(reason, e.message)
                session.move(Stage.FAILED)
                bound.warning("order_submit_failed", reason=reason.value, error=e.message)
                return Error(e)

        if session.stage is Stage.CANCELLED:
            bound.warning("order_recorded_after_cancel", order_id=receipt.order_id)
            return Error(Cancelled(order_id=receipt.order_id))

        session.move(Stage.ISSUING_PAYMENT)
        return await self._issue(session)

    async def _submit(self, draft: OrderDraft) -> Result[LedgerReceipt, LedgerError]:
        timeout = self.config.ledger_timeout
        try:
            async with asyncio.timeout(timeout):
                sent = await L.catching_async(
                    lambda: self.ledger.submit_order(draft),
                    on_error=_ledger_crashed,
                )
        except TimeoutError:
            return Error(LedgerError(LedgerErrorKind.TIMEOUT, f"Ledger did not answer within {timeout}s"))

        match sent:
            case Ok(result):
                return result
            case Error(e):
                return Error(e)

    # ─── ISSUING_PAYMENT ──────────────────────────────────────────────────────

    async def _issue(self, session: CheckoutSession) -> Result[PaymentCode, CheckoutError]:
        bound = self._log(session)
        order = session.order
        assert order is not None

        match issue(order.order_id, order.amount, self.config.pix):
            case Ok(code):
                session.payment = code
                session.failure = None
                session.move(Stage.READY)
                self._discard(session)
                bound.info(
                    "payment_code_issued",
                    order_id=order.order_id,
                    initiation=code.initiation.name.lower(),
                )
                await self._clear_cart(session)
                return Ok(code)
            case Error(problem):
                session.failure = Failure(FailureReason.CONFIGURATION_ERROR, problem.message)
                session.move(Stage.FAILED)
                bound.error(
                    "payment_code_failed",
                    order_id=order.order_id,
                    setting=problem.setting,
                    error=problem.message,
                )
                return Error(problem)

    async def _clear_cart(self, session: CheckoutSession) -> None:
        assert session.customer is not None
        customer_id = session.customer.customer_id
        cleared = await L.catching_async(lambda: self.cart.clear(customer_id), on_error=str)
        match cleared:
            case Ok(_):
                pass
            case Error(e):
                self._log(session).error("cart_not_cleared", error=e)

    async def reissue(self, session: CheckoutSession) -> Result[PaymentCode, CheckoutError]:
        """
        Derive the payment code again from the recorded order.

        For FAILED(CONFIGURATION_ERROR) after the settings were fixed, and for
        sessions cancelled after their order was recorded. No ledger or
        profile writes.
        """
        if session.payment is not None:
            return Ok(session.payment)
        order = session.order
        if order is None:
            raise IllegalTransition(session.stage, "reissue")

        if session.stage is Stage.CANCELLED:
            result: Result[PaymentCode, ConfigurationProblem] = issue(
                order.order_id, order.amount, self.config.pix
            )
            match result:
                case Ok(code):
                    return Ok(code)
                case Error(problem):
                    return Error(problem)

        self._require(session, "reissue", Stage.FAILED)
        session.move(Stage.ISSUING_PAYMENT)
        return await self._issue(session)

    # ─── FAILED / CANCELLED ───────────────────────────────────────────────────

    def revise(self, session: CheckoutSession) -> CheckoutSession:
        """FAILED → CONFIRMING_ADDRESS, only while no order was recorded."""
        if session.stage is not Stage.FAILED or session.order is not None:
            raise IllegalTransition(session.stage, Stage.CONFIRMING_ADDRESS)
        session.failure = None
        session.move(Stage.CONFIRMING_ADDRESS)
        self._log(session).info("checkout_revised")
        return session

    def cancel(self, session: CheckoutSession) -> Cancelled:
        """
        Discard the session from any non-terminal stage. No writes.

        A confirm suspended on the ledger keeps running; if it records an
        order, the id lands on this session and that confirm reports it.
        """
        order_id = session.order.order_id if session.order else None
        if session.stage is Stage.CANCELLED:
            return Cancelled(order_id=order_id)
        if session.is_terminal:
            raise IllegalTransition(session.stage, Stage.CANCELLED)

        session.move(Stage.CANCELLED)
        self._discard(session)
        self._log(session).info("checkout_cancelled", order_id=order_id, in_flight=session.in_flight)
        return Cancelled(order_id=order_id)

    # ─── read path ────────────────────────────────────────────────────────────

    async def orders(self, customer: Customer) -> Result[list[LedgerOrder], LedgerError]:
        """Orders the ledger holds for the customer, newest first."""
        timeout = self.config.ledger_timeout
        try:
            async with asyncio.timeout(timeout):
                listed = await L.catching_async(
                    lambda: self.ledger.list_orders(customer),
                    on_error=_ledger_crashed,
                )
        except TimeoutError:
            return Error(LedgerError(LedgerErrorKind.TIMEOUT, f"Ledger did not answer within {timeout}s"))

        match listed:
            case Ok(result):
                return result
            case Error(e):
                return Error(e)


__all__ = ("SIGN_IN_NEXT", "contact_problems", "problem_fields", "Checkout")
