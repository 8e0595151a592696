"""
FastAPI surface for the checkout engine.

    app = create_app(checkout)
    # uvicorn.run(app)

Auth is upstream: the gateway forwards X-Customer-Id / X-Customer-Email.
No X-Customer-Id means signed out.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Annotated, Any

import fastapi
from fastapi import Depends, Header, Request
from fastapi.responses import JSONResponse
from kungfu import Ok, Error

from vitrine import log
from vitrine._types import Customer
from vitrine.cart import CartStore
from vitrine.checkout import (
    Cancelled,
    Checkout,
    CheckoutSession,
    IllegalTransition,
    InFlight,
    NotReady,
    NotReadyReason,
)
from vitrine.http._schemas import (
    AddressIn,
    CancelledOut,
    OrderOut,
    PostalCodeIn,
    PostalLookupOut,
    PostalMatchOut,
    ProblemOut,
    SessionOut,
)
from vitrine.ledger import LedgerError, LedgerErrorKind
from vitrine.pix import ConfigurationProblem
from vitrine.config import Settings
from vitrine.validate import ServiceabilityProblem, ValidationProblem
from vitrine.wiring import build_checkout

logger = log.get_logger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Error → HTTP status
# ═══════════════════════════════════════════════════════════════════════════════


def status_for(error: Any) -> int:
    match error:
        case NotReady(reason=NotReadyReason.SIGN_IN_REQUIRED):
            return 401
        case NotReady() | InFlight() | Cancelled():
            return 409
        case ValidationProblem() | ServiceabilityProblem():
            return 422
        case LedgerError(kind=LedgerErrorKind.TIMEOUT):
            return 504
        case LedgerError():
            return 502
        case ConfigurationProblem():
            return 500
        case _:
            return 502


def problem(error: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_for(error),
        content=ProblemOut.from_domain(error).model_dump(exclude_none=True),
    )


def _problem(status: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"code": code, "message": message})


# ═══════════════════════════════════════════════════════════════════════════════
# Dependencies
# ═══════════════════════════════════════════════════════════════════════════════


def current_customer(
    x_customer_id: Annotated[str | None, Header()] = None,
    x_customer_email: Annotated[str | None, Header()] = None,
) -> Customer | None:
    if not x_customer_id:
        return None
    return Customer(customer_id=x_customer_id, email=x_customer_email or None)


def engine(request: Request) -> Checkout:
    return request.app.state.checkout


CustomerDep = Annotated[Customer | None, Depends(current_customer)]
EngineDep = Annotated[Checkout, Depends(engine)]


class SessionNotFound(Exception):
    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"No checkout session {session_id}")


class SignInRequired(Exception):
    pass


def owned_session(checkout: Checkout, session_id: str, customer: Customer | None) -> CheckoutSession:
    """The session, if it exists and belongs to the caller."""
    if customer is None:
        raise SignInRequired()
    session = checkout.get(session_id)
    if session is None or session.customer_id != customer.customer_id:
        raise SessionNotFound(session_id)
    return session


# ═══════════════════════════════════════════════════════════════════════════════
# App
# ═══════════════════════════════════════════════════════════════════════════════

Lifespan = Callable[[fastapi.FastAPI], Any]


def create_app(
    checkout: Checkout | None = None,
    lifespan: Lifespan | None = None,
) -> fastapi.FastAPI:
    """
    Build the FastAPI app.

    Pass a ready Checkout, or a lifespan that puts one on app.state.checkout.
    """
    app = fastapi.FastAPI(title="vitrine checkout", lifespan=lifespan)
    if checkout is not None:
        app.state.checkout = checkout

    @app.exception_handler(IllegalTransition)
    async def _illegal(request: Request, exc: IllegalTransition) -> JSONResponse:
        return _problem(409, "illegal_transition", str(exc))

    @app.exception_handler(SessionNotFound)
    async def _not_found(request: Request, exc: SessionNotFound) -> JSONResponse:
        return _problem(404, "session_not_found", str(exc))

    @app.exception_handler(SignInRequired)
    async def _sign_in(request: Request, exc: SignInRequired) -> JSONResponse:
        return _problem(401, NotReadyReason.SIGN_IN_REQUIRED.value, "Sign in to check out")

    @app.post("/checkout", status_code=201, response_model=SessionOut)
    async def open_checkout(checkout: EngineDep, customer: CustomerDep) -> Any:
        session = await checkout.open(customer)
        match await checkout.proceed(session):
            case Ok(ready):
                return SessionOut.from_domain(ready)
            case Error(not_ready):
                if not_ready.reason is NotReadyReason.EMPTY_CART:
                    checkout.cancel(session)
                return problem(not_ready)

    @app.get("/checkout/{session_id}", response_model=SessionOut)
    async def get_checkout(session_id: str, checkout: EngineDep, customer: CustomerDep) -> Any:
        return SessionOut.from_domain(owned_session(checkout, session_id, customer))

    @app.post("/checkout/{session_id}/postal-code", response_model=PostalLookupOut)
    async def lookup_postal_code(
        session_id: str,
        body: PostalCodeIn,
        checkout: EngineDep,
        customer: CustomerDep,
    ) -> Any:
        session = owned_session(checkout, session_id, customer)
        match await checkout.lookup_postal_code(session, body.to_domain()):
            case Ok(found):
                return PostalLookupOut(
                    match=PostalMatchOut.from_domain(found),
                    session=SessionOut.from_domain(session),
                )
            case Error(e):
                return problem(e)

    @app.patch("/checkout/{session_id}/address", response_model=SessionOut)
    async def edit_address(
        session_id: str,
        body: AddressIn,
        checkout: EngineDep,
        customer: CustomerDep,
    ) -> Any:
        session = owned_session(checkout, session_id, customer)
        return SessionOut.from_domain(checkout.edit_address(session, **body.to_domain()))

    async def _settle(
        session: CheckoutSession,
        step: Callable[[CheckoutSession], Awaitable[Any]],
    ) -> Any:
        match await step(session):
            case Ok(_):
                return SessionOut.from_domain(session)
            case Error(e):
                return problem(e)

    @app.post("/checkout/{session_id}/confirm", response_model=SessionOut)
    async def confirm(session_id: str, checkout: EngineDep, customer: CustomerDep) -> Any:
        return await _settle(owned_session(checkout, session_id, customer), checkout.confirm)

    @app.post("/checkout/{session_id}/reissue", response_model=SessionOut)
    async def reissue(session_id: str, checkout: EngineDep, customer: CustomerDep) -> Any:
        return await _settle(owned_session(checkout, session_id, customer), checkout.reissue)

    @app.post("/checkout/{session_id}/revise", response_model=SessionOut)
    async def revise(session_id: str, checkout: EngineDep, customer: CustomerDep) -> Any:
        session = owned_session(checkout, session_id, customer)
        return SessionOut.from_domain(checkout.revise(session))

    @app.delete("/checkout/{session_id}", response_model=CancelledOut)
    async def cancel(session_id: str, checkout: EngineDep, customer: CustomerDep) -> Any:
        session = owned_session(checkout, session_id, customer)
        return CancelledOut.from_domain(session_id, checkout.cancel(session))

    @app.get("/orders", response_model=list[OrderOut])
    async def list_orders(checkout: EngineDep, customer: CustomerDep) -> Any:
        if customer is None:
            raise SignInRequired()
        match await checkout.orders(customer):
            case Ok(orders):
                return [OrderOut.from_domain(o) for o in orders]
            case Error(e):
                logger.warning("orders_unavailable", customer_id=customer.customer_id, error=e.message)
                return problem(e)

    return app


def app_from_settings(settings: Settings, cart: CartStore) -> fastapi.FastAPI:
    """App whose Checkout is built from settings at startup and closed at shutdown."""

    @asynccontextmanager
    async def lifespan(app: fastapi.FastAPI) -> AsyncIterator[None]:
        log.configure(settings.log_level, json=settings.log_json)
        checkout, close = await build_checkout(settings, cart)
        app.state.checkout = checkout
        logger.info("checkout_app_started", ledger=settings.ledger_backend)
        try:
            yield
        finally:
            await close()

    return create_app(lifespan=lifespan)


__all__ = (
    "status_for",
    "problem",
    "current_customer",
    "engine",
    "SessionNotFound",
    "SignInRequired",
    "owned_session",
    "create_app",
    "app_from_settings",
)
