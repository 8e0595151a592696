"""
HTTP — FastAPI surface for the checkout engine.

    from vitrine.http import create_app

    app = create_app(checkout)
"""

from vitrine.http._schemas import (
    PostalCodeIn,
    AddressIn,
    TotalsOut,
    LineOut,
    DraftOut,
    PaymentOut,
    AddressOut,
    FailureOut,
    SessionOut,
    PostalMatchOut,
    PostalLookupOut,
    CancelledOut,
    OrderOut,
    ProblemOut,
)
from vitrine.http._app import (
    status_for,
    problem,
    current_customer,
    owned_session,
    create_app,
    app_from_settings,
)

__all__ = (
    # Schemas
    "PostalCodeIn",
    "AddressIn",
    "TotalsOut",
    "LineOut",
    "DraftOut",
    "PaymentOut",
    "AddressOut",
    "FailureOut",
    "SessionOut",
    "PostalMatchOut",
    "PostalLookupOut",
    "CancelledOut",
    "OrderOut",
    "ProblemOut",
    # App
    "status_for",
    "problem",
    "current_customer",
    "owned_session",
    "create_app",
    "app_from_settings",
)
