"""
Profile — saved customer details and postal-code prefill.

    from vitrine import profile as P

    store = P.MemoryProfileStore(P.Profile("cust_1", name="Ana"))
    store = P.SQLAlchemyProfileStore(session_factory)

    lookup = P.ViaCepLookup()
    result = await lookup.lookup("01310100")
"""

from vitrine.profile._types import (
    Profile,
    ProfileError,
    PostalMatch,
    PostalLookupErrorKind,
    PostalLookupError,
)
from vitrine.profile._store import ProfileStore, MemoryProfileStore
from vitrine.profile._sqlalchemy import SQLAlchemyProfileStore
from vitrine.profile._lookup import (
    VIACEP_URL,
    PostalLookup,
    MemoryPostalLookup,
    ViaCepLookup,
    viacep_match,
)

__all__ = (
    # Types
    "Profile",
    "ProfileError",
    "PostalMatch",
    "PostalLookupErrorKind",
    "PostalLookupError",
    # Store
    "ProfileStore",
    "MemoryProfileStore",
    "SQLAlchemyProfileStore",
    # Lookup
    "VIACEP_URL",
    "PostalLookup",
    "MemoryPostalLookup",
    "ViaCepLookup",
    "viacep_match",
)
