"""
Profile store — read the customer's saved details, write back the address.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Protocol

from kungfu import Result, Ok

from vitrine._types import DeliveryAddress
from vitrine.profile._types import Profile, ProfileError


class ProfileStore(Protocol):
    """
    Profile store protocol.

    All methods return Result for explicit error handling.
    """

    async def get(self, customer_id: str) -> Result[Profile | None, ProfileError]:
        """Saved profile, Ok(None) if the customer has none yet."""
        ...

    async def upsert_address(
        self, customer_id: str, address: DeliveryAddress
    ) -> Result[None, ProfileError]:
        """Create the profile if missing, then replace its address."""
        ...


class MemoryProfileStore:
    """In-memory profile store for tests and examples."""

    def __init__(self, *profiles: Profile) -> None:
        self._profiles: dict[str, Profile] = {p.customer_id: p for p in profiles}
        self._lock = asyncio.Lock()
        self.upsert_calls = 0

    async def get(self, customer_id: str) -> Result[Profile | None, ProfileError]:
        async with self._lock:
            return Ok(self._profiles.get(customer_id))

    async def save(self, profile: Profile) -> None:
        async with self._lock:
            self._profiles[profile.customer_id] = profile

    async def upsert_address(
        self, customer_id: str, address: DeliveryAddress
    ) -> Result[None, ProfileError]:
        async with self._lock:
            self.upsert_calls += 1
            current = self._profiles.get(customer_id) or Profile(customer_id=customer_id)
            self._profiles[customer_id] = replace(current, address=address)
            return Ok(None)


__all__ = ("ProfileStore", "MemoryProfileStore")
