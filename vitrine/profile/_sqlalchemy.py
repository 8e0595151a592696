"""
SQLAlchemy profile store — profiles table, keyed by customer id.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kungfu import Result, Ok, Error

from vitrine._types import DeliveryAddress
from vitrine.db import ProfileTable
from vitrine.profile._types import Profile, ProfileError


def _address(row: ProfileTable) -> DeliveryAddress | None:
    parts = (row.postal_code, row.street, row.number, row.neighborhood, row.city, row.region)
    if not all(parts):
        return None
    return DeliveryAddress(
        postal_code=row.postal_code or "",
        street=row.street or "",
        number=row.number or "",
        neighborhood=row.neighborhood or "",
        city=row.city or "",
        region=row.region or "",
        complement=row.complement,
    )


def _write_address(row: ProfileTable, address: DeliveryAddress) -> None:
    row.postal_code = address.postal_code
    row.street = address.street
    row.number = address.number
    row.complement = address.complement
    row.neighborhood = address.neighborhood
    row.city = address.city
    row.region = address.region
    row.updated_at = datetime.now()


class SQLAlchemyProfileStore:
    """ProfileStore over the profiles table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, customer_id: str) -> Result[Profile | None, ProfileError]:
        try:
            async with self._session_factory() as session:
                row = await session.get(ProfileTable, customer_id)
        except Exception as e:
            return Error(ProfileError(f"Failed to get profile: {e}", e))

        if row is None:
            return Ok(None)
        return Ok(Profile(
            customer_id=row.customer_id,
            name=row.name,
            phone=row.phone,
            tax_id=row.tax_id,
            address=_address(row),
        ))

    async def save(self, profile: Profile) -> Result[None, ProfileError]:
        """Insert or replace the whole profile."""
        try:
            async with self._session_factory() as session:
                row = await session.get(ProfileTable, profile.customer_id)
                if row is None:
                    row = ProfileTable(customer_id=profile.customer_id)
                    session.add(row)
                row.name = profile.name
                row.phone = profile.phone
                row.tax_id = profile.tax_id
                if profile.address is not None:
                    _write_address(row, profile.address)
                await session.commit()
        except Exception as e:
            return Error(ProfileError(f"Failed to save profile: {e}", e))
        return Ok(None)

    async def upsert_address(
        self, customer_id: str, address: DeliveryAddress
    ) -> Result[None, ProfileError]:
        try:
            async with self._session_factory() as session:
                row = await session.get(ProfileTable, customer_id)
                if row is None:
                    row = ProfileTable(customer_id=customer_id)
                    session.add(row)
                _write_address(row, address)
                await session.commit()
        except Exception as e:
            return Error(ProfileError(f"Failed to save address: {e}", e))
        return Ok(None)


__all__ = ("SQLAlchemyProfileStore",)
