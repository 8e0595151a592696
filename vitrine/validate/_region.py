"""
Serviceable region allowlist.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass


def fold(text: str | None) -> str:
    """
    Comparison key for place names.

    Drops diacritics, case and everything that is not a letter or digit,
    so "São Paulo", "sao paulo" and "SaoPaulo" compare equal.
    """
    decomposed = unicodedata.normalize("NFKD", text or "")
    return "".join(
        ch for ch in decomposed.casefold()
        if ch.isalnum() and not unicodedata.combining(ch)
    )


def region_key(region: str | None) -> str:
    return (region or "").strip().upper()


# ═══════════════════════════════════════════════════════════════════════════════
# Locality
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Locality:
    """A served (city, region) pair, as configured."""

    city: str
    region: str

    @property
    def key(self) -> tuple[str, str]:
        return fold(self.city), region_key(self.region)

    @property
    def label(self) -> str:
        return f"{self.city}/{region_key(self.region)}"


# ═══════════════════════════════════════════════════════════════════════════════
# Service Area
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ServiceArea:
    """
    The set of localities the storefront delivers to.

    Example:
        area = ServiceArea.parse("São Paulo/SP; Santos/SP")
        area.covers("SAO PAULO", "sp")  # True
    """

    localities: tuple[Locality, ...]

    def __post_init__(self) -> None:
        if not self.localities:
            raise ValueError("Service area needs at least one locality")

    @classmethod
    def of(cls, *pairs: tuple[str, str]) -> ServiceArea:
        return cls(tuple(Locality(city, region) for city, region in pairs))

    @classmethod
    def parse(cls, spec: str | list[str] | tuple[str, ...]) -> ServiceArea:
        """
        Parse 'City/RG' entries separated by ';' (or given as a list).

        Raises ValueError on entries without a region.
        """
        entries = spec.split(";") if isinstance(spec, str) else list(spec)
        localities: list[Locality] = []
        for raw in entries:
            entry = raw.strip()
            if not entry:
                continue
            city, sep, region = entry.rpartition("/")
            if not sep or not city.strip() or not region.strip():
                raise ValueError(f"Expected 'City/RG', got {entry!r}")
            localities.append(Locality(city.strip(), region.strip()))
        return cls(tuple(localities))

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(loc.label for loc in self.localities)

    def covers(self, city: str | None, region: str | None) -> bool:
        key = (fold(city), region_key(region))
        return any(loc.key == key for loc in self.localities)


def is_serviceable_region(city: str | None, region: str | None, area: ServiceArea) -> bool:
    """Case- and diacritic-insensitive allowlist check."""
    return area.covers(city, region)


__all__ = (
    "fold",
    "region_key",
    "Locality",
    "ServiceArea",
    "is_serviceable_region",
)
