"""
Postal lookup — resolve a CEP to street / neighborhood / city / state.

Used only to prefill the address draft. Serviceability is never decided here.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx
from combinators import lift as L
from kungfu import Result, Ok, Error

from vitrine.profile._types import PostalLookupError, PostalLookupErrorKind, PostalMatch
from vitrine.validate import is_valid_postal_code, normalize_digits

VIACEP_URL = "https://viacep.com.br/ws/{cep}/json/"


class PostalLookup(Protocol):
    async def lookup(self, postal_code: str) -> Result[PostalMatch | None, PostalLookupError]:
        """Ok(None) when the code is unknown."""
        ...


class MemoryPostalLookup:
    """Lookup table for tests and examples. Keys are digits-only."""

    def __init__(self, *matches: PostalMatch) -> None:
        self._matches = {normalize_digits(m.postal_code): m for m in matches}
        self.calls = 0

    async def lookup(self, postal_code: str) -> Result[PostalMatch | None, PostalLookupError]:
        self.calls += 1
        return Ok(self._matches.get(normalize_digits(postal_code)))


def _unavailable(e: Exception) -> PostalLookupError:
    return PostalLookupError(PostalLookupErrorKind.UNAVAILABLE, f"Postal lookup unreachable: {e}")


def viacep_match(digits: str, data: dict[str, Any]) -> PostalMatch | None:
    """{"erro": true} means the code does not exist."""
    if data.get("erro") in (True, "true"):
        return None
    return PostalMatch(
        postal_code=digits,
        street=str(data.get("logradouro") or ""),
        neighborhood=str(data.get("bairro") or ""),
        city=str(data.get("localidade") or ""),
        region=str(data.get("uf") or ""),
    )


class ViaCepLookup:
    """
    PostalLookup over the public ViaCEP API.

    Example:
        async with httpx.AsyncClient(timeout=5) as client:
            lookup = ViaCepLookup(client=client)
            match await lookup.lookup("01310-100"):
                case Ok(PostalMatch() as found):
                    found.city       # "São Paulo"
                case Ok(None):
                    ...              # unknown code
                case Error(e):
                    ...              # service down: let the customer type it
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        url_template: str = VIACEP_URL,
    ) -> None:
        self._client = client or httpx.AsyncClient(timeout=5.0)
        self._url_template = url_template

    async def aclose(self) -> None:
        await self._client.aclose()

    async def lookup(self, postal_code: str) -> Result[PostalMatch | None, PostalLookupError]:
        digits = normalize_digits(postal_code)
        if not is_valid_postal_code(digits):
            return Ok(None)

        url = self._url_template.format(cep=digits)
        sent = await L.catching_async(lambda: self._client.get(url), on_error=_unavailable)
        match sent:
            case Ok(response):
                pass
            case Error(e):
                return Error(e)

        if response.status_code == 400:
            return Ok(None)
        if not response.is_success:
            return Error(PostalLookupError(
                PostalLookupErrorKind.UNAVAILABLE,
                f"Postal lookup answered {response.status_code}",
            ))
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            return Error(PostalLookupError(PostalLookupErrorKind.MALFORMED, "Postal lookup returned no object"))
        return Ok(viacep_match(digits, data))


__all__ = (
    "VIACEP_URL",
    "PostalLookup",
    "MemoryPostalLookup",
    "viacep_match",
    "ViaCepLookup",
)
