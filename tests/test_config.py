import pytest
from pydantic import ValidationError

from vitrine.cart import MemoryCart
from vitrine.config import Settings
from vitrine.ledger import AirtableLedger, MemoryLedger, SQLAlchemyLedger
from vitrine.pix import Initiation
from vitrine.profile import MemoryProfileStore, SQLAlchemyProfileStore, ViaCepLookup
from vitrine.wiring import build_checkout


def settings(**overrides) -> Settings:
    values = {
        "delivery_fee": "20.00",
        "service_fee": "3.40",
        "serviceable_regions": "São Paulo/SP; Santos/SP",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSettings:
    def test_checkout_config(self) -> None:
        config = settings(pix_key="pix@vitrine.com.br").checkout_config()

        assert config.per_store_fee == 2000
        assert config.service_fee == 340
        assert config.area.labels == ("São Paulo/SP", "Santos/SP")
        assert config.pix.key == "pix@vitrine.com.br"
        assert config.pix.merchant_name == "LOOK PAGAMENTOS"
        assert config.pix.city == "SAO PAULO"
        assert config.pix.initiation is Initiation.STATIC
        assert config.ledger_timeout == 10.0

    def test_missing_key_is_allowed(self) -> None:
        assert settings().checkout_config().pix.key is None

    def test_dynamic_initiation(self) -> None:
        config = settings(pix_initiation="dynamic").checkout_config()

        assert config.pix.initiation is Initiation.DYNAMIC

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VITRINE_DELIVERY_FEE", "15")
        monkeypatch.setenv("VITRINE_SERVICE_FEE", "0")
        monkeypatch.setenv("VITRINE_SERVICEABLE_REGIONS", "Santos/SP")
        monkeypatch.setenv("VITRINE_LEDGER_BACKEND", "database")

        loaded = Settings(_env_file=None)

        assert loaded.checkout_config().per_store_fee == 1500
        assert loaded.checkout_config().service_fee == 0
        assert loaded.ledger_backend == "database"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"serviceable_regions": "São Paulo"},
            {"serviceable_regions": ""},
            {"delivery_fee": "-1"},
            {"pix_currency": "BRL"},
            {"ledger_timeout": 0},
            {"ledger_backend": "sheets"},
            {"pix_initiation": "once"},
        ],
    )
    def test_rejects(self, overrides: dict[str, object]) -> None:
        with pytest.raises(ValidationError):
            settings(**overrides)


class TestWiring:
    async def test_memory_backend(self) -> None:
        checkout, close = await build_checkout(settings(), MemoryCart())
        try:
            assert isinstance(checkout.ledger, MemoryLedger)
            assert isinstance(checkout.profiles, MemoryProfileStore)
            assert isinstance(checkout.lookup, ViaCepLookup)
        finally:
            await close()

    async def test_database_backend(self) -> None:
        checkout, close = await build_checkout(
            settings(ledger_backend="database", postal_lookup_url=""),
            MemoryCart(),
        )
        try:
            assert isinstance(checkout.ledger, SQLAlchemyLedger)
            assert isinstance(checkout.profiles, SQLAlchemyProfileStore)
            assert checkout.lookup is None
        finally:
            await close()

    async def test_airtable_backend(self) -> None:
        checkout, close = await build_checkout(
            settings(ledger_backend="airtable", airtable_api_key="key", airtable_base_id="appBase"),
            MemoryCart(),
        )
        try:
            assert isinstance(checkout.ledger, AirtableLedger)
        finally:
            await close()

    async def test_airtable_without_credentials(self) -> None:
        with pytest.raises(ValueError):
            await build_checkout(settings(ledger_backend="airtable"), MemoryCart())
