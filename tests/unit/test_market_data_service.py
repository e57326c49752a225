"""
Unit tests for MarketDataService.

Tests cover:
- Routing symbols to the provider of their asset type
- No provider calls for an empty portfolio
- Per-class failure isolation and timeouts
- Price cache and TTL expiration
- Provider selection from settings
"""

import time
from decimal import Decimal

import pytest

from investledger.config.settings import Settings
from investledger.domain.models import AssetType
from investledger.domain.views import Position
from investledger.providers import CoinGeckoPriceProvider, StubPriceProvider, YahooPriceProvider
from investledger.services import MarketDataService

from tests.conftest import (
    CRYPTO_PRICES,
    EQUITY_PRICES,
    DeterministicPriceProvider,
    FailingPriceProvider,
    SlowPriceProvider,
)


def _position(symbol: str, asset_type: AssetType) -> Position:
    return Position(symbol=symbol, asset_type=asset_type, quantity=Decimal("1"))


# =============================================================================
# BASIC PRICE RETRIEVAL TESTS
# =============================================================================


class TestGetPrices:
    """Tests for basic price retrieval."""

    def test_routes_symbols_by_asset_type(
        self,
        market_data_service: MarketDataService,
        crypto_provider: DeterministicPriceProvider,
        equity_provider: DeterministicPriceProvider,
    ):
        """
        GIVEN crypto and equity positions
        WHEN I get prices
        THEN each provider receives only its own symbols
        """
        prices = market_data_service.get_prices([
            _position("BTC", AssetType.CRYPTO),
            _position("AAPL", AssetType.EQUITY),
            _position("ETH", AssetType.CRYPTO),
        ])

        assert prices.crypto_prices == {"BTC": 60000.0, "ETH": 3000.0}
        assert prices.equity_prices == {"AAPL": 185.5}
        assert prices.errors == []
        assert crypto_provider.calls == [["BTC", "ETH"]]
        assert equity_provider.calls == [["AAPL"]]

    def test_empty_positions_make_no_calls(
        self,
        market_data_service: MarketDataService,
        crypto_provider: DeterministicPriceProvider,
        equity_provider: DeterministicPriceProvider,
    ):
        """
        GIVEN no positions
        WHEN I get prices
        THEN both maps are empty and no provider is called
        """
        prices = market_data_service.get_prices([])

        assert prices.crypto_prices == {}
        assert prices.equity_prices == {}
        assert crypto_provider.calls == []
        assert equity_provider.calls == []

    def test_duplicate_and_lowercase_symbols_are_deduplicated(
        self,
        market_data_service: MarketDataService,
        equity_provider: DeterministicPriceProvider,
    ):
        """
        GIVEN the same symbol held twice in different case
        WHEN I get prices
        THEN the provider is asked for it once, upper-cased
        """
        market_data_service.get_prices([
            _position("msft", AssetType.EQUITY),
            _position("MSFT", AssetType.EQUITY),
        ])

        assert equity_provider.calls == [["MSFT"]]

    def test_unknown_symbol_is_omitted(self, market_data_service: MarketDataService):
        """
        GIVEN a symbol the provider has no price for
        WHEN I get prices
        THEN it is absent from the map without an error
        """
        prices = market_data_service.get_prices([_position("ZZZZ", AssetType.EQUITY)])

        assert prices.equity_prices == {}
        assert prices.errors == []


# =============================================================================
# FAILURE ISOLATION TESTS
# =============================================================================


class TestFailureIsolation:
    """Tests for degraded price lookups."""

    def test_failing_crypto_does_not_affect_equity(self, equity_provider):
        """
        GIVEN a crypto provider that raises
        WHEN I get prices for both classes
        THEN equity prices are returned and the crypto failure is an error entry
        """
        service = MarketDataService(FailingPriceProvider(), equity_provider)

        prices = service.get_prices([
            _position("BTC", AssetType.CRYPTO),
            _position("SPY", AssetType.EQUITY),
        ])

        assert prices.crypto_prices == {}
        assert prices.equity_prices == {"SPY": 450.0}
        assert len(prices.errors) == 1
        assert "crypto" in prices.errors[0]
        assert "Network unavailable" in prices.errors[0]
        assert prices.failed_asset_types == {AssetType.CRYPTO}

    def test_both_failing_still_returns(self):
        """
        GIVEN two failing providers
        WHEN I get prices
        THEN an empty PriceData with two errors is returned
        """
        service = MarketDataService(FailingPriceProvider(), FailingPriceProvider())

        prices = service.get_prices([
            _position("BTC", AssetType.CRYPTO),
            _position("SPY", AssetType.EQUITY),
        ])

        assert prices.crypto_prices == {}
        assert prices.equity_prices == {}
        assert len(prices.errors) == 2
        assert prices.failed_asset_types == {AssetType.CRYPTO, AssetType.EQUITY}

    def test_slow_provider_times_out(self, crypto_provider):
        """
        GIVEN an equity provider slower than the fetch timeout
        WHEN I get prices
        THEN crypto prices are returned and the equity lookup reports a timeout
        """
        service = MarketDataService(
            crypto_provider,
            SlowPriceProvider(delay_seconds=1.0, prices={"SPY": 450.0}),
            fetch_timeout_seconds=0.1,
        )

        started = time.monotonic()
        prices = service.get_prices([
            _position("BTC", AssetType.CRYPTO),
            _position("SPY", AssetType.EQUITY),
        ])
        elapsed = time.monotonic() - started

        assert prices.crypto_prices == {"BTC": 60000.0}
        assert prices.equity_prices == {}
        assert any("timed out" in e for e in prices.errors)
        assert prices.failed_asset_types == {AssetType.EQUITY}
        assert elapsed < 0.9


# =============================================================================
# CACHE TESTS
# =============================================================================


class TestPriceCache:
    """Tests for the per-symbol price cache."""

    def test_cached_prices_skip_provider(
        self,
        market_data_service: MarketDataService,
        equity_provider: DeterministicPriceProvider,
    ):
        """
        GIVEN a price fetched moments ago
        WHEN I get the same price again
        THEN the provider is not called a second time
        """
        positions = [_position("AAPL", AssetType.EQUITY)]

        first = market_data_service.get_prices(positions)
        second = market_data_service.get_prices(positions)

        assert first.equity_prices == second.equity_prices == {"AAPL": 185.5}
        assert len(equity_provider.calls) == 1

    def test_only_uncached_symbols_are_fetched(
        self,
        market_data_service: MarketDataService,
        equity_provider: DeterministicPriceProvider,
    ):
        """
        GIVEN AAPL already cached
        WHEN I ask for AAPL and MSFT
        THEN only MSFT is fetched
        """
        market_data_service.get_prices([_position("AAPL", AssetType.EQUITY)])

        prices = market_data_service.get_prices([
            _position("AAPL", AssetType.EQUITY),
            _position("MSFT", AssetType.EQUITY),
        ])

        assert prices.equity_prices == {"AAPL": 185.5, "MSFT": 378.25}
        assert equity_provider.calls == [["AAPL"], ["MSFT"]]

    def test_expired_cache_refetches(self, crypto_provider, equity_provider):
        """
        GIVEN a zero TTL
        WHEN I get prices twice
        THEN the provider is called twice
        """
        service = MarketDataService(crypto_provider, equity_provider, cache_ttl_seconds=0)
        positions = [_position("BTC", AssetType.CRYPTO)]

        service.get_prices(positions)
        service.get_prices(positions)

        assert len(crypto_provider.calls) == 2

    def test_clear_cache(
        self,
        market_data_service: MarketDataService,
        crypto_provider: DeterministicPriceProvider,
    ):
        """
        GIVEN a cached price
        WHEN I clear the cache
        THEN the next lookup calls the provider again
        """
        positions = [_position("ETH", AssetType.CRYPTO)]
        market_data_service.get_prices(positions)

        market_data_service.clear_cache()
        market_data_service.get_prices(positions)

        assert len(crypto_provider.calls) == 2

    def test_failures_are_not_cached(self, equity_provider):
        """
        GIVEN a crypto provider that failed
        WHEN I ask again
        THEN the provider is retried
        """
        failing = FailingPriceProvider()
        service = MarketDataService(failing, equity_provider)
        positions = [_position("BTC", AssetType.CRYPTO)]

        service.get_prices(positions)
        service.get_prices(positions)

        assert failing.calls == 2


# =============================================================================
# CONFIGURATION TESTS
# =============================================================================


class TestFromSettings:
    """Tests for provider selection."""

    def test_stub_providers(self):
        """
        GIVEN market_data_provider=stub
        WHEN I build the service from settings
        THEN the stub providers answer with fixed prices
        """
        service = MarketDataService.from_settings(Settings(market_data_provider="stub"))

        prices = service.get_prices([_position("BTC", AssetType.CRYPTO)])

        assert isinstance(service._providers[AssetType.CRYPTO], StubPriceProvider)
        assert prices.crypto_prices["BTC"] > 0

    def test_live_providers(self):
        """
        GIVEN market_data_provider=live
        WHEN I build the service from settings
        THEN CoinGecko and Yahoo providers are used with the configured timeouts
        """
        settings = Settings(market_data_provider="live", price_fetch_timeout_seconds=3.0)

        service = MarketDataService.from_settings(settings)

        crypto = service._providers[AssetType.CRYPTO]
        assert isinstance(crypto, CoinGeckoPriceProvider)
        assert crypto._timeout == 3.0
        assert isinstance(service._providers[AssetType.EQUITY], YahooPriceProvider)


def test_deterministic_price_tables_do_not_overlap():
    """Crypto and equity fixtures use distinct symbols."""
    assert not set(CRYPTO_PRICES) & set(EQUITY_PRICES)
