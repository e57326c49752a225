"""
Unit tests for price providers.

Tests cover:
- CoinGecko id mapping, USD-pegged coins and unmapped symbols
- CoinGecko retries and PriceProviderError after exhausting them
- Yahoo Finance info/history fallbacks and per-symbol failures
- Stub provider tables
"""

from unittest.mock import MagicMock, PropertyMock, patch

import pandas as pd
import pytest
import requests

from investledger.core.exceptions import PriceProviderError
from investledger.providers import CoinGeckoPriceProvider, StubPriceProvider, YahooPriceProvider


def _response(payload: dict) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


# =============================================================================
# COINGECKO TESTS
# =============================================================================


class TestCoinGeckoPriceProvider:
    """Tests for CoinGeckoPriceProvider with a mocked HTTP client."""

    def test_maps_symbols_to_coin_ids(self):
        """
        GIVEN BTC and ETH
        WHEN I get prices
        THEN one request asks for bitcoin and ethereum and prices map back to symbols
        """
        http = MagicMock()
        http.get.return_value = _response({"bitcoin": {"usd": 65000}, "ethereum": {"usd": 3200.5}})
        provider = CoinGeckoPriceProvider(base_url="https://cg.test/api/v3/", http_client=http)

        prices = provider.get_prices(["btc", "ETH"])

        assert prices == {"BTC": 65000.0, "ETH": 3200.5}
        http.get.assert_called_once()
        args, kwargs = http.get.call_args
        assert args[0] == "https://cg.test/api/v3/simple/price"
        assert kwargs["params"] == {"ids": "bitcoin,ethereum", "vs_currencies": "usd"}

    def test_usd_pegged_coins_need_no_request(self):
        """
        GIVEN only USDC and USDT
        WHEN I get prices
        THEN both are 1.0 and no request is made
        """
        http = MagicMock()
        provider = CoinGeckoPriceProvider(http_client=http)

        prices = provider.get_prices(["USDC", "USDT"])

        assert prices == {"USDC": 1.0, "USDT": 1.0}
        http.get.assert_not_called()

    def test_unmapped_symbol_is_skipped(self):
        """
        GIVEN a symbol with no CoinGecko id
        WHEN I get prices
        THEN it is omitted and mapped symbols are still priced
        """
        http = MagicMock()
        http.get.return_value = _response({"solana": {"usd": 145}})
        provider = CoinGeckoPriceProvider(http_client=http)

        prices = provider.get_prices(["SOL", "NOTACOIN"])

        assert prices == {"SOL": 145.0}

    def test_missing_price_in_payload_is_skipped(self):
        """
        GIVEN a response without the requested coin
        WHEN I get prices
        THEN the symbol is omitted
        """
        http = MagicMock()
        http.get.return_value = _response({})
        provider = CoinGeckoPriceProvider(http_client=http)

        assert provider.get_prices(["BTC"]) == {}

    def test_retries_then_succeeds(self):
        """
        GIVEN a first request that fails with a connection error
        WHEN I get prices with one retry
        THEN the second attempt's prices are returned
        """
        http = MagicMock()
        http.get.side_effect = [
            requests.ConnectionError("reset"),
            _response({"bitcoin": {"usd": 64000}}),
        ]
        provider = CoinGeckoPriceProvider(retries=1, http_client=http)

        prices = provider.get_prices(["BTC"])

        assert prices == {"BTC": 64000.0}
        assert http.get.call_count == 2

    def test_exhausted_retries_raise(self):
        """
        GIVEN every request failing
        WHEN I get prices with two retries
        THEN PriceProviderError is raised after three attempts
        """
        http = MagicMock()
        http.get.side_effect = requests.Timeout("slow")
        provider = CoinGeckoPriceProvider(retries=2, http_client=http)

        with pytest.raises(PriceProviderError, match="CoinGecko"):
            provider.get_prices(["BTC"])
        assert http.get.call_count == 3

    def test_http_error_status_raises(self):
        """
        GIVEN a 429 response
        WHEN I get prices without retries
        THEN PriceProviderError is raised
        """
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("429 Too Many Requests")
        http = MagicMock()
        http.get.return_value = response
        provider = CoinGeckoPriceProvider(retries=0, http_client=http)

        with pytest.raises(PriceProviderError, match="429"):
            provider.get_prices(["ETH"])


# =============================================================================
# YAHOO FINANCE TESTS
# =============================================================================


def _ticker(info=None, closes=None) -> MagicMock:
    ticker = MagicMock()
    ticker.info = info if info is not None else {}
    ticker.history.return_value = pd.DataFrame({"Close": closes or []})
    return ticker


class TestYahooPriceProvider:
    """Tests for YahooPriceProvider with yfinance patched."""

    def test_uses_regular_market_price(self):
        """
        GIVEN a ticker whose info carries regularMarketPrice
        WHEN I get prices
        THEN that price is returned without reading history
        """
        ticker = _ticker(info={"regularMarketPrice": 190.12})
        yf = MagicMock()
        yf.Tickers.return_value.tickers = {"AAPL": ticker}

        with patch("investledger.providers.yahoo_provider._get_yf", return_value=yf):
            prices = YahooPriceProvider().get_prices(["aapl"])

        assert prices == {"AAPL": 190.12}
        yf.Tickers.assert_called_once_with("AAPL")
        ticker.history.assert_not_called()

    def test_falls_back_to_last_close(self):
        """
        GIVEN a ticker with empty info
        WHEN I get prices
        THEN the last non-NaN close of the 5-day history is used
        """
        ticker = _ticker(info={}, closes=[101.0, 102.5, float("nan")])
        yf = MagicMock()
        yf.Tickers.return_value.tickers = {"MSFT": ticker}

        with patch("investledger.providers.yahoo_provider._get_yf", return_value=yf):
            prices = YahooPriceProvider().get_prices(["MSFT"])

        assert prices == {"MSFT": 102.5}
        ticker.history.assert_called_once_with(period="5d")

    def test_unpriceable_and_failing_symbols_are_omitted(self):
        """
        GIVEN one good ticker, one without any price and one that raises
        WHEN I get prices
        THEN only the good ticker is returned
        """
        broken = MagicMock()
        type(broken).info = PropertyMock(side_effect=RuntimeError("boom"))
        yf = MagicMock()
        yf.Tickers.return_value.tickers = {
            "SPY": _ticker(info={"currentPrice": 450.0}),
            "DEAD": _ticker(info={}, closes=[]),
            "OOPS": broken,
        }

        with patch("investledger.providers.yahoo_provider._get_yf", return_value=yf):
            prices = YahooPriceProvider().get_prices(["SPY", "DEAD", "OOPS", "GONE"])

        assert prices == {"SPY": 450.0}

    def test_tickers_failure_raises(self):
        """
        GIVEN yfinance failing to build the Tickers batch
        WHEN I get prices
        THEN PriceProviderError is raised
        """
        yf = MagicMock()
        yf.Tickers.side_effect = RuntimeError("no network")

        with patch("investledger.providers.yahoo_provider._get_yf", return_value=yf):
            with pytest.raises(PriceProviderError, match="Yahoo Finance"):
                YahooPriceProvider().get_prices(["AAPL"])

    def test_empty_symbols(self):
        """
        GIVEN no symbols
        WHEN I get prices
        THEN yfinance is never touched
        """
        with patch("investledger.providers.yahoo_provider._get_yf") as get_yf:
            assert YahooPriceProvider().get_prices([]) == {}
        get_yf.assert_not_called()


# =============================================================================
# STUB TESTS
# =============================================================================


class TestStubPriceProvider:
    """Tests for StubPriceProvider."""

    def test_known_and_unknown_symbols(self):
        provider = StubPriceProvider({"abc": 1.5})

        assert provider.get_prices(["ABC", "xyz"]) == {"ABC": 1.5}

    def test_preset_tables(self):
        assert StubPriceProvider.crypto().get_prices(["USDC"]) == {"USDC": 1.0}
        assert StubPriceProvider.equity().get_prices(["AAPL"]) == {"AAPL": 185.50}
