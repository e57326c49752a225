"""Price providers module."""

from investledger.providers.price_provider import PriceProvider
from investledger.providers.coingecko_provider import CoinGeckoPriceProvider, COINGECKO_IDS
from investledger.providers.yahoo_provider import YahooPriceProvider
from investledger.providers.stub_provider import StubPriceProvider

__all__ = [
    "PriceProvider",
    "CoinGeckoPriceProvider",
    "COINGECKO_IDS",
    "YahooPriceProvider",
    "StubPriceProvider",
]
