"""Stub price providers for offline/testing use."""

from typing import Optional

# Deterministic fake prices for common symbols
STUB_CRYPTO_PRICES: dict[str, float] = {
    "BTC": 65000.0,
    "ETH": 3200.0,
    "SOL": 145.0,
    "ADA": 0.45,
    "USDC": 1.0,
    "USDT": 1.0,
}

STUB_EQUITY_PRICES: dict[str, float] = {
    "AAPL": 185.50,
    "GOOGL": 142.75,
    "MSFT": 378.25,
    "AMZN": 178.50,
    "TSLA": 248.75,
    "NVDA": 485.25,
    "SPY": 485.25,
    "QQQ": 418.75,
    "VTI": 252.30,
}


class StubPriceProvider:
    """
    Stub provider with a fixed price table.

    Unknown symbols are omitted, like a live provider that cannot price them.
    """

    name = "Stub"

    def __init__(self, prices: Optional[dict[str, float]] = None):
        self._prices = {k.upper(): v for k, v in (prices or {}).items()}

    def get_prices(self, symbols: list[str]) -> dict[str, float]:
        """Return stub prices for requested symbols."""
        result: dict[str, float] = {}
        for symbol in symbols:
            upper_symbol = symbol.upper()
            if upper_symbol in self._prices:
                result[upper_symbol] = self._prices[upper_symbol]
        return result

    @classmethod
    def crypto(cls) -> "StubPriceProvider":
        return cls(STUB_CRYPTO_PRICES)

    @classmethod
    def equity(cls) -> "StubPriceProvider":
        return cls(STUB_EQUITY_PRICES)
