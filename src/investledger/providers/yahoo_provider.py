"""Yahoo Finance spot prices for equity holdings via yfinance."""

import logging
import math
from typing import Optional

import pandas as pd

from investledger.core.exceptions import PriceProviderError

logger = logging.getLogger(__name__)


# Lazy import so tests can patch before import
def _get_yf():
    import yfinance as yf
    return yf


def _valid_price(value) -> Optional[float]:
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(price) or price <= 0:
        return None
    return price


def _price_for_ticker(ticker) -> Optional[float]:
    """
    Last trade price for one yfinance Ticker.

    Prefers info's regularMarketPrice/currentPrice, then the last non-NaN
    close of a 5-day history frame.
    """
    info = ticker.info
    if isinstance(info, dict):
        for key in ("regularMarketPrice", "currentPrice", "previousClose"):
            price = _valid_price(info.get(key))
            if price is not None:
                return price

    history = ticker.history(period="5d")
    if isinstance(history, pd.DataFrame) and "Close" in history.columns:
        closes = history["Close"].dropna()
        if not closes.empty:
            return _valid_price(closes.iloc[-1])
    return None


class YahooPriceProvider:
    """Equity prices from Yahoo Finance (yfinance.Tickers)."""

    name = "Yahoo Finance"

    def get_prices(self, symbols: list[str]) -> dict[str, float]:
        """Return USD prices for the symbols Yahoo can price; failures are omitted."""
        wanted = sorted({s.upper() for s in symbols if s})
        if not wanted:
            return {}

        try:
            tickers = _get_yf().Tickers(" ".join(wanted))
        except Exception as e:
            raise PriceProviderError(self.name, str(e)) from e

        prices: dict[str, float] = {}
        for symbol in wanted:
            ticker = tickers.tickers.get(symbol)
            if ticker is None:
                logger.warning("Yahoo Finance returned no ticker for %s", symbol)
                continue
            try:
                price = _price_for_ticker(ticker)
            except Exception as e:
                logger.warning("Yahoo Finance price lookup failed for %s: %s", symbol, e)
                continue
            if price is None:
                logger.warning("No valid Yahoo Finance price for %s", symbol)
                continue
            prices[symbol] = price
        return prices
