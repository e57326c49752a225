"""Market data service: concurrent crypto and equity price lookups."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from typing import Iterable, Optional

from investledger.config.settings import Settings, get_settings
from investledger.domain.models import AssetType
from investledger.domain.views import Position, PriceData
from investledger.providers.price_provider import PriceProvider
from investledger.providers.coingecko_provider import CoinGeckoPriceProvider
from investledger.providers.yahoo_provider import YahooPriceProvider
from investledger.providers.stub_provider import StubPriceProvider

logger = logging.getLogger(__name__)


class MarketDataService:
    """
    Prices positions against one provider per asset class.

    Both classes are fetched in parallel, each bounded by a timeout. A failing
    class yields an empty map and an entry in PriceData.errors; the other is
    unaffected. Prices are cached per (asset type, symbol) for the TTL.
    """

    def __init__(
        self,
        crypto_provider: PriceProvider,
        equity_provider: PriceProvider,
        cache_ttl_seconds: float = 300,
        fetch_timeout_seconds: float = 10.0,
    ):
        self._providers = {
            AssetType.CRYPTO: crypto_provider,
            AssetType.EQUITY: equity_provider,
        }
        self._cache_ttl = cache_ttl_seconds
        self._fetch_timeout = fetch_timeout_seconds
        # Cache: (asset_type, symbol) -> (price, cached_at)
        self._cache: dict[tuple[AssetType, str], tuple[float, float]] = {}

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "MarketDataService":
        """Build the service with the providers selected by settings."""
        settings = settings or get_settings()
        if settings.market_data_provider == "stub":
            crypto, equity = StubPriceProvider.crypto(), StubPriceProvider.equity()
        else:
            crypto = CoinGeckoPriceProvider(
                base_url=settings.coingecko_base_url,
                timeout_seconds=settings.price_fetch_timeout_seconds,
                retries=settings.price_fetch_retries,
            )
            equity = YahooPriceProvider()
        return cls(
            crypto,
            equity,
            cache_ttl_seconds=settings.price_cache_ttl_seconds,
            fetch_timeout_seconds=settings.price_fetch_timeout_seconds,
        )

    def get_prices(self, positions: Iterable[Position]) -> PriceData:
        """
        Fetch USD prices for every distinct symbol held, grouped by asset type.

        Never raises for provider failures.
        """
        wanted: dict[AssetType, set[str]] = {AssetType.CRYPTO: set(), AssetType.EQUITY: set()}
        for position in positions:
            wanted[AssetType(position.asset_type)].add(position.symbol.upper())

        result = PriceData()
        if not any(wanted.values()):
            return result

        maps = {AssetType.CRYPTO: result.crypto_prices, AssetType.EQUITY: result.equity_prices}
        to_fetch: dict[AssetType, list[str]] = {}
        now = time.monotonic()
        for asset_type, symbols in wanted.items():
            missing = []
            for symbol in sorted(symbols):
                cached = self._cache.get((asset_type, symbol))
                if cached and now - cached[1] < self._cache_ttl:
                    maps[asset_type][symbol] = cached[0]
                else:
                    missing.append(symbol)
            if missing:
                to_fetch[asset_type] = missing

        if not to_fetch:
            return result

        executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="prices")
        deadline = time.monotonic() + self._fetch_timeout
        try:
            futures = {
                asset_type: executor.submit(self._providers[asset_type].get_prices, symbols)
                for asset_type, symbols in to_fetch.items()
            }
            for asset_type, future in futures.items():
                provider_name = getattr(self._providers[asset_type], "name", asset_type.value)
                try:
                    fetched = future.result(timeout=max(0.0, deadline - time.monotonic()))
                except FuturesTimeoutError:
                    message = (
                        f"{asset_type.value.lower()} prices from {provider_name} timed out "
                        f"after {self._fetch_timeout:g}s"
                    )
                    logger.warning(message)
                    result.errors.append(message)
                    result.failed_asset_types.add(asset_type)
                    continue
                except Exception as e:
                    message = f"{asset_type.value.lower()} prices from {provider_name} failed: {e}"
                    logger.warning(message)
                    result.errors.append(message)
                    result.failed_asset_types.add(asset_type)
                    continue

                cached_at = time.monotonic()
                for symbol, price in fetched.items():
                    key = symbol.upper()
                    maps[asset_type][key] = float(price)
                    self._cache[(asset_type, key)] = (float(price), cached_at)
        finally:
            # Do not block on a provider thread that overran its timeout
            executor.shutdown(wait=False)

        return result

    def clear_cache(self) -> None:
        self._cache.clear()
