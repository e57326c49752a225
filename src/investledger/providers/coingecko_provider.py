"""CoinGecko spot prices for crypto holdings."""

import logging
from typing import Any, Optional

import requests

from investledger.core.exceptions import PriceProviderError

logger = logging.getLogger(__name__)

# Symbol -> CoinGecko coin id
COINGECKO_IDS: dict[str, str] = {
    "BTC": "bitcoin",
    "ETH": "ethereum",
    "USDC": "usd-coin",
    "USDT": "tether",
    "ADA": "cardano",
    "SOL": "solana",
    "DOT": "polkadot",
    "MATIC": "matic-network",
    "AVAX": "avalanche-2",
    "LINK": "chainlink",
    "UNI": "uniswap",
    "AAVE": "aave",
    "COMP": "compound-governance-token",
    "MKR": "maker",
    "SNX": "havven",
    "YFI": "yearn-finance",
    "SUSHI": "sushi",
    "CRV": "curve-dao-token",
    "BAL": "balancer",
    "SILO": "silo-finance",
    "METIS": "metis-token",
    "VELO": "velodrome-finance",
}

# Priced 1:1 without a lookup
USD_PEGGED = frozenset({"USD", "USDC", "USDT"})


class CoinGeckoPriceProvider:
    """Crypto prices from the CoinGecko /simple/price endpoint."""

    name = "CoinGecko"

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        timeout_seconds: float = 10.0,
        retries: int = 2,
        http_client: Optional[Any] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._retries = max(0, retries)
        self.http = http_client or requests.Session()

    def get_prices(self, symbols: list[str]) -> dict[str, float]:
        """Return USD prices for the symbols CoinGecko knows."""
        prices: dict[str, float] = {}
        ids_by_symbol: dict[str, str] = {}

        for symbol in {s.upper() for s in symbols}:
            if symbol in USD_PEGGED:
                prices[symbol] = 1.0
            elif symbol in COINGECKO_IDS:
                ids_by_symbol[symbol] = COINGECKO_IDS[symbol]
            else:
                logger.warning("No CoinGecko id for crypto symbol %s", symbol)

        if not ids_by_symbol:
            return prices

        data = self._fetch(sorted(set(ids_by_symbol.values())))
        for symbol, coin_id in ids_by_symbol.items():
            usd = (data.get(coin_id) or {}).get("usd")
            if usd:
                prices[symbol] = float(usd)
            else:
                logger.warning("CoinGecko returned no USD price for %s (%s)", symbol, coin_id)
        return prices

    def _fetch(self, coin_ids: list[str]) -> dict:
        url = f"{self._base_url}/simple/price"
        params = {"ids": ",".join(coin_ids), "vs_currencies": "usd"}
        last_error: Optional[Exception] = None

        for attempt in range(self._retries + 1):
            try:
                r = self.http.get(
                    url,
                    params=params,
                    timeout=self._timeout,
                    headers={"Accept": "application/json"},
                )
                r.raise_for_status()
                return r.json()
            except (requests.RequestException, ValueError) as e:
                last_error = e
                logger.warning(
                    "CoinGecko request failed (attempt %d/%d): %s",
                    attempt + 1,
                    self._retries + 1,
                    e,
                )

        raise PriceProviderError(self.name, str(last_error))
