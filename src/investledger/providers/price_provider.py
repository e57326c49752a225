"""Price provider protocol."""

from typing import Protocol


class PriceProvider(Protocol):
    """
    Protocol for spot price providers (one per asset class).

    Prices are USD floats keyed by upper-cased symbol. Symbols the provider
    cannot price are omitted. A whole-source failure raises PriceProviderError.
    """

    name: str

    def get_prices(self, symbols: list[str]) -> dict[str, float]:
        """Fetch current USD prices for symbols."""
        ...
