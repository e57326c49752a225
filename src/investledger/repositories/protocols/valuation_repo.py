"""Valuation and asset repository protocols."""

from datetime import datetime
from typing import Protocol, Optional

from investledger.domain.models import InvestmentValuation, InvestmentAsset, AssetValuation


class ValuationRepository(Protocol):
    """Interface for investment account valuations."""

    def get(self, investment_account_id: str, as_of: datetime) -> Optional[InvestmentValuation]:
        """Retrieve the valuation of an account at an exact as_of."""
        ...

    def upsert(self, valuation: InvestmentValuation) -> InvestmentValuation:
        """Insert or overwrite the value for (account, as_of); the stored id is kept."""
        ...

    def latest(self, investment_account_id: str) -> Optional[InvestmentValuation]:
        """Most recent valuation of an account."""
        ...

    def list_by_account(self, investment_account_id: str) -> list[InvestmentValuation]:
        """List valuations newest first."""
        ...


class AssetRepository(Protocol):
    """Interface for manually valued assets and their valuations."""

    def create(self, asset: InvestmentAsset) -> InvestmentAsset:
        """Persist a new asset."""
        ...

    def get_by_id(self, asset_id: str) -> Optional[InvestmentAsset]:
        """Retrieve asset by ID."""
        ...

    def get_by_name(self, investment_account_id: str, name: str) -> Optional[InvestmentAsset]:
        """Retrieve asset by its per-account unique name."""
        ...

    def list_by_account(self, investment_account_id: str) -> list[InvestmentAsset]:
        """List assets of an account ordered by name."""
        ...

    def update(self, asset: InvestmentAsset) -> InvestmentAsset:
        """Update an asset's name, symbol and type."""
        ...

    def delete(self, asset_id: str) -> bool:
        """Delete an asset together with its valuations."""
        ...

    def upsert_valuation(self, valuation: AssetValuation) -> AssetValuation:
        """Insert or overwrite the value for (asset, as_of)."""
        ...

    def list_valuations(self, asset_id: str) -> list[AssetValuation]:
        """List an asset's valuations newest first."""
        ...

    def sum_valuations(self, investment_account_id: str, as_of: datetime) -> int:
        """Sum (cents) of all asset valuations of an account at exactly as_of."""
        ...
