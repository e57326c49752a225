"""Ledger transaction, valuation and asset domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from investledger.domain.models.enums import AssetType

VALUATION_REFERENCE_PREFIX = "investment_valuation_"
ADJUSTMENT_DESCRIPTION = "Valuation Adjustment"


def valuation_reference(valuation_id: str) -> str:
    """Reference string of the adjustment transaction for a valuation."""
    return f"{VALUATION_REFERENCE_PREFIX}{valuation_id}"


@dataclass
class LedgerTransaction:
    """
    Entry in a financial account's generic transaction ledger.

    Trade mirrors and valuation adjustments are addressed by `reference`.
    """

    txn_id: str
    user_id: str
    account_id: str
    date: datetime
    amount: int
    description: str
    reference: Optional[str] = None
    memo: Optional[str] = None
    status: str = "CLEARED"
    created_at: Optional[datetime] = field(default=None)


@dataclass
class InvestmentValuation:
    """Point-in-time total value (cents) of an investment account."""

    valuation_id: str
    user_id: str
    investment_account_id: str
    value: int
    as_of: datetime
    created_at: Optional[datetime] = field(default=None)

    @property
    def reference(self) -> str:
        return valuation_reference(self.valuation_id)


@dataclass
class InvestmentAsset:
    """Manually valued asset inside an investment account."""

    asset_id: str
    user_id: str
    investment_account_id: str
    name: str
    asset_type: AssetType
    symbol: Optional[str] = None
    created_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.asset_type, str):
            self.asset_type = AssetType(self.asset_type)


@dataclass
class AssetValuation:
    """Point-in-time value of one asset; rolled up into the account valuation."""

    asset_valuation_id: str
    user_id: str
    asset_id: str
    value: int
    as_of: datetime
    quantity: Optional[Decimal] = None
    created_at: Optional[datetime] = field(default=None)
