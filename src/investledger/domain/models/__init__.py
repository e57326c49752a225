"""Domain models package."""

from investledger.domain.models.enums import (
    TradeType,
    AssetType,
    AssetClass,
    AccountKind,
    AdjustmentAction,
)
from investledger.domain.models.account import User, FinancialAccount, InvestmentAccount
from investledger.domain.models.trade import Trade, trade_reference
from investledger.domain.models.ledger import (
    LedgerTransaction,
    InvestmentValuation,
    InvestmentAsset,
    AssetValuation,
    valuation_reference,
    ADJUSTMENT_DESCRIPTION,
)

__all__ = [
    "TradeType",
    "AssetType",
    "AssetClass",
    "AccountKind",
    "AdjustmentAction",
    "User",
    "FinancialAccount",
    "InvestmentAccount",
    "Trade",
    "trade_reference",
    "LedgerTransaction",
    "InvestmentValuation",
    "InvestmentAsset",
    "AssetValuation",
    "valuation_reference",
    "ADJUSTMENT_DESCRIPTION",
]
