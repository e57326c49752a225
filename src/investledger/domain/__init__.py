"""Domain layer - pure business models with no external dependencies."""

from investledger.domain.models import (
    User,
    FinancialAccount,
    InvestmentAccount,
    Trade,
    LedgerTransaction,
    InvestmentValuation,
    InvestmentAsset,
    AssetValuation,
    TradeType,
    AssetType,
    AssetClass,
    AccountKind,
    AdjustmentAction,
)

__all__ = [
    "User",
    "FinancialAccount",
    "InvestmentAccount",
    "Trade",
    "LedgerTransaction",
    "InvestmentValuation",
    "InvestmentAsset",
    "AssetValuation",
    "TradeType",
    "AssetType",
    "AssetClass",
    "AccountKind",
    "AdjustmentAction",
]
