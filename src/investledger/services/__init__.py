"""Service layer - business logic orchestration."""

from investledger.services.market_data_service import MarketDataService
from investledger.services.position_reconstructor import reconstruct_positions
from investledger.services.valuation_engine import (
    ValuationEngine,
    price_portfolio,
    compute_account_balance,
)
from investledger.services.ledger_reconciler import LedgerReconciler
from investledger.services.valuation_refresh import ValuationRefreshService
from investledger.services.account_ledger_view import AccountLedgerViewService
from investledger.services.ledger_service import (
    LedgerService,
    InvestmentAccountCreate,
    InvestmentAccountUpdate,
    TradeCreate,
    TradeUpdate,
    AssetCreate,
    AssetUpdate,
)

__all__ = [
    "MarketDataService",
    "reconstruct_positions",
    "ValuationEngine",
    "price_portfolio",
    "compute_account_balance",
    "LedgerReconciler",
    "ValuationRefreshService",
    "AccountLedgerViewService",
    "LedgerService",
    "InvestmentAccountCreate",
    "InvestmentAccountUpdate",
    "TradeCreate",
    "TradeUpdate",
    "AssetCreate",
    "AssetUpdate",
]
