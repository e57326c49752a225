"""View models for service outputs."""

from investledger.domain.views.portfolio import (
    Position,
    ReconstructedPortfolio,
    PriceData,
    HoldingView,
    InvestmentAccountBalance,
    ReconciliationResult,
    AccountValuationResult,
    ValuationRunSummary,
    CashPosition,
    AccountLedgerView,
    ValuationStatus,
    InvestmentAccountSummary,
)

__all__ = [
    "Position",
    "ReconstructedPortfolio",
    "PriceData",
    "HoldingView",
    "InvestmentAccountBalance",
    "ReconciliationResult",
    "AccountValuationResult",
    "ValuationRunSummary",
    "CashPosition",
    "AccountLedgerView",
    "ValuationStatus",
    "InvestmentAccountSummary",
]
