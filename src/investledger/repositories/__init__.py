"""Repository layer - data access abstractions and implementations."""

from investledger.repositories.protocols import (
    UserRepository,
    InvestmentAccountRepository,
    TradeRepository,
    LedgerRepository,
    ValuationRepository,
    AssetRepository,
    UnitOfWork,
)

__all__ = [
    "UserRepository",
    "InvestmentAccountRepository",
    "TradeRepository",
    "LedgerRepository",
    "ValuationRepository",
    "AssetRepository",
    "UnitOfWork",
]
