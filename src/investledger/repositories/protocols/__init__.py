"""Repository protocol definitions (interfaces)."""

from investledger.repositories.protocols.user_repo import UserRepository
from investledger.repositories.protocols.investment_account_repo import InvestmentAccountRepository
from investledger.repositories.protocols.trade_repo import TradeRepository
from investledger.repositories.protocols.ledger_repo import LedgerRepository
from investledger.repositories.protocols.valuation_repo import ValuationRepository, AssetRepository
from investledger.repositories.protocols.unit_of_work import UnitOfWork

__all__ = [
    "UserRepository",
    "InvestmentAccountRepository",
    "TradeRepository",
    "LedgerRepository",
    "ValuationRepository",
    "AssetRepository",
    "UnitOfWork",
]
