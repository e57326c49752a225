"""Unit of work protocol."""

from contextlib import AbstractContextManager
from typing import Protocol

from investledger.repositories.protocols.user_repo import UserRepository
from investledger.repositories.protocols.investment_account_repo import InvestmentAccountRepository
from investledger.repositories.protocols.trade_repo import TradeRepository
from investledger.repositories.protocols.ledger_repo import LedgerRepository
from investledger.repositories.protocols.valuation_repo import ValuationRepository, AssetRepository


class UnitOfWork(Protocol):
    """
    Groups repositories sharing one storage transaction.

    Repositories only flush; `atomic()` commits on success and rolls back
    (re-raising) on error. Nested `atomic()` blocks join the outer one.
    """

    users: UserRepository
    accounts: InvestmentAccountRepository
    trades: TradeRepository
    ledger: LedgerRepository
    valuations: ValuationRepository
    assets: AssetRepository

    def atomic(self) -> AbstractContextManager[None]:
        """Run a block as one all-or-nothing storage transaction."""
        ...
