"""SQLAlchemy repository implementations."""

from investledger.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    get_db,
    get_session,
    init_db,
    Base,
)
from investledger.repositories.sqlalchemy.user_repo import SqlAlchemyUserRepository
from investledger.repositories.sqlalchemy.investment_account_repo import (
    SqlAlchemyInvestmentAccountRepository,
)
from investledger.repositories.sqlalchemy.trade_repo import SqlAlchemyTradeRepository
from investledger.repositories.sqlalchemy.ledger_repo import SqlAlchemyLedgerRepository
from investledger.repositories.sqlalchemy.valuation_repo import (
    SqlAlchemyValuationRepository,
    SqlAlchemyAssetRepository,
)
from investledger.repositories.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork

__all__ = [
    "get_engine",
    "get_session_factory",
    "get_db",
    "get_session",
    "init_db",
    "Base",
    "SqlAlchemyUserRepository",
    "SqlAlchemyInvestmentAccountRepository",
    "SqlAlchemyTradeRepository",
    "SqlAlchemyLedgerRepository",
    "SqlAlchemyValuationRepository",
    "SqlAlchemyAssetRepository",
    "SqlAlchemyUnitOfWork",
]
