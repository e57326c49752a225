"""SQLAlchemy unit of work: repositories sharing one session transaction."""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

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

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork:
    """
    Session-scoped unit of work.

    Repositories flush only. The outermost `atomic()` block commits on success
    and rolls back on any exception, which is re-raised. Inner blocks join it.
    """

    def __init__(self, db: Session):
        self._db = db
        self._depth = 0
        self.users = SqlAlchemyUserRepository(db)
        self.accounts = SqlAlchemyInvestmentAccountRepository(db)
        self.trades = SqlAlchemyTradeRepository(db)
        self.ledger = SqlAlchemyLedgerRepository(db)
        self.valuations = SqlAlchemyValuationRepository(db)
        self.assets = SqlAlchemyAssetRepository(db)

    @property
    def session(self) -> Session:
        return self._db

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run a block as one all-or-nothing storage transaction."""
        if self._depth > 0:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            yield
            self._db.commit()
        except Exception:
            logger.debug("Rolling back unit of work", exc_info=True)
            self._db.rollback()
            raise
        finally:
            self._depth = 0
