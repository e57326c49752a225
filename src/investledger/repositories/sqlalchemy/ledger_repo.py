"""SQLAlchemy implementation of LedgerRepository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from investledger.core.timezone import now_storage
from investledger.domain.models import LedgerTransaction
from investledger.repositories.sqlalchemy.orm_models import LedgerTransactionORM


class SqlAlchemyLedgerRepository:
    """SQLAlchemy-backed ledger transaction repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, txn: LedgerTransaction) -> LedgerTransaction:
        """Persist a new ledger transaction."""
        orm_txn = LedgerTransactionORM(
            txn_id=txn.txn_id,
            user_id=txn.user_id,
            account_id=txn.account_id,
            date_est=txn.date,
            amount=txn.amount,
            description=txn.description,
            reference=txn.reference,
            memo=txn.memo,
            status=txn.status,
            created_at_est=txn.created_at or now_storage(),
        )
        self._db.add(orm_txn)
        self._db.flush()
        return self._to_domain(orm_txn)

    def get_by_reference(self, reference: str) -> Optional[LedgerTransaction]:
        """Find the transaction carrying a reference string."""
        orm_txn = self._db.query(LedgerTransactionORM).filter(
            LedgerTransactionORM.reference == reference
        ).first()
        return self._to_domain(orm_txn) if orm_txn else None

    def update(self, txn: LedgerTransaction) -> LedgerTransaction:
        """Update an existing ledger transaction."""
        orm_txn = self._db.query(LedgerTransactionORM).filter(
            LedgerTransactionORM.txn_id == txn.txn_id
        ).first()
        if not orm_txn:
            raise ValueError(f"Ledger transaction not found: {txn.txn_id}")

        orm_txn.date_est = txn.date
        orm_txn.amount = txn.amount
        orm_txn.description = txn.description
        orm_txn.memo = txn.memo
        orm_txn.status = txn.status

        self._db.flush()
        return self._to_domain(orm_txn)

    def delete(self, txn_id: str) -> bool:
        """Delete a ledger transaction."""
        deleted = self._db.query(LedgerTransactionORM).filter(
            LedgerTransactionORM.txn_id == txn_id
        ).delete()
        self._db.flush()
        return deleted > 0

    def delete_by_reference(self, reference: str) -> int:
        """Delete all transactions carrying a reference."""
        deleted = self._db.query(LedgerTransactionORM).filter(
            LedgerTransactionORM.reference == reference
        ).delete()
        self._db.flush()
        return deleted

    def sum_amounts(self, account_id: str, up_to: Optional[datetime] = None) -> int:
        """Sum of amounts (cents) on an account dated at or before up_to."""
        query = self._db.query(
            func.coalesce(func.sum(LedgerTransactionORM.amount), 0)
        ).filter(LedgerTransactionORM.account_id == account_id)
        if up_to is not None:
            query = query.filter(LedgerTransactionORM.date_est <= up_to)
        return int(query.scalar())

    def list_by_account(self, account_id: str) -> list[LedgerTransaction]:
        """List an account's ledger transactions ordered by date."""
        orm_txns = (
            self._db.query(LedgerTransactionORM)
            .filter(LedgerTransactionORM.account_id == account_id)
            .order_by(LedgerTransactionORM.date_est)
            .all()
        )
        return [self._to_domain(t) for t in orm_txns]

    @staticmethod
    def _to_domain(orm: LedgerTransactionORM) -> LedgerTransaction:
        """Convert ORM model to domain model."""
        return LedgerTransaction(
            txn_id=orm.txn_id,
            user_id=orm.user_id,
            account_id=orm.account_id,
            date=orm.date_est,
            amount=int(orm.amount),
            description=orm.description,
            reference=orm.reference,
            memo=orm.memo,
            status=orm.status,
            created_at=orm.created_at_est,
        )
