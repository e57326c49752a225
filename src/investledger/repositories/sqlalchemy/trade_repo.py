"""SQLAlchemy implementation of TradeRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from investledger.core.timezone import now_storage
from investledger.domain.models import Trade
from investledger.repositories.sqlalchemy.orm_models import TradeORM


class SqlAlchemyTradeRepository:
    """SQLAlchemy-backed trade repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, trade: Trade) -> Trade:
        """Persist a new trade."""
        orm_trade = self._to_orm(trade)
        self._db.add(orm_trade)
        self._db.flush()
        return self._to_domain(orm_trade)

    def get_by_id(self, trade_id: str) -> Optional[Trade]:
        """Retrieve trade by ID."""
        orm_trade = self._db.query(TradeORM).filter(TradeORM.trade_id == trade_id).first()
        return self._to_domain(orm_trade) if orm_trade else None

    def update(self, trade: Trade) -> Trade:
        """Update an existing trade."""
        orm_trade = self._db.query(TradeORM).filter(TradeORM.trade_id == trade.trade_id).first()
        if not orm_trade:
            raise ValueError(f"Trade not found: {trade.trade_id}")

        orm_trade.txn_type = trade.txn_type
        orm_trade.asset_type = trade.asset_type
        orm_trade.symbol = trade.symbol
        orm_trade.quantity = trade.quantity
        orm_trade.price_per_unit = trade.price_per_unit
        orm_trade.amount = trade.amount
        orm_trade.fees = trade.fees
        orm_trade.occurred_at_est = trade.occurred_at
        orm_trade.notes = trade.notes
        orm_trade.asset_id = trade.asset_id
        orm_trade.updated_at_est = now_storage()

        self._db.flush()
        return self._to_domain(orm_trade)

    def delete(self, trade_id: str) -> bool:
        """Delete a trade."""
        deleted = self._db.query(TradeORM).filter(TradeORM.trade_id == trade_id).delete()
        self._db.flush()
        return deleted > 0

    def list_by_account(
        self,
        investment_account_id: str,
        newest_first: bool = False,
        limit: Optional[int] = None,
    ) -> list[Trade]:
        """List trades for an account ordered by occurred_at (creation breaks ties)."""
        query = self._db.query(TradeORM).filter(
            TradeORM.investment_account_id == investment_account_id
        )
        if newest_first:
            query = query.order_by(TradeORM.occurred_at_est.desc(), TradeORM.created_at_est.desc())
        else:
            query = query.order_by(TradeORM.occurred_at_est, TradeORM.created_at_est)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_domain(t) for t in query.all()]

    def count_by_account(self, investment_account_id: str) -> int:
        """Number of trades recorded on an account."""
        return self._db.query(TradeORM).filter(
            TradeORM.investment_account_id == investment_account_id
        ).count()

    def _to_orm(self, trade: Trade) -> TradeORM:
        """Convert domain model to ORM model."""
        return TradeORM(
            trade_id=trade.trade_id,
            user_id=trade.user_id,
            investment_account_id=trade.investment_account_id,
            asset_id=trade.asset_id,
            txn_type=trade.txn_type,
            asset_type=trade.asset_type,
            symbol=trade.symbol,
            quantity=trade.quantity,
            price_per_unit=trade.price_per_unit,
            amount=trade.amount,
            fees=trade.fees,
            occurred_at_est=trade.occurred_at,
            notes=trade.notes,
            created_at_est=trade.created_at or now_storage(),
        )

    @staticmethod
    def _to_domain(orm: TradeORM) -> Trade:
        """Convert ORM model to domain model."""
        return Trade(
            trade_id=orm.trade_id,
            user_id=orm.user_id,
            investment_account_id=orm.investment_account_id,
            txn_type=orm.txn_type,
            occurred_at=orm.occurred_at_est,
            amount=int(orm.amount),
            asset_type=orm.asset_type,
            symbol=orm.symbol,
            quantity=Decimal(str(orm.quantity)) if orm.quantity is not None else None,
            price_per_unit=Decimal(str(orm.price_per_unit)) if orm.price_per_unit is not None else None,
            fees=orm.fees,
            notes=orm.notes,
            asset_id=orm.asset_id,
            created_at=orm.created_at_est,
            updated_at=orm.updated_at_est,
        )
