"""SQLAlchemy implementation of InvestmentAccountRepository."""

from typing import Optional

from sqlalchemy.orm import Session

from investledger.core.timezone import now_storage
from investledger.domain.models import InvestmentAccount, FinancialAccount
from investledger.repositories.sqlalchemy.orm_models import (
    InvestmentAccountORM,
    FinancialAccountORM,
)


class SqlAlchemyInvestmentAccountRepository:
    """SQLAlchemy-backed investment account repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, account: InvestmentAccount) -> InvestmentAccount:
        """Persist an investment account together with its financial account."""
        if account.account is None:
            raise ValueError(f"Investment account {account.investment_account_id} has no financial account")
        fin = account.account
        orm_fin = FinancialAccountORM(
            account_id=fin.account_id,
            user_id=fin.user_id,
            name=fin.name,
            currency=fin.currency,
            opening_balance=fin.opening_balance,
            institution=fin.institution,
            notes=fin.notes,
            created_at_est=fin.created_at or now_storage(),
        )
        orm_account = InvestmentAccountORM(
            investment_account_id=account.investment_account_id,
            user_id=account.user_id,
            account_id=fin.account_id,
            asset_class=account.asset_class,
            kind=account.kind,
            created_at_est=account.created_at or now_storage(),
        )
        orm_fin.investment_account = orm_account
        self._db.add(orm_fin)
        self._db.flush()
        return self._to_domain(orm_account)

    def get_by_id(self, investment_account_id: str) -> Optional[InvestmentAccount]:
        """Retrieve investment account by ID (financial account attached)."""
        orm_account = self._db.query(InvestmentAccountORM).filter(
            InvestmentAccountORM.investment_account_id == investment_account_id
        ).first()
        return self._to_domain(orm_account) if orm_account else None

    def get_for_update(self, investment_account_id: str) -> Optional[InvestmentAccount]:
        """Retrieve and row-lock the investment account (no-op lock on SQLite)."""
        orm_account = (
            self._db.query(InvestmentAccountORM)
            .filter(InvestmentAccountORM.investment_account_id == investment_account_id)
            .with_for_update()
            .first()
        )
        return self._to_domain(orm_account) if orm_account else None

    def list_by_user(self, user_id: str) -> list[InvestmentAccount]:
        """List a user's investment accounts ordered by creation."""
        orm_accounts = (
            self._db.query(InvestmentAccountORM)
            .filter(InvestmentAccountORM.user_id == user_id)
            .order_by(InvestmentAccountORM.created_at_est, InvestmentAccountORM.investment_account_id)
            .all()
        )
        return [self._to_domain(a) for a in orm_accounts]

    def update(self, account: InvestmentAccount) -> InvestmentAccount:
        """Update account fields (and the financial account's descriptive fields)."""
        orm_account = self._db.query(InvestmentAccountORM).filter(
            InvestmentAccountORM.investment_account_id == account.investment_account_id
        ).first()
        if not orm_account:
            raise ValueError(f"Investment account not found: {account.investment_account_id}")

        orm_account.asset_class = account.asset_class
        orm_account.kind = account.kind
        if account.account is not None:
            orm_account.account.name = account.account.name
            orm_account.account.currency = account.account.currency
            orm_account.account.institution = account.account.institution
            orm_account.account.notes = account.account.notes

        self._db.flush()
        return self._to_domain(orm_account)

    def delete(self, investment_account_id: str) -> bool:
        """Delete the financial account; ORM cascades remove everything below it."""
        orm_account = self._db.query(InvestmentAccountORM).filter(
            InvestmentAccountORM.investment_account_id == investment_account_id
        ).first()
        if not orm_account:
            return False
        self._db.delete(orm_account.account)
        self._db.flush()
        return True

    @staticmethod
    def _fin_to_domain(orm: FinancialAccountORM) -> FinancialAccount:
        return FinancialAccount(
            account_id=orm.account_id,
            user_id=orm.user_id,
            name=orm.name,
            currency=orm.currency,
            opening_balance=int(orm.opening_balance),
            institution=orm.institution,
            notes=orm.notes,
            created_at=orm.created_at_est,
        )

    @staticmethod
    def _to_domain(orm: InvestmentAccountORM) -> InvestmentAccount:
        """Convert ORM model to domain model."""
        return InvestmentAccount(
            investment_account_id=orm.investment_account_id,
            user_id=orm.user_id,
            account_id=orm.account_id,
            asset_class=orm.asset_class,
            kind=orm.kind,
            created_at=orm.created_at_est,
            account=SqlAlchemyInvestmentAccountRepository._fin_to_domain(orm.account),
        )
