"""SQLAlchemy implementation of UserRepository."""

from typing import Optional

from sqlalchemy.orm import Session

from investledger.core.timezone import now_storage
from investledger.domain.models import User
from investledger.repositories.sqlalchemy.orm_models import UserORM, InvestmentAccountORM


class SqlAlchemyUserRepository:
    """SQLAlchemy-backed user repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, user: User) -> User:
        """Persist a new user."""
        orm_user = UserORM(
            user_id=user.user_id,
            email=user.email,
            created_at_est=user.created_at or now_storage(),
        )
        self._db.add(orm_user)
        self._db.flush()
        return self._to_domain(orm_user)

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Retrieve user by ID."""
        orm_user = self._db.query(UserORM).filter(UserORM.user_id == user_id).first()
        return self._to_domain(orm_user) if orm_user else None

    def get_by_email(self, email: str) -> Optional[User]:
        """Retrieve user by email."""
        orm_user = self._db.query(UserORM).filter(UserORM.email == email).first()
        return self._to_domain(orm_user) if orm_user else None

    def list_with_investment_accounts(self) -> list[User]:
        """List users owning at least one investment account."""
        orm_users = (
            self._db.query(UserORM)
            .join(InvestmentAccountORM, InvestmentAccountORM.user_id == UserORM.user_id)
            .distinct()
            .order_by(UserORM.user_id)
            .all()
        )
        return [self._to_domain(u) for u in orm_users]

    @staticmethod
    def _to_domain(orm: UserORM) -> User:
        """Convert ORM model to domain model."""
        return User(
            user_id=orm.user_id,
            email=orm.email,
            created_at=orm.created_at_est,
        )
