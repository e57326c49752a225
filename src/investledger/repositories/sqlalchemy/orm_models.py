"""SQLAlchemy ORM model definitions."""

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Enum as SqlEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from investledger.core.timezone import now_storage
from investledger.repositories.sqlalchemy.database import Base
from investledger.domain.models.enums import TradeType, AssetType, AssetClass, AccountKind


class UserORM(Base):
    """SQLAlchemy model for User."""

    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True)
    email = Column(String(255), unique=True, nullable=False)
    created_at_est = Column(DateTime, nullable=False, default=now_storage)

    investment_accounts = relationship("InvestmentAccountORM", back_populates="user")


class FinancialAccountORM(Base):
    """SQLAlchemy model for the generic financial account."""

    __tablename__ = "financial_accounts"

    account_id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    opening_balance = Column(BigInteger, nullable=False, default=0)
    institution = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    created_at_est = Column(DateTime, nullable=False, default=now_storage)

    investment_account = relationship(
        "InvestmentAccountORM",
        back_populates="account",
        uselist=False,
        cascade="all, delete-orphan",
    )
    transactions = relationship(
        "LedgerTransactionORM",
        back_populates="account",
        cascade="all, delete-orphan",
    )


class LedgerTransactionORM(Base):
    """SQLAlchemy model for a financial account ledger transaction."""

    __tablename__ = "ledger_transactions"

    txn_id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    account_id = Column(
        String(36),
        ForeignKey("financial_accounts.account_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date_est = Column(DateTime, nullable=False)
    amount = Column(BigInteger, nullable=False)
    description = Column(String(255), nullable=False)
    reference = Column(String(100), nullable=True, index=True)
    memo = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="CLEARED")
    created_at_est = Column(DateTime, nullable=False, default=now_storage)

    account = relationship("FinancialAccountORM", back_populates="transactions")


class InvestmentAccountORM(Base):
    """SQLAlchemy model for InvestmentAccount."""

    __tablename__ = "investment_accounts"

    investment_account_id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    account_id = Column(
        String(36),
        ForeignKey("financial_accounts.account_id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    asset_class = Column(SqlEnum(AssetClass), nullable=False)
    kind = Column(SqlEnum(AccountKind), nullable=False, default=AccountKind.BROKERAGE)
    created_at_est = Column(DateTime, nullable=False, default=now_storage)

    user = relationship("UserORM", back_populates="investment_accounts")
    account = relationship("FinancialAccountORM", back_populates="investment_account")
    trades = relationship(
        "TradeORM", back_populates="investment_account", cascade="all, delete-orphan"
    )
    valuations = relationship(
        "InvestmentValuationORM", back_populates="investment_account", cascade="all, delete-orphan"
    )
    assets = relationship(
        "InvestmentAssetORM", back_populates="investment_account", cascade="all, delete-orphan"
    )


class TradeORM(Base):
    """SQLAlchemy model for an investment transaction."""

    __tablename__ = "investment_transactions"

    trade_id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    investment_account_id = Column(
        String(36),
        ForeignKey("investment_accounts.investment_account_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    asset_id = Column(
        String(36),
        ForeignKey("investment_assets.asset_id", ondelete="SET NULL"),
        nullable=True,
    )
    txn_type = Column(SqlEnum(TradeType), nullable=False)
    asset_type = Column(SqlEnum(AssetType), nullable=True)
    symbol = Column(String(20), nullable=True)
    quantity = Column(Numeric(precision=18, scale=8), nullable=True)
    price_per_unit = Column(Numeric(precision=18, scale=8), nullable=True)
    amount = Column(BigInteger, nullable=False)
    fees = Column(Integer, nullable=True)
    occurred_at_est = Column(DateTime, nullable=False)
    notes = Column(Text, nullable=True)
    created_at_est = Column(DateTime, nullable=False, default=now_storage)
    updated_at_est = Column(DateTime, nullable=True, onupdate=now_storage)

    investment_account = relationship("InvestmentAccountORM", back_populates="trades")


class InvestmentValuationORM(Base):
    """SQLAlchemy model for InvestmentValuation."""

    __tablename__ = "investment_valuations"
    __table_args__ = (
        UniqueConstraint("investment_account_id", "as_of_est", name="uq_valuation_account_as_of"),
    )

    valuation_id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    investment_account_id = Column(
        String(36),
        ForeignKey("investment_accounts.investment_account_id", ondelete="CASCADE"),
        nullable=False,
    )
    value = Column(BigInteger, nullable=False)
    as_of_est = Column(DateTime, nullable=False)
    created_at_est = Column(DateTime, nullable=False, default=now_storage)

    investment_account = relationship("InvestmentAccountORM", back_populates="valuations")


class InvestmentAssetORM(Base):
    """SQLAlchemy model for InvestmentAsset."""

    __tablename__ = "investment_assets"
    __table_args__ = (
        UniqueConstraint("investment_account_id", "name", name="uq_asset_account_name"),
    )

    asset_id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    investment_account_id = Column(
        String(36),
        ForeignKey("investment_accounts.investment_account_id", ondelete="CASCADE"),
        nullable=False,
    )
    name = Column(String(255), nullable=False)
    symbol = Column(String(20), nullable=True)
    asset_type = Column(SqlEnum(AssetType), nullable=False)
    created_at_est = Column(DateTime, nullable=False, default=now_storage)

    investment_account = relationship("InvestmentAccountORM", back_populates="assets")
    valuations = relationship(
        "AssetValuationORM", back_populates="asset", cascade="all, delete-orphan"
    )


class AssetValuationORM(Base):
    """SQLAlchemy model for AssetValuation."""

    __tablename__ = "investment_asset_valuations"
    __table_args__ = (
        UniqueConstraint("asset_id", "as_of_est", name="uq_asset_valuation_asset_as_of"),
    )

    asset_valuation_id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    asset_id = Column(
        String(36),
        ForeignKey("investment_assets.asset_id", ondelete="CASCADE"),
        nullable=False,
    )
    value = Column(BigInteger, nullable=False)
    quantity = Column(Numeric(precision=18, scale=8), nullable=True)
    as_of_est = Column(DateTime, nullable=False)
    created_at_est = Column(DateTime, nullable=False, default=now_storage)

    asset = relationship("InvestmentAssetORM", back_populates="valuations")
