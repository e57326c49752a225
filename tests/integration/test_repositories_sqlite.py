"""
Integration tests for SQLAlchemy repositories with SQLite.

Tests cover:
- Investment account persistence with its financial account
- Trade ordering and Decimal round trip
- Ledger sums with an as_of cut-off
- Valuation and asset valuation upserts
- Asset update and delete
- Unit of work commit, rollback and nesting
"""

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from investledger.domain.models import (
    AccountKind,
    AssetClass,
    AssetType,
    AssetValuation,
    FinancialAccount,
    InvestmentAccount,
    InvestmentAsset,
    InvestmentValuation,
    LedgerTransaction,
    Trade,
    TradeType,
    User,
)
from investledger.repositories.sqlalchemy import SqlAlchemyUnitOfWork


def _seed_account(uow: SqlAlchemyUnitOfWork, suffix: str = "1", opening_balance: int = 0) -> InvestmentAccount:
    if not uow.users.get_by_id("user-1"):
        uow.users.create(User(user_id="user-1", email="repo@example.com"))
    fin = FinancialAccount(
        account_id=f"fin-{suffix}",
        user_id="user-1",
        name=f"Account {suffix}",
        opening_balance=opening_balance,
    )
    return uow.accounts.create(
        InvestmentAccount(
            investment_account_id=f"inv-{suffix}",
            user_id="user-1",
            account_id=fin.account_id,
            asset_class=AssetClass.MIXED,
            kind=AccountKind.BROKERAGE,
            account=fin,
        )
    )


def _txn(txn_id: str, account_id: str, date: datetime, amount: int, reference=None) -> LedgerTransaction:
    return LedgerTransaction(
        txn_id=txn_id,
        user_id="user-1",
        account_id=account_id,
        date=date,
        amount=amount,
        description="test",
        reference=reference,
    )


# =============================================================================
# ACCOUNT REPOSITORY TESTS
# =============================================================================


class TestInvestmentAccountRepository:
    """Tests for SqlAlchemyInvestmentAccountRepository."""

    def test_create_persists_both_accounts(self, uow: SqlAlchemyUnitOfWork):
        """
        GIVEN an in-memory SQLite database
        WHEN I create an investment account
        THEN it is retrievable with its financial account attached
        """
        _seed_account(uow, opening_balance=12_345)
        uow.session.commit()

        account = uow.accounts.get_by_id("inv-1")

        assert account.account_id == "fin-1"
        assert account.account.name == "Account 1"
        assert account.opening_balance == 12_345
        assert account.created_at is not None

    def test_list_by_user_and_users_with_accounts(self, uow: SqlAlchemyUnitOfWork):
        _seed_account(uow, "1")
        _seed_account(uow, "2")
        uow.users.create(User(user_id="user-2", email="idle@example.com"))

        assert [a.investment_account_id for a in uow.accounts.list_by_user("user-1")] == ["inv-1", "inv-2"]
        assert [u.user_id for u in uow.users.list_with_investment_accounts()] == ["user-1"]

    def test_get_for_update(self, uow: SqlAlchemyUnitOfWork):
        _seed_account(uow)

        assert uow.accounts.get_for_update("inv-1").account_id == "fin-1"
        assert uow.accounts.get_for_update("missing") is None


# =============================================================================
# TRADE REPOSITORY TESTS
# =============================================================================


class TestTradeRepository:
    """Tests for SqlAlchemyTradeRepository."""

    def _trade(self, trade_id: str, occurred_at: datetime, created_at: datetime) -> Trade:
        return Trade(
            trade_id=trade_id,
            user_id="user-1",
            investment_account_id="inv-1",
            txn_type=TradeType.BUY,
            occurred_at=occurred_at,
            amount=12_345,
            asset_type=AssetType.CRYPTO,
            symbol="ETH",
            quantity=Decimal("0.12345678"),
            price_per_unit=Decimal("1000"),
            created_at=created_at,
        )

    def test_decimal_quantity_round_trip(self, uow: SqlAlchemyUnitOfWork):
        """
        GIVEN a trade with an 8-decimal quantity
        WHEN I store and reload it
        THEN the quantity is exact
        """
        _seed_account(uow)
        uow.trades.create(self._trade("t-1", datetime(2024, 1, 1), datetime(2024, 1, 1)))

        trade = uow.trades.get_by_id("t-1")

        assert trade.quantity == Decimal("0.12345678")
        assert trade.asset_type == AssetType.CRYPTO

    def test_ordering_breaks_ties_by_creation(self, uow: SqlAlchemyUnitOfWork):
        """
        GIVEN trades at the same occurred_at created in sequence
        WHEN I list them
        THEN creation order breaks the tie, reversed for newest_first
        """
        _seed_account(uow)
        same_time = datetime(2024, 1, 1, 10)
        uow.trades.create(self._trade("b", same_time, datetime(2024, 1, 2)))
        uow.trades.create(self._trade("a", same_time, datetime(2024, 1, 3)))
        uow.trades.create(self._trade("c", datetime(2023, 12, 1), datetime(2024, 1, 4)))

        oldest_first = [t.trade_id for t in uow.trades.list_by_account("inv-1")]
        newest_first = [t.trade_id for t in uow.trades.list_by_account("inv-1", newest_first=True, limit=2)]

        assert oldest_first == ["c", "b", "a"]
        assert newest_first == ["a", "b"]
        assert uow.trades.count_by_account("inv-1") == 3


# =============================================================================
# LEDGER REPOSITORY TESTS
# =============================================================================


class TestLedgerRepository:
    """Tests for SqlAlchemyLedgerRepository."""

    def test_sum_amounts_with_cutoff(self, uow: SqlAlchemyUnitOfWork):
        """
        GIVEN transactions on either side of a date
        WHEN I sum up to that date
        THEN only transactions at or before it count
        """
        _seed_account(uow)
        uow.ledger.create(_txn("l-1", "fin-1", datetime(2024, 1, 1), 1_000))
        uow.ledger.create(_txn("l-2", "fin-1", datetime(2024, 2, 1), 2_000))
        uow.ledger.create(_txn("l-3", "fin-1", datetime(2024, 3, 1), -500))

        assert uow.ledger.sum_amounts("fin-1") == 2_500
        assert uow.ledger.sum_amounts("fin-1", datetime(2024, 2, 1)) == 3_000
        assert uow.ledger.sum_amounts("fin-1", datetime(2023, 1, 1)) == 0
        assert uow.ledger.sum_amounts("no-such-account") == 0

    def test_reference_lookup_and_delete(self, uow: SqlAlchemyUnitOfWork):
        _seed_account(uow)
        uow.ledger.create(_txn("l-1", "fin-1", datetime(2024, 1, 1), 1_000, reference="investment_trade_x"))

        assert uow.ledger.get_by_reference("investment_trade_x").txn_id == "l-1"
        assert uow.ledger.delete_by_reference("investment_trade_x") == 1
        assert uow.ledger.get_by_reference("investment_trade_x") is None


# =============================================================================
# VALUATION REPOSITORY TESTS
# =============================================================================


class TestValuationRepositories:
    """Tests for valuation and asset repositories."""

    def test_upsert_keeps_one_row_per_as_of(self, uow: SqlAlchemyUnitOfWork):
        """
        GIVEN a valuation at an as_of
        WHEN I upsert a new value at the same as_of
        THEN the row keeps its id and takes the new value
        """
        _seed_account(uow)
        as_of = datetime(2024, 6, 30, 16)
        uow.valuations.upsert(InvestmentValuation("v-1", "user-1", "inv-1", 100, as_of))

        stored = uow.valuations.upsert(InvestmentValuation("v-2", "user-1", "inv-1", 250, as_of))
        uow.valuations.upsert(InvestmentValuation("v-3", "user-1", "inv-1", 300, datetime(2024, 7, 31, 16)))

        assert stored.valuation_id == "v-1"
        assert stored.value == 250
        assert [v.value for v in uow.valuations.list_by_account("inv-1")] == [300, 250]
        assert uow.valuations.latest("inv-1").valuation_id == "v-3"

    def test_sum_valuations_at_as_of(self, uow: SqlAlchemyUnitOfWork):
        _seed_account(uow)
        as_of = datetime(2024, 6, 30, 16)
        for asset_id, name in (("a-1", "Wallet"), ("a-2", "Fund")):
            uow.assets.create(InvestmentAsset(asset_id, "user-1", "inv-1", name, AssetType.CRYPTO))
        uow.assets.upsert_valuation(AssetValuation("av-1", "user-1", "a-1", 1_000, as_of))
        uow.assets.upsert_valuation(AssetValuation("av-2", "user-1", "a-2", 2_000, as_of))
        uow.assets.upsert_valuation(AssetValuation("av-3", "user-1", "a-2", 9_999, datetime(2024, 1, 1)))

        assert uow.assets.sum_valuations("inv-1", as_of) == 3_000
        assert uow.assets.get_by_name("inv-1", "Fund").asset_id == "a-2"
        assert [a.name for a in uow.assets.list_by_account("inv-1")] == ["Fund", "Wallet"]

    def test_asset_update(self, uow: SqlAlchemyUnitOfWork):
        _seed_account(uow)
        asset = uow.assets.create(InvestmentAsset("a-1", "user-1", "inv-1", "Wallet", AssetType.CRYPTO, "BTC"))

        asset.name = "Shares"
        asset.asset_type = AssetType.EQUITY
        asset.symbol = None
        uow.assets.update(asset)

        stored = uow.assets.get_by_id("a-1")
        assert (stored.name, stored.asset_type, stored.symbol) == ("Shares", AssetType.EQUITY, None)

    def test_asset_delete_cascades_valuations_and_unlinks_trades(self, uow: SqlAlchemyUnitOfWork):
        """
        GIVEN an asset with a valuation and a trade linked to it
        WHEN I delete the asset
        THEN its valuations are gone and the trade survives with no asset link
        """
        _seed_account(uow)
        uow.assets.create(InvestmentAsset("a-1", "user-1", "inv-1", "Wallet", AssetType.CRYPTO))
        uow.assets.upsert_valuation(AssetValuation("av-1", "user-1", "a-1", 1_000, datetime(2024, 6, 30, 16)))
        uow.trades.create(
            Trade(
                trade_id="t-1",
                user_id="user-1",
                investment_account_id="inv-1",
                txn_type=TradeType.DEPOSIT,
                occurred_at=datetime(2024, 6, 1),
                amount=500,
                asset_id="a-1",
            )
        )

        assert uow.assets.delete("a-1") is True

        assert uow.assets.get_by_id("a-1") is None
        assert uow.assets.list_valuations("a-1") == []
        assert uow.trades.get_by_id("t-1").asset_id is None
        assert uow.assets.delete("a-1") is False


# =============================================================================
# UNIT OF WORK TESTS
# =============================================================================


class TestUnitOfWork:
    """Tests for SqlAlchemyUnitOfWork.atomic."""

    def test_commit_on_success(self, uow: SqlAlchemyUnitOfWork, test_engine):
        with uow.atomic():
            _seed_account(uow)

        fresh = SqlAlchemyUnitOfWork(Session(bind=test_engine))
        assert fresh.accounts.get_by_id("inv-1") is not None

    def test_rollback_on_error(self, uow: SqlAlchemyUnitOfWork):
        """
        GIVEN a block that writes and then raises
        WHEN the exception leaves atomic()
        THEN the write is rolled back and the exception propagates
        """
        with pytest.raises(RuntimeError):
            with uow.atomic():
                _seed_account(uow)
                raise RuntimeError("boom")

        assert uow.accounts.get_by_id("inv-1") is None

    def test_nested_blocks_join_outer(self, uow: SqlAlchemyUnitOfWork):
        """
        GIVEN a nested atomic block that succeeds
        WHEN the outer block fails afterwards
        THEN the inner write is rolled back too
        """
        with pytest.raises(RuntimeError):
            with uow.atomic():
                with uow.atomic():
                    _seed_account(uow)
                raise RuntimeError("outer failure")

        assert uow.accounts.get_by_id("inv-1") is None
