"""
Pytest configuration and fixtures for investment ledger tests.

This module provides:
- In-memory SQLite database fixtures and a unit of work over them
- Deterministic, failing and slow price providers
- Service fixtures wired to the test database
- Factory helpers for users, accounts and trades
- Time helpers for Eastern timezone
"""

import os

# Keep the app's own engine off the user's data directory
os.environ.setdefault("INVESTLEDGER_DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("INVESTLEDGER_MARKET_DATA_PROVIDER", "stub")

import time
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from investledger.main import app
from investledger.api.deps import get_market_data_service
from investledger.repositories.sqlalchemy.database import Base, get_db
# Import ORM models to register them with Base before creating tables
from investledger.repositories.sqlalchemy import orm_models  # noqa: F401
from investledger.repositories.sqlalchemy import SqlAlchemyUnitOfWork
from investledger.services import (
    AccountLedgerViewService,
    LedgerReconciler,
    LedgerService,
    MarketDataService,
    ValuationEngine,
    ValuationRefreshService,
)
from investledger.services.ledger_service import InvestmentAccountCreate, TradeCreate
from investledger.domain.models import (
    AccountKind,
    AssetClass,
    AssetType,
    InvestmentAccount,
    Trade,
    TradeType,
    User,
)
from investledger.core.timezone import EASTERN_TZ, to_storage
from investledger.config.settings import reset_settings


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def eastern_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in US/Eastern timezone."""
    return EASTERN_TZ.localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return eastern_datetime(2024, 6, 15, 14, 30, 0)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def uow(test_session) -> SqlAlchemyUnitOfWork:
    """Provide a unit of work bound to the test session."""
    return SqlAlchemyUnitOfWork(test_session)


# =============================================================================
# MARKET DATA FIXTURES
# =============================================================================


CRYPTO_PRICES = {
    "BTC": 60000.0,
    "ETH": 3000.0,
    "SOL": 150.0,
}

EQUITY_PRICES = {
    "SPY": 450.0,
    "AAPL": 185.5,
    "MSFT": 378.25,
}


class DeterministicPriceProvider:
    """
    Price provider returning fixed prices.

    Unknown symbols are omitted, like a real upstream. Every call is recorded.
    """

    def __init__(self, prices: dict[str, float], name: str = "deterministic"):
        self.name = name
        self._prices = dict(prices)
        self.calls: list[list[str]] = []

    def get_prices(self, symbols: list[str]) -> dict[str, float]:
        self.calls.append(list(symbols))
        return {s.upper(): self._prices[s.upper()] for s in symbols if s.upper() in self._prices}


class FailingPriceProvider:
    """Price provider that always raises."""

    name = "failing"

    def __init__(self):
        self.calls = 0

    def get_prices(self, symbols: list[str]) -> dict[str, float]:
        self.calls += 1
        raise ConnectionError("Network unavailable")


class SlowPriceProvider:
    """Price provider that sleeps before answering."""

    name = "slow"

    def __init__(self, delay_seconds: float, prices: Optional[dict[str, float]] = None):
        self._delay = delay_seconds
        self._prices = prices or {}

    def get_prices(self, symbols: list[str]) -> dict[str, float]:
        time.sleep(self._delay)
        return {s: self._prices[s] for s in symbols if s in self._prices}


@pytest.fixture
def crypto_provider() -> DeterministicPriceProvider:
    """Provide deterministic crypto prices."""
    return DeterministicPriceProvider(CRYPTO_PRICES, name="crypto-fixed")


@pytest.fixture
def equity_provider() -> DeterministicPriceProvider:
    """Provide deterministic equity prices."""
    return DeterministicPriceProvider(EQUITY_PRICES, name="equity-fixed")


@pytest.fixture
def market_data_service(crypto_provider, equity_provider) -> MarketDataService:
    """Provide MarketDataService over deterministic providers."""
    return MarketDataService(
        crypto_provider=crypto_provider,
        equity_provider=equity_provider,
        cache_ttl_seconds=60,
        fetch_timeout_seconds=2.0,
    )


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def reconciler(uow) -> LedgerReconciler:
    """Provide test LedgerReconciler."""
    return LedgerReconciler(uow)


@pytest.fixture
def ledger_service(uow, reconciler) -> LedgerService:
    """Provide test LedgerService."""
    return LedgerService(
        uow=uow,
        reconciler=reconciler,
        trade_amount_tolerance_cents=1,
    )


@pytest.fixture
def valuation_engine(market_data_service) -> ValuationEngine:
    """Provide test ValuationEngine."""
    return ValuationEngine(market_data_service)


@pytest.fixture
def refresh_service(uow, market_data_service, reconciler) -> ValuationRefreshService:
    """Provide test ValuationRefreshService."""
    return ValuationRefreshService(
        uow=uow,
        market_data=market_data_service,
        reconciler=reconciler,
    )


@pytest.fixture
def ledger_view_service(uow, valuation_engine) -> AccountLedgerViewService:
    """Provide test AccountLedgerViewService."""
    return AccountLedgerViewService(uow=uow, engine=valuation_engine)


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def user_factory(ledger_service) -> Callable[..., User]:
    """Factory for creating test users."""

    def _create_user(email: Optional[str] = None) -> User:
        if email is None:
            email = f"user-{uuid.uuid4().hex[:8]}@example.com"
        return ledger_service.create_user(email)

    return _create_user


@pytest.fixture
def sample_user(user_factory) -> User:
    """Create a sample user."""
    return user_factory("investor@example.com")


@pytest.fixture
def account_factory(ledger_service, sample_user) -> Callable[..., InvestmentAccount]:
    """Factory for creating test investment accounts."""

    def _create_account(
        name: Optional[str] = None,
        opening_balance: int = 0,
        asset_class: AssetClass = AssetClass.MIXED,
        user_id: Optional[str] = None,
    ) -> InvestmentAccount:
        if name is None:
            name = f"Test Account {uuid.uuid4().hex[:8]}"
        return ledger_service.create_investment_account(
            user_id or sample_user.user_id,
            InvestmentAccountCreate(
                name=name,
                asset_class=asset_class,
                kind=AccountKind.BROKERAGE,
                opening_balance=opening_balance,
            ),
        )

    return _create_account


@pytest.fixture
def trade_factory(ledger_service) -> Callable[..., Trade]:
    """Factory for recording trades through the ledger service."""

    def _create_trade(
        account: InvestmentAccount,
        txn_type: TradeType,
        amount: Optional[int] = None,
        symbol: Optional[str] = None,
        asset_type: Optional[AssetType] = None,
        quantity: Optional[Decimal] = None,
        price_per_unit: Optional[Decimal] = None,
        fees: Optional[int] = None,
        occurred_at: Optional[datetime] = None,
    ) -> Trade:
        if symbol and asset_type is None:
            asset_type = AssetType.CRYPTO if symbol.upper() in CRYPTO_PRICES else AssetType.EQUITY
        return ledger_service.add_trade(
            account.user_id,
            account.investment_account_id,
            TradeCreate(
                txn_type=txn_type,
                occurred_at=occurred_at or eastern_datetime(2024, 1, 15),
                amount=amount,
                asset_type=asset_type,
                symbol=symbol,
                quantity=quantity,
                price_per_unit=price_per_unit,
                fees=fees,
            ),
        )

    return _create_trade


# =============================================================================
# PRESET DATA FIXTURES
# =============================================================================


@pytest.fixture
def funded_account(account_factory, trade_factory) -> InvestmentAccount:
    """
    Account opened with $50,000 that bought 100 SPY @ $400 ($10 fee) and
    received a $500 dividend.
    """
    account = account_factory(name="Brokerage", opening_balance=5_000_000)
    trade_factory(
        account,
        TradeType.BUY,
        symbol="SPY",
        quantity=Decimal("100"),
        price_per_unit=Decimal("400"),
        fees=1_000,
        occurred_at=eastern_datetime(2024, 1, 15),
    )
    trade_factory(
        account,
        TradeType.DIVIDEND,
        amount=50_000,
        occurred_at=eastern_datetime(2024, 3, 15),
    )
    return account


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(test_engine, crypto_provider, equity_provider) -> TestClient:
    """Provide FastAPI test client with test database and fixed prices."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    prices = MarketDataService(crypto_provider, equity_provider, cache_ttl_seconds=0)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_market_data_service] = lambda: prices
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def api_user(client) -> dict[str, str]:
    """Create a user through the API and return its request headers."""
    response = client.post("/users", json={"email": "api@example.com"})
    assert response.status_code == 201
    return {"X-User-Id": response.json()["user_id"]}


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def make_trade(
    txn_type: TradeType,
    amount: int = 0,
    symbol: Optional[str] = None,
    quantity: Optional[str] = None,
    price: Optional[str] = None,
    fees: Optional[int] = None,
    asset_type: AssetType = AssetType.EQUITY,
    occurred_at: Optional[datetime] = None,
) -> Trade:
    """Build an unsaved Trade for pure reconstruction and valuation tests."""
    is_trade = txn_type in (TradeType.BUY, TradeType.SELL)
    return Trade(
        trade_id=str(uuid.uuid4()),
        user_id="user-1",
        investment_account_id="inv-1",
        txn_type=txn_type,
        occurred_at=to_storage(occurred_at or eastern_datetime(2024, 1, 15)),
        amount=amount,
        asset_type=asset_type if is_trade else None,
        symbol=symbol,
        quantity=Decimal(quantity) if quantity is not None else None,
        price_per_unit=Decimal(price) if price is not None else None,
        fees=fees,
    )


def buy(symbol: str, quantity: str, price: str, fees: int = 0, **kwargs) -> Trade:
    """Helper for a BUY whose amount is quantity x price."""
    amount = int(Decimal(quantity) * Decimal(price) * 100)
    return make_trade(TradeType.BUY, amount, symbol, quantity, price, fees, **kwargs)


def sell(symbol: str, quantity: str, price: str, fees: int = 0, **kwargs) -> Trade:
    """Helper for a SELL whose amount is quantity x price."""
    amount = int(Decimal(quantity) * Decimal(price) * 100)
    return make_trade(TradeType.SELL, amount, symbol, quantity, price, fees, **kwargs)
