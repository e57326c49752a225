"""View models for reconstruction, pricing and valuation outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from investledger.domain.models import (
    AssetType,
    AdjustmentAction,
    InvestmentAccount,
    InvestmentValuation,
    Trade,
)


@dataclass
class Position:
    """Derived holding: quantity and cost basis (cents) of one symbol."""

    symbol: str
    asset_type: AssetType
    quantity: Decimal
    cost_basis: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class ReconstructedPortfolio:
    """Cash and open positions replayed from a trade log."""

    cash_balance: int
    positions: list[Position] = field(default_factory=list)


@dataclass
class PriceData:
    """USD prices per asset class, plus provider errors."""

    crypto_prices: dict[str, float] = field(default_factory=dict)
    equity_prices: dict[str, float] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    # Asset classes whose provider failed or timed out as a whole
    failed_asset_types: set[AssetType] = field(default_factory=set)

    def price_for(self, symbol: str, asset_type: AssetType) -> Optional[float]:
        prices = self.crypto_prices if asset_type == AssetType.CRYPTO else self.equity_prices
        return prices.get(symbol.upper())


@dataclass
class HoldingView:
    """Priced holding (dollars)."""

    symbol: str
    asset_type: AssetType
    quantity: float
    price_per_unit: float
    market_value: float
    cost_basis: float
    average_cost: float
    unrealized_gain_loss: float
    unrealized_gain_loss_percent: float


@dataclass
class InvestmentAccountBalance:
    """Valuation of an investment account (dollars)."""

    total_value: float
    cash_balance: float
    holdings_value: float
    holdings: list[HoldingView] = field(default_factory=list)
    total_cost_basis: float = 0.0
    total_unrealized_gain_loss: float = 0.0
    total_unrealized_gain_loss_percent: float = 0.0
    missing_prices: list[str] = field(default_factory=list)
    price_errors: list[str] = field(default_factory=list)


@dataclass
class ReconciliationResult:
    """Outcome of reconciling a valuation against the plain ledger balance."""

    valuation: InvestmentValuation
    plain_balance: int
    difference: int
    action: AdjustmentAction
    adjustment_amount: int


@dataclass
class AccountValuationResult:
    """Per-account line of a bulk refresh run."""

    investment_account_id: str
    account_name: str
    old_value: int
    new_value: int
    change: int
    change_percent: float
    action: AdjustmentAction = AdjustmentAction.NONE


@dataclass
class ValuationRunSummary:
    """Summary of a bulk valuation refresh."""

    processed: int = 0
    updated: int = 0
    results: list[AccountValuationResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    users: int = 0
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return not self.errors


@dataclass
class CashPosition:
    """Cash leg of an investment account (dollars)."""

    balance: float
    currency: str = "USD"


@dataclass
class AccountLedgerView:
    """Read model combining valuation totals, holdings and recent trades."""

    investment_account_id: str
    account_id: str
    name: str
    currency: str
    total_value: float
    total_cost_basis: float
    total_unrealized_gain_loss: float
    total_unrealized_gain_loss_percent: float
    cash: CashPosition
    holdings: list[HoldingView] = field(default_factory=list)
    recent_trades: list[Trade] = field(default_factory=list)
    missing_prices: list[str] = field(default_factory=list)
    as_of: Optional[datetime] = None


@dataclass
class ValuationStatus:
    """Per-user overview of automated valuation state."""

    accounts: int
    total_trades: int
    last_valuation: Optional[datetime] = None


@dataclass
class InvestmentAccountSummary:
    """Investment account with its plain ledger balance and latest valuation."""

    account: InvestmentAccount
    plain_balance: int
    latest_valuation: Optional[InvestmentValuation] = None
