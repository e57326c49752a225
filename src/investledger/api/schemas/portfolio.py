"""Pydantic schemas for balance and ledger view endpoints (dollars)."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from investledger.api.schemas.trade import TradeResponse
from investledger.domain.models.enums import AssetType


class HoldingResponse(BaseModel):
    """Priced holding."""

    model_config = {"from_attributes": True}

    symbol: str
    asset_type: AssetType
    quantity: float
    price_per_unit: float
    market_value: float
    cost_basis: float
    average_cost: float
    unrealized_gain_loss: float
    unrealized_gain_loss_percent: float


class AccountBalanceResponse(BaseModel):
    """Live valuation of an account."""

    model_config = {"from_attributes": True}

    total_value: float
    cash_balance: float
    holdings_value: float
    holdings: list[HoldingResponse]
    total_cost_basis: float
    total_unrealized_gain_loss: float
    total_unrealized_gain_loss_percent: float
    missing_prices: list[str]
    price_errors: list[str]


class CashPositionResponse(BaseModel):
    model_config = {"from_attributes": True}

    balance: float
    currency: str


class AccountLedgerResponse(BaseModel):
    """Account ledger view: totals, cash, holdings and recent trades."""

    model_config = {"from_attributes": True}

    investment_account_id: str
    account_id: str
    name: str
    currency: str
    total_value: float
    total_cost_basis: float
    total_unrealized_gain_loss: float
    total_unrealized_gain_loss_percent: float
    cash: CashPositionResponse
    holdings: list[HoldingResponse]
    recent_trades: list[TradeResponse]
    missing_prices: list[str]
    as_of: Optional[datetime] = None
