"""Pydantic schemas for trade endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from investledger.domain.models.enums import TradeType, AssetType


class TradeCreateRequest(BaseModel):
    """Request schema for recording a trade (money in cents)."""

    txn_type: TradeType = Field(..., description="Trade type")
    occurred_at: Optional[datetime] = Field(
        default=None,
        description="Trade time (US/Eastern if naive); defaults to now",
    )
    amount: Optional[int] = Field(
        default=None,
        description="Cents. BUY/SELL: gross value, derived from quantity x price when omitted",
    )
    asset_type: Optional[AssetType] = Field(default=None, description="Required for BUY/SELL")
    symbol: Optional[str] = Field(default=None, max_length=20, description="Required for BUY/SELL")
    quantity: Optional[Decimal] = Field(default=None, gt=0)
    price_per_unit: Optional[Decimal] = Field(default=None, ge=0, description="USD per unit")
    fees: Optional[int] = Field(default=None, ge=0, description="Cents")
    notes: Optional[str] = Field(default=None, max_length=500)
    asset_id: Optional[str] = None

    @field_validator("symbol")
    @classmethod
    def uppercase_symbol(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else None


class TradeUpdateRequest(BaseModel):
    """Request schema for editing a trade (partial update)."""

    txn_type: Optional[TradeType] = None
    occurred_at: Optional[datetime] = None
    amount: Optional[int] = None
    asset_type: Optional[AssetType] = None
    symbol: Optional[str] = Field(default=None, max_length=20)
    quantity: Optional[Decimal] = Field(default=None, gt=0)
    price_per_unit: Optional[Decimal] = Field(default=None, ge=0)
    fees: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("symbol")
    @classmethod
    def uppercase_symbol(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else None


class TradeResponse(BaseModel):
    """Response schema for a single trade."""

    model_config = {"from_attributes": True}

    trade_id: str
    investment_account_id: str
    txn_type: TradeType
    occurred_at: datetime
    amount: int
    asset_type: Optional[AssetType] = None
    symbol: Optional[str] = None
    quantity: Optional[Decimal] = None
    price_per_unit: Optional[Decimal] = None
    fees: Optional[int] = None
    notes: Optional[str] = None
    asset_id: Optional[str] = None
    description: str
    cash_effect: int


class TradeListResponse(BaseModel):
    """Response schema for listing trades."""

    trades: list[TradeResponse]
    total: int
