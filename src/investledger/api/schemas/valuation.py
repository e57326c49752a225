"""Pydantic schemas for valuation, asset and refresh endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from investledger.domain.models.enums import AdjustmentAction, AssetType


class ValuationCreateRequest(BaseModel):
    """Request schema for a manual valuation."""

    as_of: Optional[datetime] = Field(default=None, description="Defaults to now")
    value: int = Field(..., description="Account value in cents")


class ValuationResponse(BaseModel):
    """Response schema for a valuation."""

    model_config = {"from_attributes": True}

    valuation_id: str
    investment_account_id: str
    value: int
    as_of: datetime


class ValuationListResponse(BaseModel):
    valuations: list[ValuationResponse]
    total: int


class ReconciliationResponse(BaseModel):
    """Outcome of reconciling a valuation against the ledger."""

    model_config = {"from_attributes": True}

    valuation: ValuationResponse
    plain_balance: int
    difference: int
    action: AdjustmentAction
    adjustment_amount: int


class AssetCreateRequest(BaseModel):
    """Request schema for creating an asset."""

    name: str = Field(..., min_length=1, max_length=255)
    asset_type: AssetType
    symbol: Optional[str] = Field(default=None, max_length=20)


class AssetUpdateRequest(BaseModel):
    """Request schema for updating an asset. Send an empty symbol to clear it."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    asset_type: Optional[AssetType] = None
    symbol: Optional[str] = Field(default=None, max_length=20)


class AssetResponse(BaseModel):
    """Response schema for an asset."""

    model_config = {"from_attributes": True}

    asset_id: str
    investment_account_id: str
    name: str
    asset_type: AssetType
    symbol: Optional[str] = None
    created_at: Optional[datetime] = None


class AssetValuationCreateRequest(BaseModel):
    """Request schema for an asset valuation."""

    as_of: Optional[datetime] = None
    value: int = Field(..., ge=0, description="Asset value in cents")
    quantity: Optional[Decimal] = Field(default=None, ge=0)


class AssetValuationResponse(BaseModel):
    """Response schema for an asset valuation."""

    model_config = {"from_attributes": True}

    asset_valuation_id: str
    asset_id: str
    value: int
    quantity: Optional[Decimal] = None
    as_of: datetime


class AssetValuationResultResponse(BaseModel):
    asset_valuation: AssetValuationResponse
    reconciliation: ReconciliationResponse


class AccountValuationResultResponse(BaseModel):
    """Per-account line of a refresh run (cents)."""

    model_config = {"from_attributes": True}

    investment_account_id: str
    account_name: str
    old_value: int
    new_value: int
    change: int
    change_percent: float
    action: AdjustmentAction


class ValuationRunResponse(BaseModel):
    """Response schema for a bulk valuation refresh."""

    model_config = {"from_attributes": True}

    success: bool
    processed: int
    updated: int
    users: int
    dry_run: bool
    results: list[AccountValuationResultResponse]
    errors: list[str]
    warnings: list[str]


class ValuationStatusResponse(BaseModel):
    """Response schema for valuation status."""

    model_config = {"from_attributes": True}

    accounts: int
    total_trades: int
    last_valuation: Optional[datetime] = None
