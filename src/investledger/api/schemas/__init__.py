"""Pydantic schemas for API request/response."""

from investledger.api.schemas.account import (
    UserCreate,
    UserResponse,
    InvestmentAccountCreateRequest,
    InvestmentAccountUpdateRequest,
    InvestmentAccountResponse,
    InvestmentAccountListResponse,
)
from investledger.api.schemas.trade import (
    TradeCreateRequest,
    TradeUpdateRequest,
    TradeResponse,
    TradeListResponse,
)
from investledger.api.schemas.valuation import (
    ValuationCreateRequest,
    ValuationResponse,
    ValuationListResponse,
    ReconciliationResponse,
    AssetCreateRequest,
    AssetUpdateRequest,
    AssetResponse,
    AssetValuationCreateRequest,
    AssetValuationResponse,
    AssetValuationResultResponse,
    AccountValuationResultResponse,
    ValuationRunResponse,
    ValuationStatusResponse,
)
from investledger.api.schemas.portfolio import (
    HoldingResponse,
    AccountBalanceResponse,
    CashPositionResponse,
    AccountLedgerResponse,
)

__all__ = [
    "UserCreate",
    "UserResponse",
    "InvestmentAccountCreateRequest",
    "InvestmentAccountUpdateRequest",
    "InvestmentAccountResponse",
    "InvestmentAccountListResponse",
    "TradeCreateRequest",
    "TradeUpdateRequest",
    "TradeResponse",
    "TradeListResponse",
    "ValuationCreateRequest",
    "ValuationResponse",
    "ValuationListResponse",
    "ReconciliationResponse",
    "AssetCreateRequest",
    "AssetUpdateRequest",
    "AssetResponse",
    "AssetValuationCreateRequest",
    "AssetValuationResponse",
    "AssetValuationResultResponse",
    "AccountValuationResultResponse",
    "ValuationRunResponse",
    "ValuationStatusResponse",
    "HoldingResponse",
    "AccountBalanceResponse",
    "CashPositionResponse",
    "AccountLedgerResponse",
]
