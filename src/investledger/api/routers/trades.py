"""Trade endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from investledger.api.deps import get_current_user_id, get_ledger_service
from investledger.api.schemas import (
    TradeCreateRequest,
    TradeListResponse,
    TradeResponse,
    TradeUpdateRequest,
)
from investledger.services import LedgerService, TradeCreate, TradeUpdate

router = APIRouter(prefix="/investments/accounts/{investment_account_id}/trades", tags=["trades"])


@router.get("", response_model=TradeListResponse)
def list_trades(
    investment_account_id: str,
    limit: Optional[int] = Query(default=None, ge=1),
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> TradeListResponse:
    """List trades newest first."""
    trades = ledger_service.list_trades(user_id, investment_account_id, limit=limit)
    return TradeListResponse(
        trades=[TradeResponse.model_validate(t) for t in trades],
        total=len(trades),
    )


@router.post("", response_model=TradeResponse, status_code=201)
def add_trade(
    investment_account_id: str,
    data: TradeCreateRequest,
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> TradeResponse:
    """Record a trade and its ledger mirror."""
    trade = ledger_service.add_trade(user_id, investment_account_id, TradeCreate(**data.model_dump()))
    return TradeResponse.model_validate(trade)


@router.put("/{trade_id}", response_model=TradeResponse)
def edit_trade(
    investment_account_id: str,
    trade_id: str,
    data: TradeUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> TradeResponse:
    """Edit a trade and its ledger mirror."""
    trade = ledger_service.edit_trade(
        user_id, investment_account_id, trade_id, TradeUpdate(**data.model_dump())
    )
    return TradeResponse.model_validate(trade)


@router.delete("/{trade_id}", status_code=204)
def delete_trade(
    investment_account_id: str,
    trade_id: str,
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> Response:
    """Delete a trade and its ledger mirror."""
    ledger_service.delete_trade(user_id, investment_account_id, trade_id)
    return Response(status_code=204)
