"""Manually valued asset endpoints."""

from fastapi import APIRouter, Depends, Response

from investledger.api.deps import get_current_user_id, get_ledger_service
from investledger.api.schemas import (
    AssetCreateRequest,
    AssetResponse,
    AssetUpdateRequest,
    AssetValuationCreateRequest,
    AssetValuationResponse,
    AssetValuationResultResponse,
    ReconciliationResponse,
)
from investledger.services import AssetCreate, AssetUpdate, LedgerService

router = APIRouter(prefix="/investments/accounts/{investment_account_id}/assets", tags=["assets"])


@router.get("", response_model=list[AssetResponse])
def list_assets(
    investment_account_id: str,
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> list[AssetResponse]:
    """List assets of an account."""
    assets = ledger_service.list_assets(user_id, investment_account_id)
    return [AssetResponse.model_validate(a) for a in assets]


@router.post("", response_model=AssetResponse, status_code=201)
def create_asset(
    investment_account_id: str,
    data: AssetCreateRequest,
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> AssetResponse:
    """Create an asset."""
    asset = ledger_service.create_asset(user_id, investment_account_id, AssetCreate(**data.model_dump()))
    return AssetResponse.model_validate(asset)


@router.put("/{asset_id}", response_model=AssetResponse)
def update_asset(
    investment_account_id: str,
    asset_id: str,
    data: AssetUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> AssetResponse:
    """Update an asset's name, symbol or type."""
    asset = ledger_service.update_asset(
        user_id,
        investment_account_id,
        asset_id,
        AssetUpdate(**data.model_dump()),
    )
    return AssetResponse.model_validate(asset)


@router.delete("/{asset_id}", status_code=204)
def delete_asset(
    investment_account_id: str,
    asset_id: str,
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> Response:
    """Delete an asset and its valuations."""
    ledger_service.delete_asset(user_id, investment_account_id, asset_id)
    return Response(status_code=204)


@router.get("/{asset_id}/valuations", response_model=list[AssetValuationResponse])
def list_asset_valuations(
    investment_account_id: str,
    asset_id: str,
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> list[AssetValuationResponse]:
    """List an asset's valuations newest first."""
    valuations = ledger_service.list_asset_valuations(user_id, investment_account_id, asset_id)
    return [AssetValuationResponse.model_validate(v) for v in valuations]


@router.post("/{asset_id}/valuations", response_model=AssetValuationResultResponse, status_code=201)
def record_asset_valuation(
    investment_account_id: str,
    asset_id: str,
    data: AssetValuationCreateRequest,
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> AssetValuationResultResponse:
    """Record an asset value; the account is revalued to the sum of its assets."""
    asset_valuation, result = ledger_service.record_asset_valuation(
        user_id,
        investment_account_id,
        asset_id,
        data.as_of,
        data.value,
        data.quantity,
    )
    return AssetValuationResultResponse(
        asset_valuation=AssetValuationResponse.model_validate(asset_valuation),
        reconciliation=ReconciliationResponse.model_validate(result),
    )
