"""Valuation endpoints: manual entry and bulk refresh."""

from fastapi import APIRouter, Depends, Query

from investledger.api.deps import get_current_user_id, get_ledger_service, get_refresh_service
from investledger.api.schemas import (
    ReconciliationResponse,
    ValuationCreateRequest,
    ValuationListResponse,
    ValuationResponse,
    ValuationRunResponse,
    ValuationStatusResponse,
)
from investledger.services import LedgerService, ValuationRefreshService

router = APIRouter(prefix="/investments", tags=["valuations"])


@router.get("/accounts/{investment_account_id}/valuations", response_model=ValuationListResponse)
def list_valuations(
    investment_account_id: str,
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> ValuationListResponse:
    """List valuations newest first."""
    valuations = ledger_service.list_valuations(user_id, investment_account_id)
    return ValuationListResponse(
        valuations=[ValuationResponse.model_validate(v) for v in valuations],
        total=len(valuations),
    )


@router.post(
    "/accounts/{investment_account_id}/valuations",
    response_model=ReconciliationResponse,
    status_code=201,
)
def record_valuation(
    investment_account_id: str,
    data: ValuationCreateRequest,
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> ReconciliationResponse:
    """Record a manual valuation and reconcile the ledger to it."""
    result = ledger_service.record_valuation(user_id, investment_account_id, data.as_of, data.value)
    return ReconciliationResponse.model_validate(result)


@router.post("/valuations/update", response_model=ValuationRunResponse)
def update_valuations(
    dry_run: bool = Query(default=False),
    user_id: str = Depends(get_current_user_id),
    refresh_service: ValuationRefreshService = Depends(get_refresh_service),
) -> ValuationRunResponse:
    """Revalue all of the user's accounts at current prices."""
    summary = refresh_service.refresh_user(user_id, dry_run=dry_run)
    return ValuationRunResponse.model_validate(summary)


@router.get("/valuations/update", response_model=ValuationStatusResponse)
def valuation_status(
    user_id: str = Depends(get_current_user_id),
    refresh_service: ValuationRefreshService = Depends(get_refresh_service),
) -> ValuationStatusResponse:
    """Account count, trade count and last valuation time."""
    return ValuationStatusResponse.model_validate(refresh_service.status(user_id))
