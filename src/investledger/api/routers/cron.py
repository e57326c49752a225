"""Scheduled valuation endpoint for external cron callers."""

import logging

from fastapi import APIRouter, Depends, Query

from investledger.api.deps import get_refresh_service, verify_cron_token
from investledger.api.schemas import ValuationRunResponse
from investledger.services import ValuationRefreshService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["cron"])


@router.post(
    "/valuations",
    response_model=ValuationRunResponse,
    dependencies=[Depends(verify_cron_token)],
)
def run_scheduled_valuations(
    dry_run: bool = Query(default=False),
    refresh_service: ValuationRefreshService = Depends(get_refresh_service),
) -> ValuationRunResponse:
    """Revalue every user's investment accounts."""
    logger.info("Starting scheduled valuation update")
    summary = refresh_service.refresh_all(dry_run=dry_run)
    return ValuationRunResponse.model_validate(summary)
