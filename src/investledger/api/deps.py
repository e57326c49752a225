"""Dependency injection for FastAPI."""

from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from investledger.config.settings import get_settings
from investledger.core.exceptions import NotFoundError
from investledger.repositories.sqlalchemy.database import get_db
from investledger.repositories.sqlalchemy import SqlAlchemyUnitOfWork
from investledger.services import (
    AccountLedgerViewService,
    LedgerReconciler,
    LedgerService,
    MarketDataService,
    ValuationEngine,
    ValuationRefreshService,
)

# Shared across requests so the price cache survives between them
_market_data_service: Optional[MarketDataService] = None


def get_uow(db: Session = Depends(get_db)) -> SqlAlchemyUnitOfWork:
    """Provide a unit of work bound to the request's session."""
    return SqlAlchemyUnitOfWork(db)


def get_market_data_service() -> MarketDataService:
    """Provide the process-wide MarketDataService."""
    global _market_data_service
    if _market_data_service is None:
        _market_data_service = MarketDataService.from_settings()
    return _market_data_service


def get_current_user_id(
    x_user_id: str = Header(..., alias="X-User-Id"),
    uow: SqlAlchemyUnitOfWork = Depends(get_uow),
) -> str:
    """Resolve the requesting user from the X-User-Id header."""
    if not uow.users.get_by_id(x_user_id):
        raise NotFoundError("User", x_user_id)
    return x_user_id


def verify_cron_token(authorization: Optional[str] = Header(default=None)) -> None:
    """Require 'Bearer <cron_secret_token>' when a token is configured."""
    expected = get_settings().cron_secret_token
    if expected and authorization != f"Bearer {expected}":
        raise HTTPException(status_code=401, detail="Unauthorized")


def get_reconciler(uow: SqlAlchemyUnitOfWork = Depends(get_uow)) -> LedgerReconciler:
    """Provide LedgerReconciler instance."""
    return LedgerReconciler(uow)


def get_ledger_service(
    uow: SqlAlchemyUnitOfWork = Depends(get_uow),
    reconciler: LedgerReconciler = Depends(get_reconciler),
) -> LedgerService:
    """Provide LedgerService instance."""
    return LedgerService(uow=uow, reconciler=reconciler)


def get_valuation_engine(
    market_data: MarketDataService = Depends(get_market_data_service),
) -> ValuationEngine:
    """Provide ValuationEngine instance."""
    return ValuationEngine(market_data)


def get_refresh_service(
    uow: SqlAlchemyUnitOfWork = Depends(get_uow),
    market_data: MarketDataService = Depends(get_market_data_service),
    reconciler: LedgerReconciler = Depends(get_reconciler),
) -> ValuationRefreshService:
    """Provide ValuationRefreshService instance."""
    return ValuationRefreshService(uow=uow, market_data=market_data, reconciler=reconciler)


def get_ledger_view_service(
    uow: SqlAlchemyUnitOfWork = Depends(get_uow),
    engine: ValuationEngine = Depends(get_valuation_engine),
) -> AccountLedgerViewService:
    """Provide AccountLedgerViewService instance."""
    return AccountLedgerViewService(uow=uow, engine=engine)
