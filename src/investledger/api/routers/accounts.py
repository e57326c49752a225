"""Investment account endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from investledger.api.deps import (
    get_current_user_id,
    get_ledger_service,
    get_ledger_view_service,
    get_uow,
    get_valuation_engine,
)
from investledger.api.schemas import (
    AccountBalanceResponse,
    AccountLedgerResponse,
    InvestmentAccountCreateRequest,
    InvestmentAccountListResponse,
    InvestmentAccountResponse,
    InvestmentAccountUpdateRequest,
)
from investledger.config.settings import get_settings
from investledger.repositories.sqlalchemy import SqlAlchemyUnitOfWork
from investledger.services import (
    AccountLedgerViewService,
    InvestmentAccountCreate,
    InvestmentAccountUpdate,
    LedgerService,
    ValuationEngine,
)

router = APIRouter(prefix="/investments/accounts", tags=["investment-accounts"])


@router.get("", response_model=InvestmentAccountListResponse)
def list_accounts(
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> InvestmentAccountListResponse:
    """List the user's investment accounts with plain balance and latest valuation."""
    summaries = ledger_service.list_investment_accounts(user_id)
    return InvestmentAccountListResponse(
        accounts=[InvestmentAccountResponse.from_domain(s.account, s) for s in summaries],
        total=len(summaries),
    )


@router.post("", response_model=InvestmentAccountResponse, status_code=201)
def create_account(
    data: InvestmentAccountCreateRequest,
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> InvestmentAccountResponse:
    """Create an investment account (and its financial account)."""
    account = ledger_service.create_investment_account(
        user_id,
        InvestmentAccountCreate(
            name=data.name,
            asset_class=data.asset_class,
            kind=data.kind,
            currency=data.currency,
            opening_balance=data.opening_balance,
            institution=data.institution,
            notes=data.notes,
        ),
    )
    return InvestmentAccountResponse.from_domain(account)


@router.put("/{investment_account_id}", response_model=InvestmentAccountResponse)
def update_account(
    investment_account_id: str,
    data: InvestmentAccountUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> InvestmentAccountResponse:
    """Update an investment account."""
    account = ledger_service.update_investment_account(
        user_id,
        investment_account_id,
        InvestmentAccountUpdate(**data.model_dump()),
    )
    return InvestmentAccountResponse.from_domain(account)


@router.delete("/{investment_account_id}", status_code=204)
def delete_account(
    investment_account_id: str,
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> Response:
    """Delete an account and everything it owns."""
    ledger_service.delete_investment_account(user_id, investment_account_id)
    return Response(status_code=204)


@router.get("/{investment_account_id}/balance", response_model=AccountBalanceResponse)
def get_balance(
    investment_account_id: str,
    user_id: str = Depends(get_current_user_id),
    ledger_service: LedgerService = Depends(get_ledger_service),
    uow: SqlAlchemyUnitOfWork = Depends(get_uow),
    engine: ValuationEngine = Depends(get_valuation_engine),
) -> AccountBalanceResponse:
    """Live valuation of the account from its trades."""
    account = ledger_service.get_investment_account(user_id, investment_account_id)
    trades = uow.trades.list_by_account(investment_account_id)
    balance = engine.compute_account_balance(account, account.opening_balance, trades)
    return AccountBalanceResponse.model_validate(balance)


@router.get("/{investment_account_id}/ledger", response_model=AccountLedgerResponse)
def get_ledger(
    investment_account_id: str,
    limit: Optional[int] = Query(default=None, ge=1, le=500, description="Recent trades to include"),
    user_id: str = Depends(get_current_user_id),
    view_service: AccountLedgerViewService = Depends(get_ledger_view_service),
) -> AccountLedgerResponse:
    """Holdings, cash, totals and recent trades."""
    view = view_service.get_account_ledger(
        user_id,
        investment_account_id,
        recent_limit=limit or get_settings().ledger_recent_trades_limit,
    )
    return AccountLedgerResponse.model_validate(view)
