"""Read model for an investment account's holdings, cash and recent trades."""

from typing import Optional

from investledger.core.exceptions import NotFoundError
from investledger.core.timezone import now_eastern
from investledger.domain.views import AccountLedgerView, CashPosition
from investledger.repositories.protocols import UnitOfWork
from investledger.services.valuation_engine import ValuationEngine


class AccountLedgerViewService:
    """Builds the ledger view of one account from a live valuation."""

    def __init__(self, uow: UnitOfWork, engine: ValuationEngine):
        self._uow = uow
        self._engine = engine

    def get_account_ledger(
        self,
        user_id: str,
        investment_account_id: str,
        recent_limit: Optional[int] = 20,
    ) -> AccountLedgerView:
        """Totals, cash, priced holdings and the newest trades of an account."""
        account = self._uow.accounts.get_by_id(investment_account_id)
        if not account or account.user_id != user_id:
            raise NotFoundError("Investment account", investment_account_id)

        trades = self._uow.trades.list_by_account(investment_account_id)
        balance = self._engine.compute_account_balance(account, account.opening_balance, trades)
        recent = sorted(trades, key=lambda t: t.occurred_at, reverse=True)
        if recent_limit is not None:
            recent = recent[:recent_limit]

        currency = account.account.currency if account.account else "USD"
        return AccountLedgerView(
            investment_account_id=account.investment_account_id,
            account_id=account.account_id,
            name=account.name,
            currency=currency,
            total_value=balance.total_value,
            total_cost_basis=balance.total_cost_basis,
            total_unrealized_gain_loss=balance.total_unrealized_gain_loss,
            total_unrealized_gain_loss_percent=balance.total_unrealized_gain_loss_percent,
            cash=CashPosition(balance=balance.cash_balance, currency=currency),
            holdings=balance.holdings,
            recent_trades=recent,
            missing_prices=balance.missing_prices,
            as_of=now_eastern(),
        )
