"""Bulk price refresh: revalue every investment account of a user (or of all users)."""

import logging
from datetime import datetime
from typing import Optional

from investledger.core.exceptions import AppError, NotFoundError
from investledger.core.money import to_cents
from investledger.core.timezone import now_eastern
from investledger.domain.models import AdjustmentAction, AssetType, InvestmentAccount
from investledger.domain.views import (
    AccountValuationResult,
    PriceData,
    Position,
    ReconstructedPortfolio,
    ValuationRunSummary,
    ValuationStatus,
)
from investledger.repositories.protocols import UnitOfWork
from investledger.services.ledger_reconciler import LedgerReconciler
from investledger.services.market_data_service import MarketDataService
from investledger.services.position_reconstructor import reconstruct_positions
from investledger.services.valuation_engine import price_portfolio

logger = logging.getLogger(__name__)


class ValuationRefreshService:
    """
    Revalues investment accounts at current market prices.

    One price lookup covers every holding of the user; each account is then
    reconciled in its own storage transaction. A failing account is reported
    in the summary and does not stop the run.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        market_data: MarketDataService,
        reconciler: Optional[LedgerReconciler] = None,
    ):
        self._uow = uow
        self._market_data = market_data
        self._reconciler = reconciler or LedgerReconciler(uow)

    def refresh_user(
        self,
        user_id: str,
        dry_run: bool = False,
        as_of: Optional[datetime] = None,
    ) -> ValuationRunSummary:
        """Revalue all investment accounts of one user."""
        if not self._uow.users.get_by_id(user_id):
            raise NotFoundError("User", user_id)

        summary = ValuationRunSummary(users=1, dry_run=dry_run)
        self._refresh_accounts(self._uow.accounts.list_by_user(user_id), summary, as_of or now_eastern())
        logger.info(
            "Valuation refresh for user %s: processed=%d updated=%d errors=%d%s",
            user_id,
            summary.processed,
            summary.updated,
            len(summary.errors),
            " (dry run)" if dry_run else "",
        )
        return summary

    def refresh_all(self, dry_run: bool = False) -> ValuationRunSummary:
        """Revalue the accounts of every user owning at least one investment account."""
        summary = ValuationRunSummary(dry_run=dry_run)
        as_of = now_eastern()
        users = self._uow.users.list_with_investment_accounts()
        if not users:
            logger.info("No users with investment accounts")
            return summary

        for user in users:
            summary.users += 1
            try:
                accounts = self._uow.accounts.list_by_user(user.user_id)
            except Exception as e:
                logger.exception("Failed to load accounts for user %s", user.user_id)
                summary.errors.append(f"Failed to load accounts for user {user.email}: {e}")
                continue
            self._refresh_accounts(accounts, summary, as_of)

        logger.info(
            "Scheduled valuation refresh completed: %d accounts updated across %d users",
            summary.updated,
            summary.users,
        )
        return summary

    def status(self, user_id: str) -> ValuationStatus:
        """Account count, trade count and most recent valuation time for a user."""
        accounts = self._uow.accounts.list_by_user(user_id)
        total_trades = 0
        last_valuation: Optional[datetime] = None
        for account in accounts:
            total_trades += self._uow.trades.count_by_account(account.investment_account_id)
            latest = self._uow.valuations.latest(account.investment_account_id)
            if latest and (last_valuation is None or latest.as_of > last_valuation):
                last_valuation = latest.as_of
        return ValuationStatus(
            accounts=len(accounts),
            total_trades=total_trades,
            last_valuation=last_valuation,
        )

    def _refresh_accounts(
        self,
        accounts: list[InvestmentAccount],
        summary: ValuationRunSummary,
        as_of: datetime,
    ) -> None:
        portfolios: list[tuple[InvestmentAccount, ReconstructedPortfolio]] = []
        for account in accounts:
            summary.processed += 1
            try:
                # Each account gets its own unit so a failed read is rolled back alone
                with self._uow.atomic():
                    trades = self._uow.trades.list_by_account(account.investment_account_id)
                portfolios.append((account, reconstruct_positions(account.opening_balance, trades)))
            except Exception as e:
                self._record_failure(summary, account, e)

        if not portfolios:
            return

        held: list[Position] = [p for _, portfolio in portfolios for p in portfolio.positions]
        prices = self._market_data.get_prices(held)
        summary.warnings.extend(prices.errors)

        for account, portfolio in portfolios:
            unpriced = sorted(
                {
                    AssetType(p.asset_type).value.lower()
                    for p in portfolio.positions
                    if AssetType(p.asset_type) in prices.failed_asset_types
                    and prices.price_for(p.symbol, p.asset_type) is None
                }
            )
            if unpriced:
                # Writing would zero out holdings that merely went unpriced
                logger.warning("Skipping %s: no %s prices", account.investment_account_id, ", ".join(unpriced))
                summary.errors.append(
                    f"Failed to fetch {' and '.join(unpriced)} prices; account {account.name} not updated"
                )
                continue

            try:
                with self._uow.atomic():
                    result = self._refresh_account(account, portfolio, prices, summary, as_of)
            except Exception as e:
                self._record_failure(summary, account, e)
                continue

            summary.results.append(result)
            if summary.dry_run:
                continue
            summary.updated += 1
            if result.action != AdjustmentAction.NONE:
                logger.info(
                    "Updated %s: %d -> %d cents (%s)",
                    account.name,
                    result.old_value,
                    result.new_value,
                    result.action.value,
                )

    def _refresh_account(
        self,
        account: InvestmentAccount,
        portfolio: ReconstructedPortfolio,
        prices: PriceData,
        summary: ValuationRunSummary,
        as_of: datetime,
    ) -> AccountValuationResult:
        balance = price_portfolio(portfolio, prices)
        for symbol in balance.missing_prices:
            summary.warnings.append(f"No price found for {symbol} in account {account.name}")

        new_value = to_cents(balance.total_value)
        latest = self._uow.valuations.latest(account.investment_account_id)
        old_value = latest.value if latest else account.opening_balance
        change = new_value - old_value
        result = AccountValuationResult(
            investment_account_id=account.investment_account_id,
            account_name=account.name,
            old_value=old_value,
            new_value=new_value,
            change=change,
            change_percent=change / old_value * 100 if old_value > 0 else 0.0,
        )

        if not summary.dry_run:
            reconciliation = self._reconciler.reconcile_valuation(account.investment_account_id, as_of, new_value)
            result.action = reconciliation.action
        return result

    @staticmethod
    def _record_failure(summary: ValuationRunSummary, account: InvestmentAccount, error: Exception) -> None:
        if isinstance(error, AppError):
            logger.warning("Valuation of %s failed: %s", account.investment_account_id, error.message)
            summary.errors.append(f"Failed to update account {account.name}: {error.message}")
        else:
            logger.exception("Unexpected error valuing %s", account.investment_account_id)
            summary.errors.append(f"Failed to update account {account.name}: {error}")
