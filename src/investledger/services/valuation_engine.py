"""Prices reconstructed positions into an account balance."""

import logging
from typing import Iterable, Optional

from investledger.domain.models import InvestmentAccount, Trade
from investledger.domain.views import (
    HoldingView,
    InvestmentAccountBalance,
    PriceData,
    ReconstructedPortfolio,
)
from investledger.core.money import to_dollars
from investledger.services.market_data_service import MarketDataService
from investledger.services.position_reconstructor import reconstruct_positions

logger = logging.getLogger(__name__)


def _percent(gain: float, cost: float) -> float:
    return gain / cost * 100 if cost else 0.0


def price_portfolio(portfolio: ReconstructedPortfolio, prices: PriceData) -> InvestmentAccountBalance:
    """
    Value a reconstructed portfolio against a price snapshot (pure).

    Holdings without a price stay in the output at price 0 and are listed in
    missing_prices.
    """
    holdings: list[HoldingView] = []
    missing: list[str] = []

    for position in portfolio.positions:
        price = prices.price_for(position.symbol, position.asset_type)
        if price is None:
            missing.append(position.symbol)
            price = 0.0
        quantity = float(position.quantity)
        market_value = quantity * price
        cost_basis = to_dollars(position.cost_basis)
        gain = market_value - cost_basis
        holdings.append(
            HoldingView(
                symbol=position.symbol,
                asset_type=position.asset_type,
                quantity=quantity,
                price_per_unit=price,
                market_value=market_value,
                cost_basis=cost_basis,
                average_cost=float(position.cost_basis / position.quantity / 100),
                unrealized_gain_loss=gain,
                unrealized_gain_loss_percent=_percent(gain, cost_basis),
            )
        )

    holdings_value = sum(h.market_value for h in holdings)
    cash_balance = to_dollars(portfolio.cash_balance)
    total_cost = sum(h.cost_basis for h in holdings)
    total_gain = sum(h.unrealized_gain_loss for h in holdings)

    return InvestmentAccountBalance(
        total_value=holdings_value + cash_balance,
        cash_balance=cash_balance,
        holdings_value=holdings_value,
        holdings=holdings,
        total_cost_basis=total_cost,
        total_unrealized_gain_loss=total_gain,
        total_unrealized_gain_loss_percent=_percent(total_gain, total_cost),
        missing_prices=missing,
        price_errors=list(prices.errors),
    )


def compute_account_balance(
    opening_balance: int,
    trades: Iterable[Trade],
    prices: PriceData,
) -> InvestmentAccountBalance:
    """Reconstruct and price in one pure step; no storage or network access."""
    return price_portfolio(reconstruct_positions(opening_balance, trades), prices)


class ValuationEngine:
    """Values investment accounts with live prices from the market data service."""

    def __init__(self, market_data: MarketDataService):
        self._market_data = market_data

    def compute_account_balance(
        self,
        account: InvestmentAccount,
        opening_balance: Optional[int] = None,
        trades: Iterable[Trade] = (),
    ) -> InvestmentAccountBalance:
        """
        Reconstruct the account, fetch prices for its holdings and value it.

        opening_balance defaults to the financial account's opening balance.
        """
        if opening_balance is None:
            opening_balance = account.opening_balance
        portfolio = reconstruct_positions(opening_balance, trades)
        prices = self._market_data.get_prices(portfolio.positions)
        balance = price_portfolio(portfolio, prices)
        if balance.missing_prices:
            logger.warning(
                "No price for %s in account %s; valued at 0",
                ", ".join(balance.missing_prices),
                account.investment_account_id,
            )
        return balance
