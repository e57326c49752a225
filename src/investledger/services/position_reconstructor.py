"""Replays an investment account's trade log into cash and open positions."""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable

from investledger.domain.models import Trade, TradeType, AssetType
from investledger.domain.views import Position, ReconstructedPortfolio

_ZERO = Decimal("0")


def reconstruct_positions(opening_balance: int, trades: Iterable[Trade]) -> ReconstructedPortfolio:
    """
    Derive cash (cents) and positions from an opening balance and trades.

    Trades are applied in the order given (callers pass them by occurred_at).
    Cost basis uses weighted average: a partial SELL removes the sold fraction
    of basis, a full SELL (or a sell from a non-positive position) resets it
    to zero. Positions with quantity <= 0 are dropped.

    Raises ValidationError for malformed trades before any computation.
    """
    trades = list(trades)
    for trade in trades:
        trade.validate()

    cash = opening_balance
    quantities: dict[tuple[str, AssetType], Decimal] = defaultdict(lambda: _ZERO)
    costs: dict[tuple[str, AssetType], Decimal] = defaultdict(lambda: _ZERO)

    for trade in trades:
        if trade.txn_type in (TradeType.DEPOSIT, TradeType.DIVIDEND, TradeType.INTEREST):
            cash += trade.amount

        elif trade.txn_type == TradeType.WITHDRAW:
            cash += trade.amount

        elif trade.txn_type == TradeType.FEE:
            cash -= trade.amount

        elif trade.txn_type == TradeType.BUY:
            key = (trade.symbol.upper(), trade.asset_type)
            total_cost = trade.amount + trade.fee_amount
            quantities[key] += trade.quantity
            costs[key] += Decimal(total_cost)
            cash -= total_cost

        elif trade.txn_type == TradeType.SELL:
            key = (trade.symbol.upper(), trade.asset_type)
            held = quantities[key]
            if held > 0 and trade.quantity < held:
                costs[key] -= costs[key] * (trade.quantity / held)
            else:
                costs[key] = _ZERO
            quantities[key] = held - trade.quantity
            cash += trade.amount - trade.fee_amount

        # ADJUSTMENT: no effect on cash or positions

    positions = [
        Position(symbol=symbol, asset_type=asset_type, quantity=qty, cost_basis=costs[(symbol, asset_type)])
        for (symbol, asset_type), qty in quantities.items()
        if qty > 0
    ]
    positions.sort(key=lambda p: (p.asset_type.value, p.symbol))
    return ReconstructedPortfolio(cash_balance=cash, positions=positions)
