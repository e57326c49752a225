"""Trade (investment transaction) domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from investledger.core.exceptions import ValidationError
from investledger.domain.models.enums import TradeType, AssetType

TRADE_REFERENCE_PREFIX = "investment_trade_"


def trade_reference(trade_id: str) -> str:
    """Reference string of the ledger transaction mirroring a trade."""
    return f"{TRADE_REFERENCE_PREFIX}{trade_id}"


@dataclass
class Trade:
    """
    Investment account transaction (source of truth for positions and cash).

    - BUY/SELL require symbol, asset_type, quantity and price_per_unit
    - amount is gross in cents; fees are separate cents
    - WITHDRAW amounts are stored non-positive
    """

    trade_id: str
    user_id: str
    investment_account_id: str
    txn_type: TradeType
    occurred_at: datetime
    amount: int
    asset_type: Optional[AssetType] = None
    symbol: Optional[str] = None
    quantity: Optional[Decimal] = None
    price_per_unit: Optional[Decimal] = None
    fees: Optional[int] = None
    notes: Optional[str] = None
    asset_id: Optional[str] = None
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.txn_type, str):
            self.txn_type = TradeType(self.txn_type)
        if isinstance(self.asset_type, str):
            self.asset_type = AssetType(self.asset_type)

    @property
    def is_trade(self) -> bool:
        """Return True if this is a BUY or SELL."""
        return self.txn_type in (TradeType.BUY, TradeType.SELL)

    @property
    def fee_amount(self) -> int:
        return self.fees or 0

    @property
    def cash_effect(self) -> int:
        """
        Net cash impact of this trade in cents.

        Positive = cash added, Negative = cash removed.
        """
        if self.txn_type in (
            TradeType.DEPOSIT,
            TradeType.WITHDRAW,
            TradeType.DIVIDEND,
            TradeType.INTEREST,
            TradeType.ADJUSTMENT,
        ):
            return self.amount
        elif self.txn_type == TradeType.FEE:
            return -self.amount
        elif self.txn_type == TradeType.BUY:
            return -(self.amount + self.fee_amount)
        return self.amount - self.fee_amount

    @property
    def description(self) -> str:
        """Ledger description, e.g. 'Buy AAPL' or 'Deposit'."""
        base = self.txn_type.value.capitalize()
        return f"{base} {self.symbol}" if self.symbol else base

    @property
    def reference(self) -> str:
        return trade_reference(self.trade_id)

    def validate(self) -> None:
        """Raise ValidationError if required fields for the type are missing."""
        label = self.txn_type.value
        if self.is_trade:
            if not self.symbol:
                raise ValidationError(f"{label} requires a symbol")
            if self.asset_type is None:
                raise ValidationError(f"{label} requires an asset type")
            if self.quantity is None or self.quantity <= 0:
                raise ValidationError(f"{label} requires quantity > 0")
            if self.price_per_unit is None or self.price_per_unit < 0:
                raise ValidationError(f"{label} requires price per unit >= 0")
            if self.amount < 0:
                raise ValidationError(f"{label} amount cannot be negative")
        elif self.txn_type == TradeType.WITHDRAW and self.amount > 0:
            raise ValidationError(
                f"WITHDRAW {self.trade_id} has a positive amount; withdrawals are stored negated"
            )
        if self.fees is not None and self.fees < 0:
            raise ValidationError("Fees cannot be negative")
