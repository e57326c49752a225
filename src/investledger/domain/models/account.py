"""User and account domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from investledger.domain.models.enums import AssetClass, AccountKind


@dataclass
class User:
    """Owner of accounts, trades and valuations."""

    user_id: str
    email: str
    created_at: Optional[datetime] = field(default=None)


@dataclass
class FinancialAccount:
    """
    Generic financial account backing an investment account.

    Its plain balance is opening_balance plus the sum of its ledger transactions.
    Amounts are integer cents.
    """

    account_id: str
    user_id: str
    name: str
    currency: str = "USD"
    opening_balance: int = 0
    institution: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        self.currency = self.currency.upper()


@dataclass
class InvestmentAccount:
    """Investment account linked one-to-one with a financial account."""

    investment_account_id: str
    user_id: str
    account_id: str
    asset_class: AssetClass
    kind: AccountKind = AccountKind.BROKERAGE
    created_at: Optional[datetime] = field(default=None)
    account: Optional[FinancialAccount] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.asset_class, str):
            self.asset_class = AssetClass(self.asset_class)
        if isinstance(self.kind, str):
            self.kind = AccountKind(self.kind)

    @property
    def name(self) -> str:
        return self.account.name if self.account else self.investment_account_id

    @property
    def opening_balance(self) -> int:
        return self.account.opening_balance if self.account else 0
