"""Pydantic schemas for user and investment account endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from investledger.domain.models.enums import AssetClass, AccountKind
from investledger.domain.views import InvestmentAccountSummary
from investledger.domain.models import InvestmentAccount


class UserCreate(BaseModel):
    """Request schema for creating a user."""

    email: str = Field(..., min_length=3, max_length=255)


class UserResponse(BaseModel):
    """Response schema for a user."""

    model_config = {"from_attributes": True}

    user_id: str
    email: str
    created_at: Optional[datetime] = None


class InvestmentAccountCreateRequest(BaseModel):
    """Request schema for creating an investment account."""

    name: str = Field(..., min_length=1, max_length=255, description="Account name")
    asset_class: AssetClass = Field(..., description="CRYPTO, EQUITY or MIXED")
    kind: AccountKind = Field(default=AccountKind.BROKERAGE)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    opening_balance: int = Field(default=0, description="Opening balance in cents")
    institution: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("currency")
    @classmethod
    def uppercase_currency(cls, v: str) -> str:
        return v.upper()


class InvestmentAccountUpdateRequest(BaseModel):
    """Request schema for updating an investment account (partial update)."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    asset_class: Optional[AssetClass] = None
    kind: Optional[AccountKind] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    institution: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = Field(default=None, max_length=1000)


class InvestmentAccountResponse(BaseModel):
    """Response schema for an investment account (money in cents)."""

    investment_account_id: str
    account_id: str
    name: str
    currency: str
    opening_balance: int
    asset_class: AssetClass
    kind: AccountKind
    institution: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    plain_balance: Optional[int] = None
    latest_valuation: Optional[int] = None
    latest_valuation_as_of: Optional[datetime] = None

    @classmethod
    def from_domain(
        cls,
        account: InvestmentAccount,
        summary: Optional[InvestmentAccountSummary] = None,
    ) -> "InvestmentAccountResponse":
        fin = account.account
        latest = summary.latest_valuation if summary else None
        return cls(
            investment_account_id=account.investment_account_id,
            account_id=account.account_id,
            name=account.name,
            currency=fin.currency if fin else "USD",
            opening_balance=account.opening_balance,
            asset_class=account.asset_class,
            kind=account.kind,
            institution=fin.institution if fin else None,
            notes=fin.notes if fin else None,
            created_at=account.created_at,
            plain_balance=summary.plain_balance if summary else None,
            latest_valuation=latest.value if latest else None,
            latest_valuation_as_of=latest.as_of if latest else None,
        )


class InvestmentAccountListResponse(BaseModel):
    """Response schema for listing investment accounts."""

    accounts: list[InvestmentAccountResponse]
    total: int
