"""Ledger service for investment accounts, trades, valuations and assets."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from investledger.config.settings import get_settings
from investledger.core.exceptions import ValidationError, NotFoundError
from investledger.core.money import gross_amount_cents
from investledger.core.timezone import now_eastern, now_storage, to_storage
from investledger.domain.models import (
    AccountKind,
    AssetClass,
    AssetType,
    AssetValuation,
    FinancialAccount,
    InvestmentAccount,
    InvestmentAsset,
    InvestmentValuation,
    LedgerTransaction,
    Trade,
    TradeType,
    User,
)
from investledger.domain.views import InvestmentAccountSummary, ReconciliationResult
from investledger.repositories.protocols import UnitOfWork
from investledger.services.ledger_reconciler import LedgerReconciler

logger = logging.getLogger(__name__)


@dataclass
class InvestmentAccountCreate:
    """Input data for creating an investment account."""

    name: str
    asset_class: AssetClass
    kind: AccountKind = AccountKind.BROKERAGE
    currency: str = "USD"
    opening_balance: int = 0
    institution: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class InvestmentAccountUpdate:
    """Partial update data for an investment account."""

    name: Optional[str] = None
    asset_class: Optional[AssetClass] = None
    kind: Optional[AccountKind] = None
    currency: Optional[str] = None
    institution: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class TradeCreate:
    """Input data for recording a trade."""

    txn_type: TradeType
    occurred_at: Optional[datetime] = None
    amount: Optional[int] = None
    asset_type: Optional[AssetType] = None
    symbol: Optional[str] = None
    quantity: Optional[Decimal] = None
    price_per_unit: Optional[Decimal] = None
    fees: Optional[int] = None
    notes: Optional[str] = None
    asset_id: Optional[str] = None


@dataclass
class TradeUpdate:
    """Partial update data for editing a trade."""

    txn_type: Optional[TradeType] = None
    occurred_at: Optional[datetime] = None
    amount: Optional[int] = None
    asset_type: Optional[AssetType] = None
    symbol: Optional[str] = None
    quantity: Optional[Decimal] = None
    price_per_unit: Optional[Decimal] = None
    fees: Optional[int] = None
    notes: Optional[str] = None


@dataclass
class AssetCreate:
    """Input data for creating a manually valued asset."""

    name: str
    asset_type: AssetType
    symbol: Optional[str] = None


@dataclass
class AssetUpdate:
    """Partial update of an asset; None leaves a field unchanged, a blank symbol clears it."""

    name: Optional[str] = None
    asset_type: Optional[AssetType] = None
    symbol: Optional[str] = None


class LedgerService:
    """
    Service for managing investment accounts and their trade log.

    Every trade has a mirrored ledger transaction on the account's financial
    account (reference investment_trade_<id>) carrying its cash effect; both
    are written and removed together.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        reconciler: Optional[LedgerReconciler] = None,
        trade_amount_tolerance_cents: Optional[int] = None,
    ):
        self._uow = uow
        self._reconciler = reconciler or LedgerReconciler(uow)
        if trade_amount_tolerance_cents is None:
            trade_amount_tolerance_cents = get_settings().trade_amount_tolerance_cents
        self._tolerance = trade_amount_tolerance_cents

    # =========================================================================
    # Users
    # =========================================================================

    def create_user(self, email: str) -> User:
        """Create a user identified by email."""
        email = (email or "").strip().lower()
        if "@" not in email:
            raise ValidationError(f"Invalid email: '{email}'")
        if self._uow.users.get_by_email(email):
            raise ValidationError(f"User with email '{email}' already exists")

        with self._uow.atomic():
            return self._uow.users.create(
                User(user_id=str(uuid.uuid4()), email=email, created_at=now_storage())
            )

    def get_user(self, user_id: str) -> User:
        """Get user by ID."""
        user = self._uow.users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    # =========================================================================
    # Investment accounts
    # =========================================================================

    def create_investment_account(self, user_id: str, data: InvestmentAccountCreate) -> InvestmentAccount:
        """
        Create an investment account and its financial account atomically.

        A non-zero opening balance is recorded as the first valuation.
        """
        self.get_user(user_id)
        name = (data.name or "").strip()
        if not name:
            raise ValidationError("Account name is required")
        currency = (data.currency or "").strip()
        if len(currency) != 3:
            raise ValidationError(f"Invalid currency code: '{data.currency}'")

        created_at = now_storage()
        financial = FinancialAccount(
            account_id=str(uuid.uuid4()),
            user_id=user_id,
            name=name,
            currency=currency,
            opening_balance=data.opening_balance,
            institution=data.institution,
            notes=data.notes,
            created_at=created_at,
        )
        account = InvestmentAccount(
            investment_account_id=str(uuid.uuid4()),
            user_id=user_id,
            account_id=financial.account_id,
            asset_class=data.asset_class,
            kind=data.kind,
            created_at=created_at,
            account=financial,
        )

        with self._uow.atomic():
            created = self._uow.accounts.create(account)
            if data.opening_balance != 0:
                self._reconciler.reconcile_in_transaction(
                    created.investment_account_id, created_at, data.opening_balance
                )

        logger.info("Created investment account %s (%s)", created.investment_account_id, name)
        return created

    def get_investment_account(self, user_id: str, investment_account_id: str) -> InvestmentAccount:
        """Get an investment account owned by the user."""
        account = self._uow.accounts.get_by_id(investment_account_id)
        if not account or account.user_id != user_id:
            raise NotFoundError("Investment account", investment_account_id)
        return account

    def list_investment_accounts(self, user_id: str) -> list[InvestmentAccountSummary]:
        """List the user's accounts with plain balance and latest valuation."""
        return [
            InvestmentAccountSummary(
                account=account,
                plain_balance=self._reconciler.plain_balance(account),
                latest_valuation=self._uow.valuations.latest(account.investment_account_id),
            )
            for account in self._uow.accounts.list_by_user(user_id)
        ]

    def update_investment_account(
        self,
        user_id: str,
        investment_account_id: str,
        patch: InvestmentAccountUpdate,
    ) -> InvestmentAccount:
        """Update descriptive fields of an account."""
        account = self.get_investment_account(user_id, investment_account_id)

        if patch.name is not None:
            if not patch.name.strip():
                raise ValidationError("Account name is required")
            account.account.name = patch.name.strip()
        if patch.currency is not None:
            if len(patch.currency.strip()) != 3:
                raise ValidationError(f"Invalid currency code: '{patch.currency}'")
            account.account.currency = patch.currency.strip().upper()
        if patch.institution is not None:
            account.account.institution = patch.institution
        if patch.notes is not None:
            account.account.notes = patch.notes
        if patch.asset_class is not None:
            account.asset_class = AssetClass(patch.asset_class)
        if patch.kind is not None:
            account.kind = AccountKind(patch.kind)

        with self._uow.atomic():
            return self._uow.accounts.update(account)

    def delete_investment_account(self, user_id: str, investment_account_id: str) -> None:
        """Delete an account with its trades, valuations, assets and ledger."""
        self.get_investment_account(user_id, investment_account_id)
        with self._uow.atomic():
            self._uow.accounts.delete(investment_account_id)
        logger.info("Deleted investment account %s", investment_account_id)

    # =========================================================================
    # Trades
    # =========================================================================

    def add_trade(self, user_id: str, investment_account_id: str, data: TradeCreate) -> Trade:
        """Record a trade and its mirrored ledger transaction atomically."""
        account = self.get_investment_account(user_id, investment_account_id)
        if data.asset_id:
            self._get_owned_asset(account, data.asset_id)

        trade = Trade(
            trade_id=str(uuid.uuid4()),
            user_id=user_id,
            investment_account_id=investment_account_id,
            txn_type=TradeType(data.txn_type),
            occurred_at=to_storage(data.occurred_at or now_eastern()),
            amount=0,
            asset_type=data.asset_type,
            symbol=data.symbol,
            quantity=data.quantity,
            price_per_unit=data.price_per_unit,
            fees=data.fees,
            notes=data.notes,
            asset_id=data.asset_id,
            created_at=now_storage(),
        )
        self._normalize_trade(trade, data.amount)

        with self._uow.atomic():
            created = self._uow.trades.create(trade)
            self._uow.ledger.create(self._mirror_for(created, account))

        logger.info("Added %s trade %s to %s", created.txn_type.value, created.trade_id, investment_account_id)
        return created

    def edit_trade(
        self,
        user_id: str,
        investment_account_id: str,
        trade_id: str,
        patch: TradeUpdate,
    ) -> Trade:
        """Edit a trade and rewrite its mirrored ledger transaction atomically."""
        account = self.get_investment_account(user_id, investment_account_id)
        trade = self._get_owned_trade(account, trade_id)

        if patch.txn_type is not None:
            trade.txn_type = TradeType(patch.txn_type)
        if patch.occurred_at is not None:
            trade.occurred_at = to_storage(patch.occurred_at)
        if patch.asset_type is not None:
            trade.asset_type = AssetType(patch.asset_type)
        if patch.symbol is not None:
            trade.symbol = patch.symbol
        if patch.quantity is not None:
            trade.quantity = patch.quantity
        if patch.price_per_unit is not None:
            trade.price_per_unit = patch.price_per_unit
        if patch.fees is not None:
            trade.fees = patch.fees
        if patch.notes is not None:
            trade.notes = patch.notes

        amount = patch.amount
        if amount is None:
            if not trade.is_trade:
                amount = trade.amount
            elif patch.quantity is None and patch.price_per_unit is None and patch.txn_type is None:
                amount = trade.amount
        self._normalize_trade(trade, amount)

        with self._uow.atomic():
            updated = self._uow.trades.update(trade)
            mirror = self._uow.ledger.get_by_reference(updated.reference)
            if mirror:
                fresh = self._mirror_for(updated, account)
                mirror.date = fresh.date
                mirror.amount = fresh.amount
                mirror.description = fresh.description
                mirror.memo = fresh.memo
                self._uow.ledger.update(mirror)
            else:
                self._uow.ledger.create(self._mirror_for(updated, account))
        return updated

    def delete_trade(self, user_id: str, investment_account_id: str, trade_id: str) -> None:
        """Delete a trade and its mirrored ledger transaction atomically."""
        account = self.get_investment_account(user_id, investment_account_id)
        trade = self._get_owned_trade(account, trade_id)
        with self._uow.atomic():
            self._uow.ledger.delete_by_reference(trade.reference)
            self._uow.trades.delete(trade.trade_id)
        logger.info("Deleted trade %s from %s", trade_id, investment_account_id)

    def list_trades(
        self,
        user_id: str,
        investment_account_id: str,
        limit: Optional[int] = None,
    ) -> list[Trade]:
        """List trades newest first."""
        self.get_investment_account(user_id, investment_account_id)
        return self._uow.trades.list_by_account(investment_account_id, newest_first=True, limit=limit)

    # =========================================================================
    # Valuations
    # =========================================================================

    def list_valuations(self, user_id: str, investment_account_id: str) -> list[InvestmentValuation]:
        """List valuations newest first."""
        self.get_investment_account(user_id, investment_account_id)
        return self._uow.valuations.list_by_account(investment_account_id)

    def record_valuation(
        self,
        user_id: str,
        investment_account_id: str,
        as_of: Optional[datetime],
        value_cents: int,
    ) -> ReconciliationResult:
        """
        Record a manual valuation and reconcile the ledger to it.

        as_of may not precede the latest recorded valuation.
        """
        self.get_investment_account(user_id, investment_account_id)
        return self._reconciler.reconcile_valuation(
            investment_account_id, as_of or now_eastern(), value_cents, reject_backdated=True
        )

    # =========================================================================
    # Assets
    # =========================================================================

    def create_asset(self, user_id: str, investment_account_id: str, data: AssetCreate) -> InvestmentAsset:
        """Create a manually valued asset; names are unique per account."""
        account = self.get_investment_account(user_id, investment_account_id)
        name = (data.name or "").strip()
        if not name:
            raise ValidationError("Asset name is required")
        if self._uow.assets.get_by_name(investment_account_id, name):
            raise ValidationError(f"Asset '{name}' already exists in this account")

        with self._uow.atomic():
            return self._uow.assets.create(
                InvestmentAsset(
                    asset_id=str(uuid.uuid4()),
                    user_id=user_id,
                    investment_account_id=account.investment_account_id,
                    name=name,
                    asset_type=AssetType(data.asset_type),
                    symbol=data.symbol.upper() if data.symbol else None,
                    created_at=now_storage(),
                )
            )

    def update_asset(
        self,
        user_id: str,
        investment_account_id: str,
        asset_id: str,
        patch: AssetUpdate,
    ) -> InvestmentAsset:
        """Rename or retype an asset; its valuations are left as they are."""
        account = self.get_investment_account(user_id, investment_account_id)
        asset = self._get_owned_asset(account, asset_id)

        if patch.name is not None:
            name = patch.name.strip()
            if not name:
                raise ValidationError("Asset name is required")
            existing = self._uow.assets.get_by_name(investment_account_id, name)
            if existing and existing.asset_id != asset_id:
                raise ValidationError(f"Asset '{name}' already exists in this account")
            asset.name = name
        if patch.symbol is not None:
            asset.symbol = patch.symbol.strip().upper() or None
        if patch.asset_type is not None:
            asset.asset_type = AssetType(patch.asset_type)

        with self._uow.atomic():
            updated = self._uow.assets.update(asset)
        logger.info("Updated asset %s in account %s", asset_id, investment_account_id)
        return updated

    def delete_asset(self, user_id: str, investment_account_id: str, asset_id: str) -> None:
        """Delete an asset and its valuations; account valuations already written stay."""
        account = self.get_investment_account(user_id, investment_account_id)
        self._get_owned_asset(account, asset_id)
        with self._uow.atomic():
            self._uow.assets.delete(asset_id)
        logger.info("Deleted asset %s from account %s", asset_id, investment_account_id)

    def list_assets(self, user_id: str, investment_account_id: str) -> list[InvestmentAsset]:
        self.get_investment_account(user_id, investment_account_id)
        return self._uow.assets.list_by_account(investment_account_id)

    def list_asset_valuations(
        self,
        user_id: str,
        investment_account_id: str,
        asset_id: str,
    ) -> list[AssetValuation]:
        account = self.get_investment_account(user_id, investment_account_id)
        self._get_owned_asset(account, asset_id)
        return self._uow.assets.list_valuations(asset_id)

    def record_asset_valuation(
        self,
        user_id: str,
        investment_account_id: str,
        asset_id: str,
        as_of: Optional[datetime],
        value_cents: int,
        quantity: Optional[Decimal] = None,
    ) -> tuple[AssetValuation, ReconciliationResult]:
        """Record an asset's value; the account is revalued to the sum of its assets."""
        account = self.get_investment_account(user_id, investment_account_id)
        self._get_owned_asset(account, asset_id)
        if value_cents < 0:
            raise ValidationError("Asset value cannot be negative")
        return self._reconciler.reconcile_asset_valuation(
            asset_id, as_of or now_eastern(), value_cents, quantity
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _normalize_trade(self, trade: Trade, amount: Optional[int]) -> None:
        """Fill in and check the stored amount, then validate the trade."""
        label = trade.txn_type.value
        if trade.symbol:
            trade.symbol = trade.symbol.strip().upper()

        if trade.is_trade:
            if trade.quantity is not None and trade.price_per_unit is not None:
                gross = gross_amount_cents(trade.quantity, trade.price_per_unit)
                if amount is None:
                    amount = gross
                elif abs(amount - gross) > self._tolerance:
                    raise ValidationError(
                        f"{label} amount {amount} does not match quantity x price ({gross} cents)"
                    )
            trade.amount = amount if amount is not None else 0
        else:
            if amount is None:
                raise ValidationError(f"{label} requires an amount")
            if trade.txn_type == TradeType.WITHDRAW:
                amount = -abs(amount)
            elif trade.txn_type != TradeType.ADJUSTMENT and amount < 0:
                raise ValidationError(f"{label} amount cannot be negative")
            trade.amount = amount
            # Cash-only types carry no instrument and no separate fee
            trade.asset_type = None
            trade.symbol = None
            trade.quantity = None
            trade.price_per_unit = None
            trade.fees = None

        trade.validate()

    @staticmethod
    def _mirror_for(trade: Trade, account: InvestmentAccount) -> LedgerTransaction:
        return LedgerTransaction(
            txn_id=str(uuid.uuid4()),
            user_id=trade.user_id,
            account_id=account.account_id,
            date=trade.occurred_at,
            amount=trade.cash_effect,
            description=trade.description,
            reference=trade.reference,
            memo=trade.notes,
            created_at=now_storage(),
        )

    def _get_owned_trade(self, account: InvestmentAccount, trade_id: str) -> Trade:
        trade = self._uow.trades.get_by_id(trade_id)
        if not trade or trade.investment_account_id != account.investment_account_id:
            raise NotFoundError("Trade", trade_id)
        return trade

    def _get_owned_asset(self, account: InvestmentAccount, asset_id: str) -> InvestmentAsset:
        asset = self._uow.assets.get_by_id(asset_id)
        if not asset or asset.investment_account_id != account.investment_account_id:
            raise NotFoundError("Asset", asset_id)
        return asset
