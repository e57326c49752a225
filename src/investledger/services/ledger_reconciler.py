"""Keeps the plain ledger balance of an investment account in line with its valuations."""

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from investledger.core.exceptions import NotFoundError, ReconciliationError, ValidationError
from investledger.core.timezone import to_storage, now_storage
from investledger.domain.models import (
    AdjustmentAction,
    AssetValuation,
    InvestmentAccount,
    InvestmentValuation,
    LedgerTransaction,
    ADJUSTMENT_DESCRIPTION,
)
from investledger.domain.views import ReconciliationResult
from investledger.repositories.protocols import UnitOfWork

logger = logging.getLogger(__name__)


class LedgerReconciler:
    """
    Upserts a valuation and maintains its single adjustment transaction.

    The plain balance of the backing financial account is its opening balance
    plus every ledger transaction dated at or before the valuation's as_of.
    The adjustment (reference investment_valuation_<id>) absorbs the gap so
    the plain balance equals the valuation. Reconciling the same value twice
    leaves the ledger unchanged.
    """

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    def reconcile_valuation(
        self,
        investment_account_id: str,
        as_of: datetime,
        value_cents: int,
        reject_backdated: bool = False,
    ) -> ReconciliationResult:
        """
        Record value_cents as the account's value at as_of and reconcile.

        Runs as one storage transaction with the account row locked. Storage
        failures roll everything back and raise ReconciliationError. With
        reject_backdated, an as_of earlier than the latest valuation raises
        ValidationError; the check runs under the same lock.
        """
        try:
            with self._uow.atomic():
                return self.reconcile_in_transaction(
                    investment_account_id, as_of, value_cents, reject_backdated=reject_backdated
                )
        except SQLAlchemyError as e:
            logger.error("Reconciliation of %s rolled back: %s", investment_account_id, e)
            raise ReconciliationError(investment_account_id, str(e)) from e

    def reconcile_asset_valuation(
        self,
        asset_id: str,
        as_of: datetime,
        value_cents: int,
        quantity: Optional[Decimal] = None,
    ) -> tuple[AssetValuation, ReconciliationResult]:
        """
        Record an asset's value and reconcile its account to the sum of all
        asset valuations at the same as_of, atomically.
        """
        asset = self._uow.assets.get_by_id(asset_id)
        if not asset:
            raise NotFoundError("Asset", asset_id)

        as_of = to_storage(as_of)
        try:
            with self._uow.atomic():
                asset_valuation = self._uow.assets.upsert_valuation(
                    AssetValuation(
                        asset_valuation_id=str(uuid.uuid4()),
                        user_id=asset.user_id,
                        asset_id=asset.asset_id,
                        value=value_cents,
                        as_of=as_of,
                        quantity=quantity,
                    )
                )
                total = self._uow.assets.sum_valuations(asset.investment_account_id, as_of)
                result = self.reconcile_in_transaction(asset.investment_account_id, as_of, total)
        except SQLAlchemyError as e:
            logger.error("Asset reconciliation of %s rolled back: %s", asset.investment_account_id, e)
            raise ReconciliationError(asset.investment_account_id, str(e)) from e
        return asset_valuation, result

    def reconcile_in_transaction(
        self,
        investment_account_id: str,
        as_of: datetime,
        value_cents: int,
        reject_backdated: bool = False,
    ) -> ReconciliationResult:
        """Reconcile inside an already-open unit of work (caller commits)."""
        account = self._uow.accounts.get_for_update(investment_account_id)
        if not account:
            raise NotFoundError("Investment account", investment_account_id)

        as_of = to_storage(as_of)
        if reject_backdated:
            latest = self._uow.valuations.latest(investment_account_id)
            if latest and as_of < latest.as_of:
                raise ValidationError(
                    f"Valuation date {as_of.isoformat()} is before the latest valuation "
                    f"({latest.as_of.isoformat()})"
                )
        plain_balance = self.plain_balance(account, as_of)
        difference = value_cents - plain_balance

        valuation = self._uow.valuations.upsert(
            InvestmentValuation(
                valuation_id=str(uuid.uuid4()),
                user_id=account.user_id,
                investment_account_id=investment_account_id,
                value=value_cents,
                as_of=as_of,
            )
        )

        reference = valuation.reference
        existing = self._uow.ledger.get_by_reference(reference)
        new_amount = (existing.amount if existing else 0) + difference

        if existing and new_amount == 0:
            self._uow.ledger.delete(existing.txn_id)
            action = AdjustmentAction.DELETED
        elif existing:
            existing.amount = new_amount
            existing.date = as_of
            self._uow.ledger.update(existing)
            action = AdjustmentAction.UPDATED
        elif difference != 0:
            self._uow.ledger.create(
                LedgerTransaction(
                    txn_id=str(uuid.uuid4()),
                    user_id=account.user_id,
                    account_id=account.account_id,
                    date=as_of,
                    amount=difference,
                    description=ADJUSTMENT_DESCRIPTION,
                    reference=reference,
                    created_at=now_storage(),
                )
            )
            action = AdjustmentAction.CREATED
        else:
            action = AdjustmentAction.NONE

        adjustment_amount = 0 if action in (AdjustmentAction.DELETED, AdjustmentAction.NONE) else new_amount
        logger.info(
            "Reconciled %s at %s: value=%d plain=%d diff=%d adjustment=%s",
            investment_account_id,
            as_of.isoformat(),
            value_cents,
            plain_balance,
            difference,
            action.value,
        )
        return ReconciliationResult(
            valuation=valuation,
            plain_balance=plain_balance,
            difference=difference,
            action=action,
            adjustment_amount=adjustment_amount,
        )

    def plain_balance(self, account: InvestmentAccount, as_of: Optional[datetime] = None) -> int:
        """Opening balance plus ledger amounts dated at or before as_of (cents)."""
        up_to = to_storage(as_of) if as_of is not None else None
        return account.opening_balance + self._uow.ledger.sum_amounts(account.account_id, up_to)
