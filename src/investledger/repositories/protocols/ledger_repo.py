"""Ledger transaction repository protocol."""

from datetime import datetime
from typing import Protocol, Optional

from investledger.domain.models import LedgerTransaction


class LedgerRepository(Protocol):
    """Interface for the generic financial-account transaction ledger."""

    def create(self, txn: LedgerTransaction) -> LedgerTransaction:
        """Persist a new ledger transaction."""
        ...

    def get_by_reference(self, reference: str) -> Optional[LedgerTransaction]:
        """Find the transaction carrying a reference string."""
        ...

    def update(self, txn: LedgerTransaction) -> LedgerTransaction:
        """Update an existing ledger transaction."""
        ...

    def delete(self, txn_id: str) -> bool:
        """Delete a ledger transaction. Returns True if deleted."""
        ...

    def delete_by_reference(self, reference: str) -> int:
        """Delete all transactions carrying a reference. Returns count deleted."""
        ...

    def sum_amounts(self, account_id: str, up_to: Optional[datetime] = None) -> int:
        """Sum of amounts (cents) on an account dated at or before up_to."""
        ...

    def list_by_account(self, account_id: str) -> list[LedgerTransaction]:
        """List an account's ledger transactions ordered by date."""
        ...
