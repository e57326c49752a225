"""Trade repository protocol."""

from typing import Protocol, Optional

from investledger.domain.models import Trade


class TradeRepository(Protocol):
    """Interface for investment trade data access."""

    def create(self, trade: Trade) -> Trade:
        """Persist a new trade."""
        ...

    def get_by_id(self, trade_id: str) -> Optional[Trade]:
        """Retrieve trade by ID."""
        ...

    def update(self, trade: Trade) -> Trade:
        """Update an existing trade."""
        ...

    def delete(self, trade_id: str) -> bool:
        """Delete a trade. Returns True if deleted."""
        ...

    def list_by_account(
        self,
        investment_account_id: str,
        newest_first: bool = False,
        limit: Optional[int] = None,
    ) -> list[Trade]:
        """List trades for an account ordered by occurred_at."""
        ...

    def count_by_account(self, investment_account_id: str) -> int:
        """Number of trades recorded on an account."""
        ...
