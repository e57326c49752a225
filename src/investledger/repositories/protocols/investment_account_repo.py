"""Investment account repository protocol."""

from typing import Protocol, Optional

from investledger.domain.models import InvestmentAccount


class InvestmentAccountRepository(Protocol):
    """Interface for investment accounts and their backing financial accounts."""

    def create(self, account: InvestmentAccount) -> InvestmentAccount:
        """Persist an investment account together with its financial account."""
        ...

    def get_by_id(self, investment_account_id: str) -> Optional[InvestmentAccount]:
        """Retrieve investment account by ID (financial account attached)."""
        ...

    def get_for_update(self, investment_account_id: str) -> Optional[InvestmentAccount]:
        """Retrieve and row-lock the investment account for the current transaction."""
        ...

    def list_by_user(self, user_id: str) -> list[InvestmentAccount]:
        """List a user's investment accounts ordered by creation."""
        ...

    def update(self, account: InvestmentAccount) -> InvestmentAccount:
        """Update account fields (and the financial account's descriptive fields)."""
        ...

    def delete(self, investment_account_id: str) -> bool:
        """Delete the account and everything it owns. Returns True if deleted."""
        ...
