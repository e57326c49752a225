"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class ReconciliationError(AppError):
    """Raised when a valuation could not be reconciled against the ledger.

    The storage transaction has been rolled back when this is raised.
    """

    def __init__(self, investment_account_id: str, reason: str):
        self.investment_account_id = investment_account_id
        super().__init__(
            f"Failed to reconcile valuation for account {investment_account_id}: {reason}",
            code="RECONCILIATION_FAILED",
        )


class PriceProviderError(AppError):
    """Raised by a price provider when an upstream source fails as a whole."""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        super().__init__(f"{provider} price lookup failed: {reason}", code="PRICE_PROVIDER_ERROR")
