"""Core utilities and shared functionality."""

from investledger.core.timezone import (
    now_eastern,
    now_storage,
    to_eastern,
    to_storage,
    parse_datetime_eastern,
    EASTERN_TZ,
)
from investledger.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    ReconciliationError,
    PriceProviderError,
)
from investledger.core.money import to_cents, to_dollars, gross_amount_cents

__all__ = [
    "now_eastern",
    "now_storage",
    "to_eastern",
    "to_storage",
    "parse_datetime_eastern",
    "EASTERN_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "ReconciliationError",
    "PriceProviderError",
    "to_cents",
    "to_dollars",
    "gross_amount_cents",
]
