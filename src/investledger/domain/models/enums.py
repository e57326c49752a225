"""Enumerations for domain models."""

from enum import Enum


class TradeType(str, Enum):
    """Types of investment account transactions."""

    BUY = "BUY"
    SELL = "SELL"
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    DIVIDEND = "DIVIDEND"
    INTEREST = "INTEREST"
    FEE = "FEE"
    ADJUSTMENT = "ADJUSTMENT"


class AssetType(str, Enum):
    """Asset types a holding can be priced as."""

    CRYPTO = "CRYPTO"
    EQUITY = "EQUITY"


class AssetClass(str, Enum):
    """Asset class tag of an investment account."""

    CRYPTO = "CRYPTO"
    EQUITY = "EQUITY"
    MIXED = "MIXED"


class AccountKind(str, Enum):
    """Kind of investment account."""

    BROKERAGE = "BROKERAGE"
    WALLET = "WALLET"


class AdjustmentAction(str, Enum):
    """What the reconciler did with a valuation's adjustment transaction."""

    CREATED = "CREATED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"
    NONE = "NONE"
