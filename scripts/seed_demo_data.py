#!/usr/bin/env python3
"""
Seed a demo user with a brokerage account and a crypto wallet.

Usage:
  python scripts/seed_demo_data.py [--email demo@example.com]

Prints the user id to send as X-User-Id.
"""

import argparse
import sys
from datetime import date, datetime, timedelta
from decimal import Decimal

from investledger.config.logging_config import setup_logging
from investledger.core.exceptions import ValidationError
from investledger.domain.models import AccountKind, AssetClass, AssetType, TradeType
from investledger.repositories.sqlalchemy import SqlAlchemyUnitOfWork, get_session, init_db
from investledger.services import InvestmentAccountCreate, LedgerService, TradeCreate


# (symbol, price in dollars, quantity)
EQUITIES = [
    ("AAPL", "180.00", "20"),
    ("MSFT", "420.00", "10"),
    ("SPY", "450.00", "15"),
]
CRYPTO = [
    ("BTC", "60000.00", "0.05"),
    ("ETH", "3000.00", "1.5"),
]


def _at(day: date, hour: int = 10) -> datetime:
    return datetime.combine(day, datetime.min.time().replace(hour=hour))


def _buy(symbol: str, price: str, quantity: str, asset_type: AssetType, day: date) -> TradeCreate:
    return TradeCreate(
        txn_type=TradeType.BUY,
        occurred_at=_at(day),
        asset_type=asset_type,
        symbol=symbol,
        quantity=Decimal(quantity),
        price_per_unit=Decimal(price),
        fees=100,
    )


def seed(email: str) -> str:
    session = get_session()
    try:
        service = LedgerService(SqlAlchemyUnitOfWork(session))
        try:
            user = service.create_user(email)
        except ValidationError as e:
            print(f"✗ {e.message}", file=sys.stderr)
            sys.exit(1)
        print(f"✓ User {user.email} ({user.user_id})")

        start = date.today() - timedelta(days=90)

        brokerage = service.create_investment_account(
            user.user_id,
            InvestmentAccountCreate(name="Main Brokerage", asset_class=AssetClass.EQUITY),
        )
        service.add_trade(
            user.user_id,
            brokerage.investment_account_id,
            TradeCreate(txn_type=TradeType.DEPOSIT, occurred_at=_at(start, 9), amount=2_500_000),
        )
        for offset, (symbol, price, quantity) in enumerate(EQUITIES, start=1):
            service.add_trade(
                user.user_id,
                brokerage.investment_account_id,
                _buy(symbol, price, quantity, AssetType.EQUITY, start + timedelta(days=offset)),
            )
        service.add_trade(
            user.user_id,
            brokerage.investment_account_id,
            TradeCreate(txn_type=TradeType.DIVIDEND, occurred_at=_at(start + timedelta(days=45)), amount=4_200),
        )
        print(f"✓ Account '{brokerage.name}' with {len(EQUITIES)} positions")

        wallet = service.create_investment_account(
            user.user_id,
            InvestmentAccountCreate(
                name="Crypto Wallet",
                asset_class=AssetClass.CRYPTO,
                kind=AccountKind.WALLET,
                opening_balance=1_000_000,
            ),
        )
        for offset, (symbol, price, quantity) in enumerate(CRYPTO, start=1):
            service.add_trade(
                user.user_id,
                wallet.investment_account_id,
                _buy(symbol, price, quantity, AssetType.CRYPTO, start + timedelta(days=offset)),
            )
        print(f"✓ Account '{wallet.name}' with {len(CRYPTO)} positions")
        return user.user_id
    finally:
        session.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed demo investment data.")
    parser.add_argument("--email", default="demo@example.com")
    args = parser.parse_args()

    setup_logging()
    init_db()
    user_id = seed(args.email)
    print(f"\nX-User-Id: {user_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
