"""Command-line runner for scheduled valuation refreshes.

Usage:
    investledger-valuations                 # all users with investment accounts
    investledger-valuations --user=<id>     # one user
    investledger-valuations --dry-run       # compute without writing
"""

import argparse
import logging
import sys
from typing import Optional

from investledger.config.logging_config import setup_logging
from investledger.core.exceptions import AppError
from investledger.core.money import to_dollars
from investledger.domain.views import ValuationRunSummary
from investledger.repositories.sqlalchemy import SqlAlchemyUnitOfWork, get_session, init_db
from investledger.services import MarketDataService, ValuationRefreshService

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[list[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="investledger-valuations",
        description="Revalue investment accounts at current market prices.",
    )
    parser.add_argument("--user", dest="user_id", default=None, help="Only revalue this user's accounts")
    parser.add_argument("--dry-run", action="store_true", help="Compute valuations without writing them")
    return parser.parse_args(argv)


def _print_summary(summary: ValuationRunSummary) -> None:
    mode = " (dry run)" if summary.dry_run else ""
    print(f"Processed {summary.processed} account(s), updated {summary.updated}{mode}")
    for result in summary.results:
        print(
            f"  {result.account_name}: ${to_dollars(result.old_value):,.2f} -> "
            f"${to_dollars(result.new_value):,.2f} ({result.change_percent:+.2f}%) {result.action.value}"
        )
    for warning in summary.warnings:
        print(f"  warning: {warning}")
    for error in summary.errors:
        print(f"  error: {error}", file=sys.stderr)


def main(argv: Optional[list[str]] = None) -> int:
    args = _parse_args(argv)
    setup_logging()
    init_db()

    session = get_session()
    try:
        service = ValuationRefreshService(
            uow=SqlAlchemyUnitOfWork(session),
            market_data=MarketDataService.from_settings(),
        )
        if args.user_id:
            summary = service.refresh_user(args.user_id, dry_run=args.dry_run)
        else:
            summary = service.refresh_all(dry_run=args.dry_run)
    except AppError as e:
        logger.error("Valuation run failed: %s", e.message)
        return 1
    finally:
        session.close()

    _print_summary(summary)
    return 0 if summary.success else 1


if __name__ == "__main__":
    sys.exit(main())
