"""API routers package."""

from investledger.api.routers.users import router as users_router
from investledger.api.routers.accounts import router as accounts_router
from investledger.api.routers.trades import router as trades_router
from investledger.api.routers.valuations import router as valuations_router
from investledger.api.routers.assets import router as assets_router
from investledger.api.routers.cron import router as cron_router

__all__ = [
    "users_router",
    "accounts_router",
    "trades_router",
    "valuations_router",
    "assets_router",
    "cron_router",
]
