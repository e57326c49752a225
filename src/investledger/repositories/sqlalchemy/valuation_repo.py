"""SQLAlchemy implementations of ValuationRepository and AssetRepository."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from investledger.core.timezone import now_storage
from investledger.domain.models import InvestmentValuation, InvestmentAsset, AssetValuation
from investledger.repositories.sqlalchemy.orm_models import (
    InvestmentValuationORM,
    InvestmentAssetORM,
    AssetValuationORM,
    TradeORM,
)


class SqlAlchemyValuationRepository:
    """SQLAlchemy-backed investment valuation repository."""

    def __init__(self, db: Session):
        self._db = db

    def get(self, investment_account_id: str, as_of: datetime) -> Optional[InvestmentValuation]:
        """Retrieve the valuation of an account at an exact as_of."""
        orm_val = self._db.query(InvestmentValuationORM).filter(
            InvestmentValuationORM.investment_account_id == investment_account_id,
            InvestmentValuationORM.as_of_est == as_of,
        ).first()
        return self._to_domain(orm_val) if orm_val else None

    def upsert(self, valuation: InvestmentValuation) -> InvestmentValuation:
        """Insert or overwrite the value for (account, as_of); the stored id is kept."""
        orm_val = self._db.query(InvestmentValuationORM).filter(
            InvestmentValuationORM.investment_account_id == valuation.investment_account_id,
            InvestmentValuationORM.as_of_est == valuation.as_of,
        ).first()
        if orm_val:
            orm_val.value = valuation.value
        else:
            orm_val = InvestmentValuationORM(
                valuation_id=valuation.valuation_id,
                user_id=valuation.user_id,
                investment_account_id=valuation.investment_account_id,
                value=valuation.value,
                as_of_est=valuation.as_of,
                created_at_est=valuation.created_at or now_storage(),
            )
            self._db.add(orm_val)
        self._db.flush()
        return self._to_domain(orm_val)

    def latest(self, investment_account_id: str) -> Optional[InvestmentValuation]:
        """Most recent valuation of an account."""
        orm_val = (
            self._db.query(InvestmentValuationORM)
            .filter(InvestmentValuationORM.investment_account_id == investment_account_id)
            .order_by(InvestmentValuationORM.as_of_est.desc())
            .first()
        )
        return self._to_domain(orm_val) if orm_val else None

    def list_by_account(self, investment_account_id: str) -> list[InvestmentValuation]:
        """List valuations newest first."""
        orm_vals = (
            self._db.query(InvestmentValuationORM)
            .filter(InvestmentValuationORM.investment_account_id == investment_account_id)
            .order_by(InvestmentValuationORM.as_of_est.desc())
            .all()
        )
        return [self._to_domain(v) for v in orm_vals]

    @staticmethod
    def _to_domain(orm: InvestmentValuationORM) -> InvestmentValuation:
        """Convert ORM model to domain model."""
        return InvestmentValuation(
            valuation_id=orm.valuation_id,
            user_id=orm.user_id,
            investment_account_id=orm.investment_account_id,
            value=int(orm.value),
            as_of=orm.as_of_est,
            created_at=orm.created_at_est,
        )


class SqlAlchemyAssetRepository:
    """SQLAlchemy-backed asset and asset valuation repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, asset: InvestmentAsset) -> InvestmentAsset:
        """Persist a new asset."""
        orm_asset = InvestmentAssetORM(
            asset_id=asset.asset_id,
            user_id=asset.user_id,
            investment_account_id=asset.investment_account_id,
            name=asset.name,
            symbol=asset.symbol,
            asset_type=asset.asset_type,
            created_at_est=asset.created_at or now_storage(),
        )
        self._db.add(orm_asset)
        self._db.flush()
        return self._asset_to_domain(orm_asset)

    def get_by_id(self, asset_id: str) -> Optional[InvestmentAsset]:
        """Retrieve asset by ID."""
        orm_asset = self._db.query(InvestmentAssetORM).filter(
            InvestmentAssetORM.asset_id == asset_id
        ).first()
        return self._asset_to_domain(orm_asset) if orm_asset else None

    def get_by_name(self, investment_account_id: str, name: str) -> Optional[InvestmentAsset]:
        """Retrieve asset by its per-account unique name."""
        orm_asset = self._db.query(InvestmentAssetORM).filter(
            InvestmentAssetORM.investment_account_id == investment_account_id,
            InvestmentAssetORM.name == name,
        ).first()
        return self._asset_to_domain(orm_asset) if orm_asset else None

    def list_by_account(self, investment_account_id: str) -> list[InvestmentAsset]:
        """List assets of an account ordered by name."""
        orm_assets = (
            self._db.query(InvestmentAssetORM)
            .filter(InvestmentAssetORM.investment_account_id == investment_account_id)
            .order_by(InvestmentAssetORM.name)
            .all()
        )
        return [self._asset_to_domain(a) for a in orm_assets]

    def update(self, asset: InvestmentAsset) -> InvestmentAsset:
        """Update an asset's name, symbol and type."""
        orm_asset = self._db.query(InvestmentAssetORM).filter(
            InvestmentAssetORM.asset_id == asset.asset_id
        ).first()
        if not orm_asset:
            raise ValueError(f"Asset not found: {asset.asset_id}")

        orm_asset.name = asset.name
        orm_asset.symbol = asset.symbol
        orm_asset.asset_type = asset.asset_type
        self._db.flush()
        return self._asset_to_domain(orm_asset)

    def delete(self, asset_id: str) -> bool:
        """Delete an asset; the ORM cascade removes its valuations and trades lose the link."""
        orm_asset = self._db.query(InvestmentAssetORM).filter(
            InvestmentAssetORM.asset_id == asset_id
        ).first()
        if not orm_asset:
            return False
        # SQLite leaves foreign keys unenforced, so SET NULL is applied here
        self._db.query(TradeORM).filter(TradeORM.asset_id == asset_id).update(
            {TradeORM.asset_id: None}
        )
        self._db.delete(orm_asset)
        self._db.flush()
        return True

    def upsert_valuation(self, valuation: AssetValuation) -> AssetValuation:
        """Insert or overwrite the value for (asset, as_of)."""
        orm_val = self._db.query(AssetValuationORM).filter(
            AssetValuationORM.asset_id == valuation.asset_id,
            AssetValuationORM.as_of_est == valuation.as_of,
        ).first()
        if orm_val:
            orm_val.value = valuation.value
            orm_val.quantity = valuation.quantity
        else:
            orm_val = AssetValuationORM(
                asset_valuation_id=valuation.asset_valuation_id,
                user_id=valuation.user_id,
                asset_id=valuation.asset_id,
                value=valuation.value,
                quantity=valuation.quantity,
                as_of_est=valuation.as_of,
                created_at_est=valuation.created_at or now_storage(),
            )
            self._db.add(orm_val)
        self._db.flush()
        return self._valuation_to_domain(orm_val)

    def list_valuations(self, asset_id: str) -> list[AssetValuation]:
        """List an asset's valuations newest first."""
        orm_vals = (
            self._db.query(AssetValuationORM)
            .filter(AssetValuationORM.asset_id == asset_id)
            .order_by(AssetValuationORM.as_of_est.desc())
            .all()
        )
        return [self._valuation_to_domain(v) for v in orm_vals]

    def sum_valuations(self, investment_account_id: str, as_of: datetime) -> int:
        """Sum (cents) of all asset valuations of an account at exactly as_of."""
        total = (
            self._db.query(func.coalesce(func.sum(AssetValuationORM.value), 0))
            .join(InvestmentAssetORM, InvestmentAssetORM.asset_id == AssetValuationORM.asset_id)
            .filter(
                InvestmentAssetORM.investment_account_id == investment_account_id,
                AssetValuationORM.as_of_est == as_of,
            )
            .scalar()
        )
        return int(total)

    @staticmethod
    def _asset_to_domain(orm: InvestmentAssetORM) -> InvestmentAsset:
        return InvestmentAsset(
            asset_id=orm.asset_id,
            user_id=orm.user_id,
            investment_account_id=orm.investment_account_id,
            name=orm.name,
            asset_type=orm.asset_type,
            symbol=orm.symbol,
            created_at=orm.created_at_est,
        )

    @staticmethod
    def _valuation_to_domain(orm: AssetValuationORM) -> AssetValuation:
        return AssetValuation(
            asset_valuation_id=orm.asset_valuation_id,
            user_id=orm.user_id,
            asset_id=orm.asset_id,
            value=int(orm.value),
            as_of=orm.as_of_est,
            quantity=Decimal(str(orm.quantity)) if orm.quantity is not None else None,
            created_at=orm.created_at_est,
        )
