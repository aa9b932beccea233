"""Local copies of the Siigo warehouse and cost center catalogs."""

from __future__ import annotations

import logging

from sqlalchemy import case, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backoffice.models.siigo import SiigoCostCenter, SiigoWarehouse
from backoffice.services.siigo.client import SiigoClient, siigo_client

logger = logging.getLogger(__name__)


def _stats(db: Session, model) -> dict:
    total, active = db.query(
        func.count(model.id),
        func.coalesce(func.sum(case((model.active.is_(True), 1), else_=0)), 0),
    ).one()
    return {"total": int(total), "active": int(active), "inactive": int(total) - int(active)}


def _upsert_all(db: Session, model, rows: list[dict], build) -> dict:
    successful = 0
    failed = 0
    for row in rows:
        try:
            with db.begin_nested():
                values = build(row)
                existing = db.get(model, values["id"])
                if existing:
                    for key, value in values.items():
                        setattr(existing, key, value)
                else:
                    db.add(model(**values))
                db.flush()
            successful += 1
        except (KeyError, TypeError, ValueError, SQLAlchemyError) as exc:
            failed += 1
            logger.warning("siigo_catalog_row_failed model=%s row=%s error=%s", model.__name__, row, exc)
    db.commit()
    return {"total": len(rows), "successful": successful, "failed": failed}


def _warehouse_values(row: dict) -> dict:
    return {
        "id": int(row["id"]),
        "name": str(row.get("name") or ""),
        "active": bool(row.get("active", True)),
        "has_movements": bool(row.get("has_movements", False)),
    }


def _cost_center_values(row: dict) -> dict:
    return {
        "id": int(row["id"]),
        "code": str(row.get("code") or ""),
        "name": str(row.get("name") or ""),
        "active": bool(row.get("active", True)),
    }


class SiigoCatalog:
    def __init__(self, client: SiigoClient | None = None):
        self.client = client or siigo_client

    def sync_warehouses(self, db: Session) -> dict:
        rows = self.client.get_warehouses(db)
        result = _upsert_all(db, SiigoWarehouse, rows, _warehouse_values)
        logger.info("siigo_warehouses_synced %s", result)
        return result

    def sync_cost_centers(self, db: Session) -> dict:
        rows = self.client.get_cost_centers(db)
        result = _upsert_all(db, SiigoCostCenter, rows, _cost_center_values)
        logger.info("siigo_cost_centers_synced %s", result)
        return result

    @staticmethod
    def list_warehouses(db: Session, search: str | None = None, active: bool | None = None) -> dict:
        query = db.query(SiigoWarehouse)
        if search:
            query = query.filter(SiigoWarehouse.name.ilike(f"%{search.strip()}%"))
        if active is not None:
            query = query.filter(SiigoWarehouse.active == active)
        items = query.order_by(SiigoWarehouse.active.desc(), SiigoWarehouse.name.asc()).all()
        return {"items": items, "stats": _stats(db, SiigoWarehouse)}

    @staticmethod
    def list_cost_centers(db: Session, search: str | None = None, active: bool | None = None) -> dict:
        query = db.query(SiigoCostCenter)
        if search:
            like = f"%{search.strip()}%"
            query = query.filter(or_(SiigoCostCenter.name.ilike(like), SiigoCostCenter.code.ilike(like)))
        if active is not None:
            query = query.filter(SiigoCostCenter.active == active)
        items = query.order_by(SiigoCostCenter.active.desc(), SiigoCostCenter.name.asc()).all()
        return {"items": items, "stats": _stats(db, SiigoCostCenter)}


siigo_catalog = SiigoCatalog()
