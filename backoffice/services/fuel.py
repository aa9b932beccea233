from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from backoffice.models.fleet import FuelPurchase, Vehicle
from backoffice.schemas.fuel import FuelPurchaseCreate, FuelPurchaseUpdate
from backoffice.services.common import apply_ordering, apply_pagination, coerce_uuid
from backoffice.services.response import ListResponseMixin

logger = logging.getLogger(__name__)


def _ensure_active_vehicle(db: Session, vehicle_id) -> Vehicle:
    vehicle = db.get(Vehicle, coerce_uuid(vehicle_id))
    if not vehicle or not vehicle.is_active:
        raise HTTPException(status_code=400, detail="Vehicle does not exist or is inactive")
    return vehicle


class FuelPurchases(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload: FuelPurchaseCreate):
        _ensure_active_vehicle(db, payload.vehicle_id)
        purchase = FuelPurchase(**payload.model_dump())
        db.add(purchase)
        db.commit()
        db.refresh(purchase)
        return purchase

    @staticmethod
    def get(db: Session, purchase_id: str):
        purchase = db.get(FuelPurchase, coerce_uuid(purchase_id))
        if not purchase:
            raise HTTPException(status_code=404, detail="Fuel purchase not found")
        return purchase

    @staticmethod
    def list(
        db: Session,
        state: bool | None,
        vehicle_id: str | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        query = db.query(FuelPurchase).options(selectinload(FuelPurchase.vehicle))
        if state is not None:
            query = query.filter(FuelPurchase.state == state)
        if vehicle_id:
            query = query.filter(FuelPurchase.vehicle_id == coerce_uuid(vehicle_id))
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {
                "purchase_date": FuelPurchase.purchase_date,
                "created_at": FuelPurchase.created_at,
                "total": FuelPurchase.total,
            },
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, purchase_id: str, payload: FuelPurchaseUpdate):
        purchase = FuelPurchases.get(db, purchase_id)
        data = payload.model_dump(exclude_unset=True)
        if data.get("vehicle_id") and data["vehicle_id"] != purchase.vehicle_id:
            _ensure_active_vehicle(db, data["vehicle_id"])
        for key, value in data.items():
            setattr(purchase, key, value)
        db.commit()
        db.refresh(purchase)
        return purchase

    @staticmethod
    def delete(db: Session, purchase_id: str):
        purchase = FuelPurchases.get(db, purchase_id)
        db.delete(purchase)
        db.commit()

    @staticmethod
    def bulk_import(db: Session, records: list[FuelPurchaseCreate]) -> dict:
        """Insert already-validated purchases, one savepoint per record.

        A failing record is reported in ``details`` and does not stop the
        rest of the batch.
        """
        migrated = 0
        details: list[str] = []
        for index, record in enumerate(records, start=1):
            try:
                with db.begin_nested():
                    _ensure_active_vehicle(db, record.vehicle_id)
                    db.add(FuelPurchase(**record.model_dump()))
                    db.flush()
                migrated += 1
            except HTTPException as exc:
                details.append(f"Record {index}: {exc.detail}")
            except SQLAlchemyError as exc:
                details.append(f"Record {index}: {exc.__class__.__name__}")
                logger.warning("fuel_purchase_import_failed record=%s error=%s", index, exc)
        db.commit()
        logger.info(
            "fuel_purchase_import_complete total=%s migrated=%s errors=%s",
            len(records),
            migrated,
            len(details),
        )
        return {
            "total": len(records),
            "migrated": migrated,
            "errors": len(details),
            "details": details,
        }


fuel_purchases = FuelPurchases()
