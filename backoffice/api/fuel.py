from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backoffice.api.deps import get_db
from backoffice.schemas.common import ListResponse
from backoffice.schemas.fuel import (
    FuelMigrationResult,
    FuelMigrationSummary,
    FuelPurchaseBulkImport,
    FuelPurchaseBulkResult,
    FuelPurchaseCreate,
    FuelPurchaseRead,
    FuelPurchaseUpdate,
)
from backoffice.services import fuel as fuel_service
from backoffice.services.siigo.fuel_migration import fuel_siigo_migration

router = APIRouter(prefix="/fuel-purchases", tags=["fuel"])


@router.post("", response_model=FuelPurchaseRead, status_code=status.HTTP_201_CREATED)
def create_fuel_purchase(payload: FuelPurchaseCreate, db: Session = Depends(get_db)):
    return fuel_service.fuel_purchases.create(db, payload)


@router.post("/migrate", response_model=FuelPurchaseBulkResult)
def import_fuel_purchases(payload: FuelPurchaseBulkImport, db: Session = Depends(get_db)):
    return fuel_service.fuel_purchases.bulk_import(db, payload.records)


@router.post("/siigo-migration", response_model=FuelMigrationSummary)
def migrate_pending_to_siigo(db: Session = Depends(get_db)):
    return fuel_siigo_migration.migrate_pending(db)


@router.post("/siigo-migration/{purchase_id}", response_model=FuelMigrationResult)
def migrate_one_to_siigo(purchase_id: str, db: Session = Depends(get_db)):
    return fuel_siigo_migration.migrate_one(db, purchase_id)


@router.get("/{purchase_id}", response_model=FuelPurchaseRead)
def get_fuel_purchase(purchase_id: str, db: Session = Depends(get_db)):
    return fuel_service.fuel_purchases.get(db, purchase_id)


@router.get("", response_model=ListResponse[FuelPurchaseRead])
def list_fuel_purchases(
    state: bool | None = None,
    vehicle_id: str | None = None,
    order_by: str = Query(default="purchase_date"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return fuel_service.fuel_purchases.list_response(
        db, state, vehicle_id, order_by, order_dir, limit, offset
    )


@router.patch("/{purchase_id}", response_model=FuelPurchaseRead)
def update_fuel_purchase(purchase_id: str, payload: FuelPurchaseUpdate, db: Session = Depends(get_db)):
    return fuel_service.fuel_purchases.update(db, purchase_id, payload)


@router.delete("/{purchase_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_fuel_purchase(purchase_id: str, db: Session = Depends(get_db)):
    fuel_service.fuel_purchases.delete(db, purchase_id)
