from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backoffice.api.deps import get_db
from backoffice.schemas.common import ListResponse
from backoffice.schemas.preoperational import (
    PreoperationalInspectionCreate,
    PreoperationalInspectionRead,
    PreoperationalItemCreate,
    PreoperationalItemRead,
    PreoperationalItemUpdate,
)
from backoffice.services import preoperational as preoperational_service

router = APIRouter(tags=["preoperational"])


@router.post(
    "/preoperational-items",
    response_model=PreoperationalItemRead,
    status_code=status.HTTP_201_CREATED,
)
def create_item(payload: PreoperationalItemCreate, db: Session = Depends(get_db)):
    return preoperational_service.preoperational_items.create(db, payload)


@router.get("/preoperational-items/{item_id}", response_model=PreoperationalItemRead)
def get_item(item_id: int, db: Session = Depends(get_db)):
    return preoperational_service.preoperational_items.get(db, item_id)


@router.get("/preoperational-items", response_model=ListResponse[PreoperationalItemRead])
def list_items(
    is_active: bool | None = None,
    order_by: str = Query(default="id"),
    order_dir: str = Query(default="asc", pattern="^(asc|desc)$"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return preoperational_service.preoperational_items.list_response(
        db, is_active, order_by, order_dir, limit, offset
    )


@router.patch("/preoperational-items/{item_id}", response_model=PreoperationalItemRead)
def update_item(item_id: int, payload: PreoperationalItemUpdate, db: Session = Depends(get_db)):
    return preoperational_service.preoperational_items.update(db, item_id, payload)


@router.delete("/preoperational-items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(item_id: int, db: Session = Depends(get_db)):
    preoperational_service.preoperational_items.delete(db, item_id)


@router.post(
    "/preoperational-inspections",
    response_model=PreoperationalInspectionRead,
    status_code=status.HTTP_201_CREATED,
)
def create_inspection(payload: PreoperationalInspectionCreate, db: Session = Depends(get_db)):
    return preoperational_service.preoperational_inspections.create(db, payload)


@router.get("/preoperational-inspections/{inspection_id}", response_model=PreoperationalInspectionRead)
def get_inspection(inspection_id: str, db: Session = Depends(get_db)):
    return preoperational_service.preoperational_inspections.get(db, inspection_id)


@router.get("/preoperational-inspections", response_model=ListResponse[PreoperationalInspectionRead])
def list_inspections(
    driver_id: str | None = None,
    vehicle_id: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    limit: int = Query(default=20, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return preoperational_service.preoperational_inspections.list(
        db, driver_id, vehicle_id, date_from, date_to, limit, offset
    )


@router.delete("/preoperational-inspections/{inspection_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inspection(inspection_id: str, db: Session = Depends(get_db)):
    preoperational_service.preoperational_inspections.delete(db, inspection_id)
