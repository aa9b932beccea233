from datetime import date

from fastapi import HTTPException
from sqlalchemy.orm import Session, selectinload

from backoffice.models.fleet import Driver, Vehicle
from backoffice.models.preoperational import (
    PreoperationalInspection,
    PreoperationalInspectionDetail,
    PreoperationalItem,
)
from backoffice.schemas.preoperational import (
    PreoperationalInspectionCreate,
    PreoperationalItemCreate,
    PreoperationalItemUpdate,
)
from backoffice.services.common import apply_ordering, apply_pagination, coerce_uuid
from backoffice.services.response import ListResponseMixin


class PreoperationalItems(ListResponseMixin):
    @staticmethod
    def _ensure_unique_name(db: Session, name: str, exclude_id: int | None = None) -> None:
        query = db.query(PreoperationalItem).filter(PreoperationalItem.name == name)
        if exclude_id is not None:
            query = query.filter(PreoperationalItem.id != exclude_id)
        if query.first():
            raise HTTPException(status_code=400, detail="An item with this name already exists")

    @staticmethod
    def create(db: Session, payload: PreoperationalItemCreate):
        PreoperationalItems._ensure_unique_name(db, payload.name)
        item = PreoperationalItem(**payload.model_dump())
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def get(db: Session, item_id: int):
        item = db.get(PreoperationalItem, item_id)
        if not item:
            raise HTTPException(status_code=404, detail="Preoperational item not found")
        return item

    @staticmethod
    def list(
        db: Session,
        is_active: bool | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        query = db.query(PreoperationalItem)
        if is_active is not None:
            query = query.filter(PreoperationalItem.is_active == is_active)
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"id": PreoperationalItem.id, "name": PreoperationalItem.name},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, item_id: int, payload: PreoperationalItemUpdate):
        item = PreoperationalItems.get(db, item_id)
        data = payload.model_dump(exclude_unset=True)
        if data.get("name") and data["name"] != item.name:
            PreoperationalItems._ensure_unique_name(db, data["name"], exclude_id=item.id)
        for key, value in data.items():
            setattr(item, key, value)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def delete(db: Session, item_id: int):
        item = PreoperationalItems.get(db, item_id)
        used = (
            db.query(PreoperationalInspectionDetail)
            .filter(PreoperationalInspectionDetail.item_id == item.id)
            .count()
        )
        if used:
            raise HTTPException(
                status_code=400,
                detail="Cannot delete an item used in inspections; deactivate it instead",
            )
        db.delete(item)
        db.commit()


class PreoperationalInspections:
    @staticmethod
    def create(db: Session, payload: PreoperationalInspectionCreate):
        if not db.get(Driver, payload.driver_id):
            raise HTTPException(status_code=404, detail="Driver not found")
        if not db.get(Vehicle, payload.vehicle_id):
            raise HTTPException(status_code=404, detail="Vehicle not found")
        if (
            payload.initial_mileage is not None
            and payload.final_mileage is not None
            and payload.final_mileage < payload.initial_mileage
        ):
            raise HTTPException(
                status_code=400,
                detail="Final mileage cannot be lower than initial mileage",
            )
        item_ids = {detail.item_id for detail in payload.details}
        if item_ids:
            found = {
                item_id
                for (item_id,) in db.query(PreoperationalItem.id)
                .filter(PreoperationalItem.id.in_(item_ids))
                .all()
            }
            missing = sorted(item_ids - found)
            if missing:
                raise HTTPException(
                    status_code=400,
                    detail=f"Unknown preoperational items: {', '.join(str(i) for i in missing)}",
                )

        inspection = PreoperationalInspection(
            inspection_date=payload.inspection_date,
            driver_id=payload.driver_id,
            vehicle_id=payload.vehicle_id,
            initial_mileage=payload.initial_mileage,
            final_mileage=payload.final_mileage,
        )
        inspection.details = [
            PreoperationalInspectionDetail(**detail.model_dump()) for detail in payload.details
        ]
        db.add(inspection)
        db.commit()
        db.refresh(inspection)
        return inspection

    @staticmethod
    def get(db: Session, inspection_id: str):
        inspection = db.get(PreoperationalInspection, coerce_uuid(inspection_id))
        if not inspection:
            raise HTTPException(status_code=404, detail="Preoperational inspection not found")
        return inspection

    @staticmethod
    def list(
        db: Session,
        driver_id: str | None,
        vehicle_id: str | None,
        date_from: date | None,
        date_to: date | None,
        limit: int,
        offset: int,
    ) -> dict:
        query = db.query(PreoperationalInspection)
        if driver_id:
            query = query.filter(PreoperationalInspection.driver_id == coerce_uuid(driver_id))
        if vehicle_id:
            query = query.filter(PreoperationalInspection.vehicle_id == coerce_uuid(vehicle_id))
        if date_from:
            query = query.filter(PreoperationalInspection.inspection_date >= date_from)
        if date_to:
            query = query.filter(PreoperationalInspection.inspection_date <= date_to)
        total = query.count()
        items = (
            apply_pagination(
                query.options(
                    selectinload(PreoperationalInspection.driver),
                    selectinload(PreoperationalInspection.vehicle),
                    selectinload(PreoperationalInspection.details).selectinload(
                        PreoperationalInspectionDetail.item
                    ),
                ).order_by(
                    PreoperationalInspection.inspection_date.desc(),
                    PreoperationalInspection.created_at.desc(),
                ),
                limit,
                offset,
            ).all()
        )
        return {"items": items, "count": total, "limit": limit, "offset": offset}

    @staticmethod
    def delete(db: Session, inspection_id: str):
        inspection = PreoperationalInspections.get(db, inspection_id)
        db.delete(inspection)
        db.commit()


preoperational_items = PreoperationalItems()
preoperational_inspections = PreoperationalInspections()
