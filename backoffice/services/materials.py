from datetime import date

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from backoffice.models.logistics import (
    Material,
    MaterialType,
    Project,
    ProjectMaterialPrice,
    Trip,
)
from backoffice.schemas.materials import (
    MaterialCreate,
    MaterialUpdate,
    ProjectMaterialPriceCreate,
    ProjectMaterialPriceUpdate,
)
from backoffice.services.common import (
    apply_ordering,
    apply_pagination,
    coerce_uuid,
    ensure_date_order,
    validate_enum,
)
from backoffice.services.response import ListResponseMixin


def _ensure_unique_name(db: Session, name: str, exclude_id=None) -> None:
    query = db.query(Material).filter(Material.name == name)
    if exclude_id is not None:
        query = query.filter(Material.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=400, detail="A material with this name already exists")


class Materials(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload: MaterialCreate):
        _ensure_unique_name(db, payload.name)
        material = Material(**payload.model_dump())
        db.add(material)
        db.commit()
        db.refresh(material)
        return material

    @staticmethod
    def get(db: Session, material_id: str):
        material = db.get(Material, coerce_uuid(material_id))
        if not material:
            raise HTTPException(status_code=404, detail="Material not found")
        return material

    @staticmethod
    def list(
        db: Session,
        search: str | None,
        material_type: str | None,
        is_active: bool | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        query = db.query(Material)
        if search:
            like = f"%{search.strip()}%"
            query = query.filter(or_(Material.name.ilike(like), Material.description.ilike(like)))
        if material_type:
            query = query.filter(Material.type == validate_enum(material_type, MaterialType, "type"))
        if is_active is not None:
            query = query.filter(Material.is_active == is_active)
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"created_at": Material.created_at, "name": Material.name},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, material_id: str, payload: MaterialUpdate):
        material = Materials.get(db, material_id)
        data = payload.model_dump(exclude_unset=True)
        if data.get("name") and data["name"] != material.name:
            _ensure_unique_name(db, data["name"], exclude_id=material.id)
        for key, value in data.items():
            setattr(material, key, value)
        db.commit()
        db.refresh(material)
        return material

    @staticmethod
    def delete(db: Session, material_id: str):
        material = Materials.get(db, material_id)
        active_prices = (
            db.query(ProjectMaterialPrice)
            .filter(ProjectMaterialPrice.material_id == material.id)
            .filter(ProjectMaterialPrice.is_active.is_(True))
            .count()
        )
        if active_prices:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot delete material with {active_prices} active project price(s)",
            )
        trips_count = db.query(Trip).filter(Trip.material_id == material.id).count()
        if trips_count:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot delete material used on {trips_count} trip(s)",
            )
        for price in db.query(ProjectMaterialPrice).filter(ProjectMaterialPrice.material_id == material.id).all():
            db.delete(price)
        db.delete(material)
        db.commit()


def _ranges_overlap(start_a: date, end_a: date | None, start_b: date, end_b: date | None) -> bool:
    return (end_b is None or start_a <= end_b) and (end_a is None or start_b <= end_a)


class ProjectMaterialPrices(ListResponseMixin):
    @staticmethod
    def _ensure_no_overlap(
        db: Session,
        project_id,
        material_id,
        start_date: date,
        end_date: date | None,
        exclude_id=None,
    ) -> None:
        query = (
            db.query(ProjectMaterialPrice)
            .filter(ProjectMaterialPrice.project_id == project_id)
            .filter(ProjectMaterialPrice.material_id == material_id)
            .filter(ProjectMaterialPrice.is_active.is_(True))
        )
        if exclude_id is not None:
            query = query.filter(ProjectMaterialPrice.id != exclude_id)
        for price in query.all():
            if _ranges_overlap(start_date, end_date, price.start_date, price.end_date):
                raise HTTPException(
                    status_code=400,
                    detail="An active price already covers this period for the project and material",
                )

    @staticmethod
    def create(db: Session, payload: ProjectMaterialPriceCreate):
        if not db.get(Project, payload.project_id):
            raise HTTPException(status_code=400, detail="Project does not exist")
        if not db.get(Material, payload.material_id):
            raise HTTPException(status_code=400, detail="Material does not exist")
        ensure_date_order(payload.start_date, payload.end_date)
        if payload.is_active:
            ProjectMaterialPrices._ensure_no_overlap(
                db, payload.project_id, payload.material_id, payload.start_date, payload.end_date
            )
        price = ProjectMaterialPrice(**payload.model_dump())
        db.add(price)
        db.commit()
        db.refresh(price)
        return price

    @staticmethod
    def get(db: Session, price_id: str):
        price = db.get(ProjectMaterialPrice, coerce_uuid(price_id))
        if not price:
            raise HTTPException(status_code=404, detail="Project material price not found")
        return price

    @staticmethod
    def list(
        db: Session,
        search: str | None,
        project_id: str | None,
        material_id: str | None,
        is_active: bool | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        query = (
            db.query(ProjectMaterialPrice)
            .join(Project, Project.id == ProjectMaterialPrice.project_id)
            .join(Material, Material.id == ProjectMaterialPrice.material_id)
            .options(
                selectinload(ProjectMaterialPrice.project),
                selectinload(ProjectMaterialPrice.material),
            )
        )
        if search:
            like = f"%{search.strip()}%"
            query = query.filter(or_(Project.name.ilike(like), Material.name.ilike(like)))
        if project_id:
            query = query.filter(ProjectMaterialPrice.project_id == coerce_uuid(project_id))
        if material_id:
            query = query.filter(ProjectMaterialPrice.material_id == coerce_uuid(material_id))
        if is_active is not None:
            query = query.filter(ProjectMaterialPrice.is_active == is_active)
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {
                "created_at": ProjectMaterialPrice.created_at,
                "start_date": ProjectMaterialPrice.start_date,
                "sale_price": ProjectMaterialPrice.sale_price,
            },
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, price_id: str, payload: ProjectMaterialPriceUpdate):
        price = ProjectMaterialPrices.get(db, price_id)
        data = payload.model_dump(exclude_unset=True)
        start_date = data.get("start_date") or price.start_date
        end_date = data.get("end_date", price.end_date)
        ensure_date_order(start_date, end_date)
        if data.get("is_active", price.is_active):
            ProjectMaterialPrices._ensure_no_overlap(
                db,
                price.project_id,
                price.material_id,
                start_date,
                end_date,
                exclude_id=price.id,
            )
        for key, value in data.items():
            setattr(price, key, value)
        db.commit()
        db.refresh(price)
        return price

    @staticmethod
    def delete(db: Session, price_id: str):
        price = ProjectMaterialPrices.get(db, price_id)
        price.is_active = False
        db.commit()

    @staticmethod
    def active_price_for(db: Session, project_id, material_id, on_date: date):
        """Return the active price covering ``on_date`` or None."""
        candidates = (
            db.query(ProjectMaterialPrice)
            .filter(ProjectMaterialPrice.project_id == project_id)
            .filter(ProjectMaterialPrice.material_id == material_id)
            .filter(ProjectMaterialPrice.is_active.is_(True))
            .filter(ProjectMaterialPrice.start_date <= on_date)
            .order_by(ProjectMaterialPrice.start_date.desc())
            .all()
        )
        for price in candidates:
            if price.end_date is None or price.end_date >= on_date:
                return price
        return None


materials = Materials()
project_material_prices = ProjectMaterialPrices()
