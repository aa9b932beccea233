from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backoffice.api.deps import get_db
from backoffice.schemas.common import ListResponse
from backoffice.schemas.materials import (
    MaterialCreate,
    MaterialRead,
    MaterialUpdate,
    ProjectMaterialPriceCreate,
    ProjectMaterialPriceRead,
    ProjectMaterialPriceUpdate,
)
from backoffice.services import materials as materials_service

router = APIRouter(tags=["materials"])


@router.post("/materials", response_model=MaterialRead, status_code=status.HTTP_201_CREATED)
def create_material(payload: MaterialCreate, db: Session = Depends(get_db)):
    return materials_service.materials.create(db, payload)


@router.get("/materials/{material_id}", response_model=MaterialRead)
def get_material(material_id: str, db: Session = Depends(get_db)):
    return materials_service.materials.get(db, material_id)


@router.get("/materials", response_model=ListResponse[MaterialRead])
def list_materials(
    search: str | None = None,
    type: str | None = None,
    is_active: bool | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return materials_service.materials.list_response(
        db, search, type, is_active, order_by, order_dir, limit, offset
    )


@router.patch("/materials/{material_id}", response_model=MaterialRead)
def update_material(material_id: str, payload: MaterialUpdate, db: Session = Depends(get_db)):
    return materials_service.materials.update(db, material_id, payload)


@router.delete("/materials/{material_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_material(material_id: str, db: Session = Depends(get_db)):
    materials_service.materials.delete(db, material_id)


@router.post(
    "/project-material-prices",
    response_model=ProjectMaterialPriceRead,
    status_code=status.HTTP_201_CREATED,
)
def create_project_material_price(payload: ProjectMaterialPriceCreate, db: Session = Depends(get_db)):
    return materials_service.project_material_prices.create(db, payload)


@router.get("/project-material-prices/{price_id}", response_model=ProjectMaterialPriceRead)
def get_project_material_price(price_id: str, db: Session = Depends(get_db)):
    return materials_service.project_material_prices.get(db, price_id)


@router.get("/project-material-prices", response_model=ListResponse[ProjectMaterialPriceRead])
def list_project_material_prices(
    search: str | None = None,
    project_id: str | None = None,
    material_id: str | None = None,
    is_active: bool | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return materials_service.project_material_prices.list_response(
        db, search, project_id, material_id, is_active, order_by, order_dir, limit, offset
    )


@router.patch("/project-material-prices/{price_id}", response_model=ProjectMaterialPriceRead)
def update_project_material_price(
    price_id: str,
    payload: ProjectMaterialPriceUpdate,
    db: Session = Depends(get_db),
):
    return materials_service.project_material_prices.update(db, price_id, payload)


@router.delete("/project-material-prices/{price_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project_material_price(price_id: str, db: Session = Depends(get_db)):
    materials_service.project_material_prices.delete(db, price_id)
