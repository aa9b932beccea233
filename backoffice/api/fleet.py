from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backoffice.api.deps import get_db
from backoffice.schemas.common import ListResponse
from backoffice.schemas.fleet import (
    DriverCreate,
    DriverRead,
    DriverUpdate,
    DriverVehicleCreate,
    DriverVehicleRead,
    DriverVehicleUpdate,
    OwnerCreate,
    OwnerRead,
    OwnerUpdate,
    VehicleCreate,
    VehicleRead,
    VehicleUpdate,
)
from backoffice.services import fleet as fleet_service

router = APIRouter(tags=["fleet"])


@router.post("/owners", response_model=OwnerRead, status_code=status.HTTP_201_CREATED)
def create_owner(payload: OwnerCreate, db: Session = Depends(get_db)):
    return fleet_service.owners.create(db, payload)


@router.get("/owners/{owner_id}", response_model=OwnerRead)
def get_owner(owner_id: str, db: Session = Depends(get_db)):
    return fleet_service.owners.get(db, owner_id)


@router.get("/owners", response_model=ListResponse[OwnerRead])
def list_owners(
    search: str | None = None,
    is_active: bool | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return fleet_service.owners.list_response(db, search, is_active, order_by, order_dir, limit, offset)


@router.patch("/owners/{owner_id}", response_model=OwnerRead)
def update_owner(owner_id: str, payload: OwnerUpdate, db: Session = Depends(get_db)):
    return fleet_service.owners.update(db, owner_id, payload)


@router.delete("/owners/{owner_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_owner(owner_id: str, db: Session = Depends(get_db)):
    fleet_service.owners.delete(db, owner_id)


@router.post("/vehicles", response_model=VehicleRead, status_code=status.HTTP_201_CREATED)
def create_vehicle(payload: VehicleCreate, db: Session = Depends(get_db)):
    return fleet_service.vehicles.create(db, payload)


@router.get("/vehicles/{vehicle_id}", response_model=VehicleRead)
def get_vehicle(vehicle_id: str, db: Session = Depends(get_db)):
    return fleet_service.vehicles.get(db, vehicle_id)


@router.get("/vehicles", response_model=ListResponse[VehicleRead])
def list_vehicles(
    search: str | None = None,
    owner_id: str | None = None,
    is_active: bool | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return fleet_service.vehicles.list_response(
        db, search, owner_id, is_active, order_by, order_dir, limit, offset
    )


@router.patch("/vehicles/{vehicle_id}", response_model=VehicleRead)
def update_vehicle(vehicle_id: str, payload: VehicleUpdate, db: Session = Depends(get_db)):
    return fleet_service.vehicles.update(db, vehicle_id, payload)


@router.delete("/vehicles/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_vehicle(vehicle_id: str, db: Session = Depends(get_db)):
    fleet_service.vehicles.delete(db, vehicle_id)


@router.post("/drivers", response_model=DriverRead, status_code=status.HTTP_201_CREATED)
def create_driver(payload: DriverCreate, db: Session = Depends(get_db)):
    return fleet_service.drivers.create(db, payload)


@router.get("/drivers/{driver_id}", response_model=DriverRead)
def get_driver(driver_id: str, db: Session = Depends(get_db)):
    return fleet_service.drivers.get(db, driver_id)


@router.get("/drivers", response_model=ListResponse[DriverRead])
def list_drivers(
    search: str | None = None,
    is_active: bool | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return fleet_service.drivers.list_response(db, search, is_active, order_by, order_dir, limit, offset)


@router.patch("/drivers/{driver_id}", response_model=DriverRead)
def update_driver(driver_id: str, payload: DriverUpdate, db: Session = Depends(get_db)):
    return fleet_service.drivers.update(db, driver_id, payload)


@router.delete("/drivers/{driver_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_driver(driver_id: str, db: Session = Depends(get_db)):
    fleet_service.drivers.delete(db, driver_id)


@router.post("/driver-vehicles", response_model=DriverVehicleRead, status_code=status.HTTP_201_CREATED)
def assign_vehicle(payload: DriverVehicleCreate, db: Session = Depends(get_db)):
    return fleet_service.driver_vehicles.assign(db, payload)


@router.get("/driver-vehicles", response_model=ListResponse[DriverVehicleRead])
def list_driver_vehicles(
    driver_id: str | None = None,
    vehicle_id: str | None = None,
    is_active: bool | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return fleet_service.driver_vehicles.list_response(
        db, driver_id, vehicle_id, is_active, order_by, order_dir, limit, offset
    )


@router.patch("/driver-vehicles/{assignment_id}", response_model=DriverVehicleRead)
def update_driver_vehicle(
    assignment_id: str,
    payload: DriverVehicleUpdate,
    db: Session = Depends(get_db),
):
    return fleet_service.driver_vehicles.set_active(db, assignment_id, payload.is_active)


@router.delete("/driver-vehicles/{assignment_id}", response_model=DriverVehicleRead)
def unassign_vehicle(assignment_id: str, db: Session = Depends(get_db)):
    return fleet_service.driver_vehicles.unassign(db, assignment_id)
