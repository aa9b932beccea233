from datetime import UTC, date, datetime

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from backoffice.models.fleet import Driver, DriverVehicle, Owner, Vehicle
from backoffice.models.logistics import Trip
from backoffice.schemas.fleet import (
    DriverCreate,
    DriverUpdate,
    DriverVehicleCreate,
    OwnerCreate,
    OwnerUpdate,
    VehicleCreate,
    VehicleUpdate,
)
from backoffice.services.common import apply_ordering, apply_pagination, coerce_uuid
from backoffice.services.response import ListResponseMixin


def _now() -> datetime:
    return datetime.now(UTC)


def _validate_year(year: int) -> None:
    max_year = date.today().year + 1
    if year < 1900 or year > max_year:
        raise HTTPException(status_code=400, detail=f"Year must be between 1900 and {max_year}")


class Owners(ListResponseMixin):
    @staticmethod
    def _ensure_unique_document(db: Session, document: str, exclude_id=None) -> None:
        query = db.query(Owner).filter(Owner.document == document)
        if exclude_id is not None:
            query = query.filter(Owner.id != exclude_id)
        if query.first():
            raise HTTPException(status_code=409, detail="An owner with this document already exists")

    @staticmethod
    def create(db: Session, payload: OwnerCreate):
        Owners._ensure_unique_document(db, payload.document)
        owner = Owner(**payload.model_dump())
        db.add(owner)
        db.commit()
        db.refresh(owner)
        return owner

    @staticmethod
    def get(db: Session, owner_id: str):
        owner = db.get(Owner, coerce_uuid(owner_id))
        if not owner:
            raise HTTPException(status_code=404, detail="Owner not found")
        return owner

    @staticmethod
    def list(
        db: Session,
        search: str | None,
        is_active: bool | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        query = db.query(Owner)
        if search:
            like = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    Owner.document.ilike(like),
                    Owner.first_name.ilike(like),
                    Owner.last_name.ilike(like),
                )
            )
        if is_active is not None:
            query = query.filter(Owner.is_active == is_active)
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"created_at": Owner.created_at, "last_name": Owner.last_name, "document": Owner.document},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, owner_id: str, payload: OwnerUpdate):
        owner = Owners.get(db, owner_id)
        data = payload.model_dump(exclude_unset=True)
        if data.get("document") and data["document"] != owner.document:
            Owners._ensure_unique_document(db, data["document"], exclude_id=owner.id)
        for key, value in data.items():
            setattr(owner, key, value)
        db.commit()
        db.refresh(owner)
        return owner

    @staticmethod
    def delete(db: Session, owner_id: str):
        owner = Owners.get(db, owner_id)
        vehicles_count = db.query(Vehicle).filter(Vehicle.owner_id == owner.id).count()
        if vehicles_count:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot delete owner with {vehicles_count} associated vehicle(s)",
            )
        db.delete(owner)
        db.commit()


class Vehicles(ListResponseMixin):
    @staticmethod
    def _ensure_unique_plate(db: Session, plate: str, exclude_id=None) -> None:
        query = db.query(Vehicle).filter(Vehicle.plate == plate)
        if exclude_id is not None:
            query = query.filter(Vehicle.id != exclude_id)
        if query.first():
            raise HTTPException(status_code=409, detail="A vehicle with this plate already exists")

    @staticmethod
    def _ensure_owner(db: Session, owner_id) -> None:
        if owner_id and not db.get(Owner, coerce_uuid(owner_id)):
            raise HTTPException(status_code=404, detail="Owner not found")

    @staticmethod
    def create(db: Session, payload: VehicleCreate):
        data = payload.model_dump()
        data["plate"] = data["plate"].strip().upper()
        _validate_year(payload.year)
        Vehicles._ensure_unique_plate(db, data["plate"])
        Vehicles._ensure_owner(db, payload.owner_id)
        vehicle = Vehicle(**data)
        db.add(vehicle)
        db.commit()
        db.refresh(vehicle)
        return vehicle

    @staticmethod
    def get(db: Session, vehicle_id: str):
        vehicle = db.get(Vehicle, coerce_uuid(vehicle_id))
        if not vehicle:
            raise HTTPException(status_code=404, detail="Vehicle not found")
        return vehicle

    @staticmethod
    def list(
        db: Session,
        search: str | None,
        owner_id: str | None,
        is_active: bool | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        query = db.query(Vehicle).options(selectinload(Vehicle.owner))
        if search:
            like = f"%{search.strip()}%"
            query = query.filter(
                or_(Vehicle.plate.ilike(like), Vehicle.brand.ilike(like), Vehicle.model.ilike(like))
            )
        if owner_id:
            query = query.filter(Vehicle.owner_id == coerce_uuid(owner_id))
        if is_active is not None:
            query = query.filter(Vehicle.is_active == is_active)
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"created_at": Vehicle.created_at, "plate": Vehicle.plate, "year": Vehicle.year},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, vehicle_id: str, payload: VehicleUpdate):
        vehicle = Vehicles.get(db, vehicle_id)
        data = payload.model_dump(exclude_unset=True)
        if data.get("plate"):
            data["plate"] = data["plate"].strip().upper()
            if data["plate"] != vehicle.plate:
                Vehicles._ensure_unique_plate(db, data["plate"], exclude_id=vehicle.id)
        if data.get("year") is not None:
            _validate_year(data["year"])
        if data.get("owner_id"):
            Vehicles._ensure_owner(db, data["owner_id"])
        for key, value in data.items():
            setattr(vehicle, key, value)
        db.commit()
        db.refresh(vehicle)
        return vehicle

    @staticmethod
    def delete(db: Session, vehicle_id: str):
        vehicle = Vehicles.get(db, vehicle_id)
        trips_count = db.query(Trip).filter(Trip.vehicle_id == vehicle.id).count()
        if trips_count:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot delete vehicle used on {trips_count} trip(s)",
            )
        for assignment in db.query(DriverVehicle).filter(DriverVehicle.vehicle_id == vehicle.id).all():
            db.delete(assignment)
        db.delete(vehicle)
        db.commit()


class Drivers(ListResponseMixin):
    @staticmethod
    def _ensure_unique(db: Session, identification: str | None, license: str | None, exclude_id=None) -> None:
        if identification:
            query = db.query(Driver).filter(Driver.identification == identification)
            if exclude_id is not None:
                query = query.filter(Driver.id != exclude_id)
            if query.first():
                raise HTTPException(
                    status_code=400, detail="A driver with this identification already exists"
                )
        if license:
            query = db.query(Driver).filter(Driver.license == license)
            if exclude_id is not None:
                query = query.filter(Driver.id != exclude_id)
            if query.first():
                raise HTTPException(status_code=400, detail="A driver with this license already exists")

    @staticmethod
    def create(db: Session, payload: DriverCreate):
        Drivers._ensure_unique(db, payload.identification, payload.license)
        driver = Driver(**payload.model_dump())
        db.add(driver)
        db.commit()
        db.refresh(driver)
        return driver

    @staticmethod
    def get(db: Session, driver_id: str):
        driver = db.get(Driver, coerce_uuid(driver_id))
        if not driver:
            raise HTTPException(status_code=404, detail="Driver not found")
        return driver

    @staticmethod
    def list(
        db: Session,
        search: str | None,
        is_active: bool | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        query = db.query(Driver)
        if search:
            like = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    Driver.name.ilike(like),
                    Driver.identification.ilike(like),
                    Driver.license.ilike(like),
                )
            )
        if is_active is not None:
            query = query.filter(Driver.is_active == is_active)
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"created_at": Driver.created_at, "name": Driver.name},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, driver_id: str, payload: DriverUpdate):
        driver = Drivers.get(db, driver_id)
        data = payload.model_dump(exclude_unset=True)
        identification = data.get("identification")
        license = data.get("license")
        Drivers._ensure_unique(
            db,
            identification if identification != driver.identification else None,
            license if license != driver.license else None,
            exclude_id=driver.id,
        )
        for key, value in data.items():
            setattr(driver, key, value)
        db.commit()
        db.refresh(driver)
        return driver

    @staticmethod
    def delete(db: Session, driver_id: str):
        driver = Drivers.get(db, driver_id)
        trips_count = db.query(Trip).filter(Trip.driver_id == driver.id).count()
        if trips_count:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot delete driver with {trips_count} trip(s)",
            )
        for assignment in db.query(DriverVehicle).filter(DriverVehicle.driver_id == driver.id).all():
            db.delete(assignment)
        db.delete(driver)
        db.commit()


class DriverVehicles(ListResponseMixin):
    @staticmethod
    def assign(db: Session, payload: DriverVehicleCreate):
        driver = db.get(Driver, payload.driver_id)
        if not driver or not driver.is_active:
            raise HTTPException(status_code=400, detail="Driver does not exist or is inactive")
        vehicle = db.get(Vehicle, payload.vehicle_id)
        if not vehicle or not vehicle.is_active:
            raise HTTPException(status_code=400, detail="Vehicle does not exist or is inactive")
        existing = (
            db.query(DriverVehicle)
            .filter(DriverVehicle.driver_id == driver.id)
            .filter(DriverVehicle.vehicle_id == vehicle.id)
            .filter(DriverVehicle.is_active.is_(True))
            .first()
        )
        if existing:
            raise HTTPException(status_code=400, detail="Vehicle is already assigned to this driver")
        assignment = DriverVehicle(driver_id=driver.id, vehicle_id=vehicle.id)
        db.add(assignment)
        db.commit()
        db.refresh(assignment)
        return assignment

    @staticmethod
    def get(db: Session, assignment_id: str):
        assignment = db.get(DriverVehicle, coerce_uuid(assignment_id))
        if not assignment:
            raise HTTPException(status_code=404, detail="Driver vehicle assignment not found")
        return assignment

    @staticmethod
    def list(
        db: Session,
        driver_id: str | None,
        vehicle_id: str | None,
        is_active: bool | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        query = db.query(DriverVehicle).options(
            selectinload(DriverVehicle.driver),
            selectinload(DriverVehicle.vehicle),
        )
        if driver_id:
            query = query.filter(DriverVehicle.driver_id == coerce_uuid(driver_id))
        if vehicle_id:
            query = query.filter(DriverVehicle.vehicle_id == coerce_uuid(vehicle_id))
        if is_active is not None:
            query = query.filter(DriverVehicle.is_active == is_active)
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"created_at": DriverVehicle.created_at, "assigned_at": DriverVehicle.assigned_at},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def set_active(db: Session, assignment_id: str, is_active: bool):
        assignment = DriverVehicles.get(db, assignment_id)
        if is_active and not assignment.is_active:
            duplicate = (
                db.query(DriverVehicle)
                .filter(DriverVehicle.driver_id == assignment.driver_id)
                .filter(DriverVehicle.vehicle_id == assignment.vehicle_id)
                .filter(DriverVehicle.is_active.is_(True))
                .filter(DriverVehicle.id != assignment.id)
                .first()
            )
            if duplicate:
                raise HTTPException(status_code=400, detail="Vehicle is already assigned to this driver")
        assignment.is_active = is_active
        assignment.unassigned_at = None if is_active else _now()
        db.commit()
        db.refresh(assignment)
        return assignment

    @staticmethod
    def unassign(db: Session, assignment_id: str):
        return DriverVehicles.set_active(db, assignment_id, False)


owners = Owners()
vehicles = Vehicles()
drivers = Drivers()
driver_vehicles = DriverVehicles()
