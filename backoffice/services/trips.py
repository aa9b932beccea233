from datetime import date

from fastapi import HTTPException
from sqlalchemy import case, or_
from sqlalchemy.orm import Session, selectinload

from backoffice.models.fleet import Driver, Vehicle
from backoffice.models.logistics import (
    Material,
    Project,
    Trip,
    TripRequest,
    TripRequestMaterial,
    TripRequestPriority,
    TripRequestStatus,
    TripStatus,
)
from backoffice.schemas.trips import (
    TripCreate,
    TripRequestCreate,
    TripRequestMaterialCreate,
    TripRequestUpdate,
    TripUpdate,
)
from backoffice.services.common import (
    apply_pagination,
    coerce_uuid,
    validate_enum,
)
from backoffice.services.materials import project_material_prices
from backoffice.services.response import ListResponseMixin


def _build_request_materials(
    db: Session, items: list[TripRequestMaterialCreate]
) -> list[TripRequestMaterial]:
    rows = []
    for item in items:
        material = db.get(Material, item.material_id)
        if not material or not material.is_active:
            raise HTTPException(
                status_code=400,
                detail=f"Material {item.material_id} does not exist or is inactive",
            )
        if item.requested_quantity <= 0:
            raise HTTPException(status_code=400, detail="Requested quantity must be greater than zero")
        rows.append(
            TripRequestMaterial(
                material_id=material.id,
                requested_quantity=item.requested_quantity,
                unit_of_measure=material.unit_of_measure,
            )
        )
    return rows


class TripRequests(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload: TripRequestCreate):
        project = db.get(Project, payload.project_id)
        if not project:
            raise HTTPException(status_code=400, detail="Project does not exist")
        trip_request = TripRequest(
            project_id=project.id,
            client_id=project.client_id,
            priority=payload.priority,
            request_date=payload.request_date or date.today(),
            observations=payload.observations,
        )
        trip_request.materials = _build_request_materials(db, payload.materials)
        db.add(trip_request)
        db.commit()
        db.refresh(trip_request)
        return trip_request

    @staticmethod
    def get(db: Session, request_id: str):
        trip_request = db.get(TripRequest, coerce_uuid(request_id))
        if not trip_request:
            raise HTTPException(status_code=404, detail="Trip request not found")
        return trip_request

    @staticmethod
    def list(
        db: Session,
        search: str | None,
        project_id: str | None,
        status: str | None,
        priority: str | None,
        active: bool | None,
        limit: int,
        offset: int,
    ):
        query = (
            db.query(TripRequest)
            .join(Project, Project.id == TripRequest.project_id)
            .options(selectinload(TripRequest.materials))
        )
        if search:
            like = f"%{search.strip()}%"
            query = query.filter(or_(Project.name.ilike(like), TripRequest.observations.ilike(like)))
        if project_id:
            query = query.filter(TripRequest.project_id == coerce_uuid(project_id))
        if status:
            query = query.filter(TripRequest.status == validate_enum(status, TripRequestStatus, "status"))
        if priority:
            query = query.filter(
                TripRequest.priority == validate_enum(priority, TripRequestPriority, "priority")
            )
        if active is True:
            query = query.filter(TripRequest.status != TripRequestStatus.cancelled)
        elif active is False:
            query = query.filter(TripRequest.status == TripRequestStatus.cancelled)
        urgent_first = case((TripRequest.priority == TripRequestPriority.urgent, 0), else_=1)
        query = query.order_by(urgent_first, TripRequest.created_at.desc())
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, request_id: str, payload: TripRequestUpdate):
        trip_request = TripRequests.get(db, request_id)
        data = payload.model_dump(exclude_unset=True, exclude={"materials"})
        has_trips = db.query(Trip).filter(Trip.trip_request_id == trip_request.id).count() > 0
        if data.get("status") == TripRequestStatus.cancelled and has_trips:
            raise HTTPException(
                status_code=400,
                detail="Cannot cancel a trip request that already has trips",
            )
        if payload.materials is not None:
            trip_request.materials = _build_request_materials(db, payload.materials)
        for key, value in data.items():
            setattr(trip_request, key, value)
        db.commit()
        db.refresh(trip_request)
        return trip_request

    @staticmethod
    def delete(db: Session, request_id: str):
        trip_request = TripRequests.get(db, request_id)
        trips_count = db.query(Trip).filter(Trip.trip_request_id == trip_request.id).count()
        if trips_count:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot delete trip request with {trips_count} trip(s)",
            )
        db.delete(trip_request)
        db.commit()


def _ensure_active(db: Session, model, entity_id, label: str):
    entity = db.get(model, coerce_uuid(entity_id))
    if not entity or not entity.is_active:
        raise HTTPException(status_code=400, detail=f"{label} does not exist or is inactive")
    return entity


class Trips(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload: TripCreate):
        material = _ensure_active(db, Material, payload.material_id, "Material")
        project = _ensure_active(db, Project, payload.project_id, "Project")
        _ensure_active(db, Driver, payload.driver_id, "Driver")
        _ensure_active(db, Vehicle, payload.vehicle_id, "Vehicle")
        if payload.trip_request_id:
            trip_request = db.get(TripRequest, payload.trip_request_id)
            if not trip_request:
                raise HTTPException(status_code=400, detail="Trip request does not exist")
            if trip_request.status == TripRequestStatus.cancelled:
                raise HTTPException(status_code=400, detail="Trip request is cancelled")
            if trip_request.status == TripRequestStatus.pending:
                trip_request.status = TripRequestStatus.scheduled

        data = payload.model_dump()
        if data["sale_price"] is None or data["outsourced_price"] is None:
            price = project_material_prices.active_price_for(
                db, project.id, material.id, payload.trip_date
            )
            if data["sale_price"] is None:
                data["sale_price"] = price.sale_price if price else 0
            if data["outsourced_price"] is None:
                data["outsourced_price"] = price.outsourced_price if price else 0
        trip = Trip(**data)
        db.add(trip)
        db.commit()
        db.refresh(trip)
        return trip

    @staticmethod
    def get(db: Session, trip_id: str):
        trip = db.get(Trip, coerce_uuid(trip_id))
        if not trip:
            raise HTTPException(status_code=404, detail="Trip not found")
        return trip

    @staticmethod
    def list(
        db: Session,
        search: str | None,
        is_approved: bool | None,
        project_id: str | None,
        driver_id: str | None,
        material_id: str | None,
        date_from: date | None,
        date_to: date | None,
        limit: int,
        offset: int,
    ):
        query = db.query(Trip)
        if search:
            like = f"%{search.strip()}%"
            query = (
                query.join(Vehicle, Vehicle.id == Trip.vehicle_id)
                .join(Driver, Driver.id == Trip.driver_id)
                .filter(
                    or_(
                        Trip.incoming_receipt_number.ilike(like),
                        Trip.outcoming_receipt_number.ilike(like),
                        Vehicle.plate.ilike(like),
                        Driver.name.ilike(like),
                    )
                )
            )
        if is_approved is not None:
            query = query.filter(Trip.is_approved == is_approved)
        if project_id:
            query = query.filter(Trip.project_id == coerce_uuid(project_id))
        if driver_id:
            query = query.filter(Trip.driver_id == coerce_uuid(driver_id))
        if material_id:
            query = query.filter(Trip.material_id == coerce_uuid(material_id))
        if date_from:
            query = query.filter(Trip.trip_date >= date_from)
        if date_to:
            query = query.filter(Trip.trip_date <= date_to)
        query = query.order_by(Trip.trip_date.desc(), Trip.created_at.desc())
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, trip_id: str, payload: TripUpdate):
        trip = Trips.get(db, trip_id)
        data = payload.model_dump(exclude_unset=True)
        if data.get("driver_id"):
            _ensure_active(db, Driver, data["driver_id"], "Driver")
        if data.get("vehicle_id"):
            _ensure_active(db, Vehicle, data["vehicle_id"], "Vehicle")
        if "certified_weight" in data and data["certified_weight"] is not None:
            if data["certified_weight"] <= 0:
                raise HTTPException(status_code=400, detail="Certified weight must be greater than zero")
        for key, value in data.items():
            setattr(trip, key, value)
        db.commit()
        db.refresh(trip)
        return trip

    @staticmethod
    def approve(db: Session, trip_id: str):
        trip = Trips.get(db, trip_id)
        if trip.is_approved:
            raise HTTPException(status_code=400, detail="Trip is already approved")
        trip.is_approved = True
        db.commit()
        db.refresh(trip)
        return trip

    @staticmethod
    def delete(db: Session, trip_id: str):
        trip = Trips.get(db, trip_id)
        if trip.status != TripStatus.scheduled:
            raise HTTPException(status_code=400, detail="Only scheduled trips can be deleted")
        trip_request = trip.trip_request
        db.delete(trip)
        db.flush()
        if trip_request is not None and trip_request.status == TripRequestStatus.scheduled:
            remaining = db.query(Trip).filter(Trip.trip_request_id == trip_request.id).count()
            if not remaining:
                trip_request.status = TripRequestStatus.pending
        db.commit()


trip_requests = TripRequests()
trips = Trips()
