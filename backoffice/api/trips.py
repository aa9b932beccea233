from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backoffice.api.deps import get_db
from backoffice.schemas.common import ListResponse
from backoffice.schemas.trips import (
    TripCreate,
    TripRead,
    TripRequestCreate,
    TripRequestRead,
    TripRequestUpdate,
    TripUpdate,
)
from backoffice.services import trips as trips_service

router = APIRouter(tags=["trips"])


@router.post("/trip-requests", response_model=TripRequestRead, status_code=status.HTTP_201_CREATED)
def create_trip_request(payload: TripRequestCreate, db: Session = Depends(get_db)):
    return trips_service.trip_requests.create(db, payload)


@router.get("/trip-requests/{request_id}", response_model=TripRequestRead)
def get_trip_request(request_id: str, db: Session = Depends(get_db)):
    return trips_service.trip_requests.get(db, request_id)


@router.get("/trip-requests", response_model=ListResponse[TripRequestRead])
def list_trip_requests(
    search: str | None = None,
    project_id: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    active: bool | None = None,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return trips_service.trip_requests.list_response(
        db, search, project_id, status, priority, active, limit, offset
    )


@router.patch("/trip-requests/{request_id}", response_model=TripRequestRead)
def update_trip_request(request_id: str, payload: TripRequestUpdate, db: Session = Depends(get_db)):
    return trips_service.trip_requests.update(db, request_id, payload)


@router.delete("/trip-requests/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trip_request(request_id: str, db: Session = Depends(get_db)):
    trips_service.trip_requests.delete(db, request_id)


@router.post("/trips", response_model=TripRead, status_code=status.HTTP_201_CREATED)
def create_trip(payload: TripCreate, db: Session = Depends(get_db)):
    return trips_service.trips.create(db, payload)


@router.get("/trips/{trip_id}", response_model=TripRead)
def get_trip(trip_id: str, db: Session = Depends(get_db)):
    return trips_service.trips.get(db, trip_id)


@router.get("/trips", response_model=ListResponse[TripRead])
def list_trips(
    search: str | None = None,
    is_approved: bool | None = None,
    project_id: str | None = None,
    driver_id: str | None = None,
    material_id: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return trips_service.trips.list_response(
        db,
        search,
        is_approved,
        project_id,
        driver_id,
        material_id,
        date_from,
        date_to,
        limit,
        offset,
    )


@router.patch("/trips/{trip_id}", response_model=TripRead)
def update_trip(trip_id: str, payload: TripUpdate, db: Session = Depends(get_db)):
    return trips_service.trips.update(db, trip_id, payload)


@router.post("/trips/{trip_id}/approve", response_model=TripRead)
def approve_trip(trip_id: str, db: Session = Depends(get_db)):
    return trips_service.trips.approve(db, trip_id)


@router.delete("/trips/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trip(trip_id: str, db: Session = Depends(get_db)):
    trips_service.trips.delete(db, trip_id)
