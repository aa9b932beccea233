from datetime import date
from decimal import Decimal

import pytest
from fastapi import HTTPException

from backoffice.models.logistics import Trip, TripRequestPriority, TripRequestStatus, TripStatus
from backoffice.schemas.materials import ProjectMaterialPriceCreate
from backoffice.schemas.trips import (
    TripCreate,
    TripRequestCreate,
    TripRequestMaterialCreate,
    TripRequestUpdate,
    TripUpdate,
)
from backoffice.services import materials as materials_service
from backoffice.services import trips as trips_service


def _request_payload(project, material, priority=TripRequestPriority.normal):
    return TripRequestCreate(
        project_id=project.id,
        priority=priority,
        materials=[TripRequestMaterialCreate(material_id=material.id, requested_quantity=Decimal("14"))],
    )


def _trip_payload(project, material, driver, vehicle, trip_request=None, **overrides):
    data = {
        "material_id": material.id,
        "project_id": project.id,
        "driver_id": driver.id,
        "vehicle_id": vehicle.id,
        "trip_request_id": trip_request.id if trip_request else None,
        "trip_date": date(2026, 3, 10),
        "quantity": Decimal("14"),
    }
    data.update(overrides)
    return TripCreate(**data)


def test_create_request_copies_client_and_unit(db_session, customer, project, material):
    trip_request = trips_service.trip_requests.create(db_session, _request_payload(project, material))

    assert trip_request.client_id == customer.id
    assert trip_request.status == TripRequestStatus.pending
    assert trip_request.request_date == date.today()
    assert [item.unit_of_measure for item in trip_request.materials] == [material.unit_of_measure]


def test_create_request_rejects_inactive_material(db_session, project, material):
    material.is_active = False
    db_session.commit()

    with pytest.raises(HTTPException) as exc:
        trips_service.trip_requests.create(db_session, _request_payload(project, material))

    assert exc.value.status_code == 400


def test_list_requests_puts_urgent_first(db_session, project, material):
    normal = trips_service.trip_requests.create(db_session, _request_payload(project, material))
    urgent = trips_service.trip_requests.create(
        db_session, _request_payload(project, material, TripRequestPriority.urgent)
    )

    items = trips_service.trip_requests.list(db_session, None, None, None, None, None, 50, 0)

    assert [item.id for item in items] == [urgent.id, normal.id]


def test_create_trip_schedules_request_and_uses_active_price(
    db_session, project, material, driver, vehicle
):
    materials_service.project_material_prices.create(
        db_session,
        ProjectMaterialPriceCreate(
            project_id=project.id,
            material_id=material.id,
            sale_price=Decimal("45000"),
            outsourced_price=Decimal("30000"),
            start_date=date(2026, 1, 1),
        ),
    )
    trip_request = trips_service.trip_requests.create(db_session, _request_payload(project, material))

    trip = trips_service.trips.create(
        db_session, _trip_payload(project, material, driver, vehicle, trip_request)
    )

    db_session.refresh(trip_request)
    assert trip_request.status == TripRequestStatus.scheduled
    assert trip.sale_price == Decimal("45000")
    assert trip.outsourced_price == Decimal("30000")
    assert trip.is_approved is False


def test_create_trip_without_price_defaults_to_zero(db_session, project, material, driver, vehicle):
    trip = trips_service.trips.create(db_session, _trip_payload(project, material, driver, vehicle))

    assert trip.sale_price == Decimal("0")
    assert trip.outsourced_price == Decimal("0")


def test_create_trip_keeps_explicit_prices(db_session, project, material, driver, vehicle):
    trip = trips_service.trips.create(
        db_session,
        _trip_payload(project, material, driver, vehicle, sale_price=Decimal("1000")),
    )

    assert trip.sale_price == Decimal("1000")
    assert trip.outsourced_price == Decimal("0")


def test_create_trip_for_cancelled_request_is_refused(db_session, project, material, driver, vehicle):
    trip_request = trips_service.trip_requests.create(db_session, _request_payload(project, material))
    trips_service.trip_requests.update(
        db_session, str(trip_request.id), TripRequestUpdate(status=TripRequestStatus.cancelled)
    )

    with pytest.raises(HTTPException) as exc:
        trips_service.trips.create(
            db_session, _trip_payload(project, material, driver, vehicle, trip_request)
        )

    assert exc.value.status_code == 400


def test_create_trip_with_inactive_driver_is_refused(db_session, project, material, driver, vehicle):
    driver.is_active = False
    db_session.commit()

    with pytest.raises(HTTPException) as exc:
        trips_service.trips.create(db_session, _trip_payload(project, material, driver, vehicle))

    assert exc.value.status_code == 400
    assert "Driver" in exc.value.detail


def test_cannot_cancel_request_with_trips(db_session, project, material, driver, vehicle):
    trip_request = trips_service.trip_requests.create(db_session, _request_payload(project, material))
    trips_service.trips.create(db_session, _trip_payload(project, material, driver, vehicle, trip_request))

    with pytest.raises(HTTPException) as exc:
        trips_service.trip_requests.update(
            db_session, str(trip_request.id), TripRequestUpdate(status=TripRequestStatus.cancelled)
        )

    assert exc.value.status_code == 400


def test_approve_trip_twice_is_refused(db_session, project, material, driver, vehicle):
    trip = trips_service.trips.create(db_session, _trip_payload(project, material, driver, vehicle))

    approved = trips_service.trips.approve(db_session, str(trip.id))
    assert approved.is_approved is True

    with pytest.raises(HTTPException) as exc:
        trips_service.trips.approve(db_session, str(trip.id))
    assert exc.value.status_code == 400


def test_update_trip_rejects_non_positive_certified_weight(db_session, project, material, driver, vehicle):
    trip = trips_service.trips.create(db_session, _trip_payload(project, material, driver, vehicle))

    with pytest.raises(HTTPException) as exc:
        trips_service.trips.update(db_session, str(trip.id), TripUpdate(certified_weight=Decimal("0")))

    assert exc.value.status_code == 400


def test_delete_trip_reverts_request_to_pending(db_session, project, material, driver, vehicle):
    trip_request = trips_service.trip_requests.create(db_session, _request_payload(project, material))
    trip = trips_service.trips.create(
        db_session, _trip_payload(project, material, driver, vehicle, trip_request)
    )
    trip_id = trip.id

    trips_service.trips.delete(db_session, str(trip_id))

    db_session.refresh(trip_request)
    assert db_session.query(Trip).filter_by(id=trip_id).first() is None
    assert trip_request.status == TripRequestStatus.pending


def test_delete_trip_only_when_scheduled(db_session, project, material, driver, vehicle):
    trip = trips_service.trips.create(
        db_session,
        _trip_payload(project, material, driver, vehicle, status=TripStatus.delivered),
    )

    with pytest.raises(HTTPException) as exc:
        trips_service.trips.delete(db_session, str(trip.id))

    assert exc.value.status_code == 400


def test_list_trips_filters_by_date_range(db_session, project, material, driver, vehicle):
    trips_service.trips.create(
        db_session, _trip_payload(project, material, driver, vehicle, trip_date=date(2026, 2, 1))
    )
    march = trips_service.trips.create(
        db_session, _trip_payload(project, material, driver, vehicle, trip_date=date(2026, 3, 5))
    )

    items = trips_service.trips.list(
        db_session, None, None, None, None, None, date(2026, 3, 1), date(2026, 3, 31), 50, 0
    )

    assert [item.id for item in items] == [march.id]
