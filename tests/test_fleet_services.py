from datetime import date

import pytest
from fastapi import HTTPException

from backoffice.models.fleet import DriverVehicle, Vehicle
from backoffice.schemas.fleet import (
    DriverCreate,
    DriverVehicleCreate,
    OwnerCreate,
    VehicleCreate,
    VehicleUpdate,
)
from backoffice.services import fleet as fleet_service


def _vehicle_payload(**overrides):
    data = {
        "plate": "abc123",
        "brand": "International",
        "model": "7600",
        "year": 2018,
        "type": "Volqueta",
        "fuel_type": "Diesel",
    }
    data.update(overrides)
    return VehicleCreate(**data)


def test_create_owner_rejects_duplicate_document(db_session, owner):
    with pytest.raises(HTTPException) as exc:
        fleet_service.owners.create(
            db_session,
            OwnerCreate(document=owner.document, first_name="Ana", last_name="Ruiz"),
        )

    assert exc.value.status_code == 409


def test_delete_owner_with_vehicles_is_refused(db_session, owner, vehicle):
    with pytest.raises(HTTPException) as exc:
        fleet_service.owners.delete(db_session, str(owner.id))

    assert exc.value.status_code == 400


def test_create_vehicle_uppercases_plate(db_session, owner):
    vehicle = fleet_service.vehicles.create(db_session, _vehicle_payload(owner_id=owner.id))

    assert vehicle.plate == "ABC123"


def test_create_vehicle_rejects_duplicate_plate_case_insensitively(db_session):
    fleet_service.vehicles.create(db_session, _vehicle_payload())

    with pytest.raises(HTTPException) as exc:
        fleet_service.vehicles.create(db_session, _vehicle_payload(plate="ABC123"))

    assert exc.value.status_code == 409


@pytest.mark.parametrize("year", [1899, date.today().year + 2])
def test_create_vehicle_rejects_out_of_range_year(db_session, year):
    with pytest.raises(HTTPException) as exc:
        fleet_service.vehicles.create(db_session, _vehicle_payload(year=year))

    assert exc.value.status_code == 400


def test_create_vehicle_with_unknown_owner_is_not_found(db_session):
    import uuid

    with pytest.raises(HTTPException) as exc:
        fleet_service.vehicles.create(db_session, _vehicle_payload(owner_id=uuid.uuid4()))

    assert exc.value.status_code == 404


def test_update_vehicle_validates_year(db_session, vehicle):
    with pytest.raises(HTTPException) as exc:
        fleet_service.vehicles.update(db_session, str(vehicle.id), VehicleUpdate(year=1800))

    assert exc.value.status_code == 400


def test_create_driver_rejects_duplicate_license(db_session, driver):
    with pytest.raises(HTTPException) as exc:
        fleet_service.drivers.create(
            db_session,
            DriverCreate(name="Otro", identification="999888777", license=driver.license),
        )

    assert exc.value.status_code == 400
    assert "license" in exc.value.detail


def test_assign_driver_to_vehicle_once(db_session, driver, vehicle):
    payload = DriverVehicleCreate(driver_id=driver.id, vehicle_id=vehicle.id)
    assignment = fleet_service.driver_vehicles.assign(db_session, payload)

    assert assignment.is_active is True
    with pytest.raises(HTTPException) as exc:
        fleet_service.driver_vehicles.assign(db_session, payload)
    assert exc.value.status_code == 400


def test_assign_inactive_vehicle_is_refused(db_session, driver, vehicle):
    vehicle.is_active = False
    db_session.commit()

    with pytest.raises(HTTPException) as exc:
        fleet_service.driver_vehicles.assign(
            db_session, DriverVehicleCreate(driver_id=driver.id, vehicle_id=vehicle.id)
        )

    assert exc.value.status_code == 400


def test_unassign_sets_timestamp_and_allows_reassign(db_session, driver, vehicle):
    payload = DriverVehicleCreate(driver_id=driver.id, vehicle_id=vehicle.id)
    assignment = fleet_service.driver_vehicles.assign(db_session, payload)

    unassigned = fleet_service.driver_vehicles.unassign(db_session, str(assignment.id))

    assert unassigned.is_active is False
    assert unassigned.unassigned_at is not None
    again = fleet_service.driver_vehicles.assign(db_session, payload)
    assert again.id != assignment.id


def test_delete_vehicle_removes_its_assignments(db_session, driver, vehicle):
    assignment = fleet_service.driver_vehicles.assign(
        db_session, DriverVehicleCreate(driver_id=driver.id, vehicle_id=vehicle.id)
    )
    vehicle_id, assignment_id = vehicle.id, assignment.id

    fleet_service.vehicles.delete(db_session, str(vehicle_id))

    assert db_session.query(Vehicle).filter_by(id=vehicle_id).first() is None
    assert db_session.query(DriverVehicle).filter_by(id=assignment_id).first() is None
    assert fleet_service.drivers.get(db_session, str(driver.id)).vehicle_assignments == []
