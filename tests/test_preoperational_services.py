from datetime import date
from decimal import Decimal

import pytest
from fastapi import HTTPException

from backoffice.schemas.preoperational import (
    InspectionDetailCreate,
    PreoperationalInspectionCreate,
    PreoperationalItemCreate,
    PreoperationalItemUpdate,
)
from backoffice.services import preoperational as preoperational_service


def _inspection(driver, vehicle, details=(), **overrides):
    data = {
        "inspection_date": date(2026, 3, 2),
        "driver_id": driver.id,
        "vehicle_id": vehicle.id,
        "initial_mileage": Decimal("1200"),
        "final_mileage": Decimal("1350"),
        "details": list(details),
    }
    data.update(overrides)
    return PreoperationalInspectionCreate(**data)


def test_item_name_is_unique(db_session):
    preoperational_service.preoperational_items.create(db_session, PreoperationalItemCreate(name="Frenos"))

    with pytest.raises(HTTPException) as exc:
        preoperational_service.preoperational_items.create(
            db_session, PreoperationalItemCreate(name="  Frenos ")
        )

    assert exc.value.status_code == 400


def test_item_can_be_deactivated(db_session):
    item = preoperational_service.preoperational_items.create(
        db_session, PreoperationalItemCreate(name="Luces")
    )

    updated = preoperational_service.preoperational_items.update(
        db_session, item.id, PreoperationalItemUpdate(is_active=False)
    )

    assert updated.is_active is False


def test_delete_item_used_in_inspection_is_refused(db_session, driver, vehicle):
    item = preoperational_service.preoperational_items.create(
        db_session, PreoperationalItemCreate(name="Llantas")
    )
    preoperational_service.preoperational_inspections.create(
        db_session,
        _inspection(driver, vehicle, [InspectionDetailCreate(item_id=item.id, passed=True)]),
    )

    with pytest.raises(HTTPException) as exc:
        preoperational_service.preoperational_items.delete(db_session, item.id)

    assert exc.value.status_code == 400


def test_inspection_rejects_lower_final_mileage(db_session, driver, vehicle):
    with pytest.raises(HTTPException) as exc:
        preoperational_service.preoperational_inspections.create(
            db_session, _inspection(driver, vehicle, final_mileage=Decimal("1000"))
        )

    assert exc.value.status_code == 400


def test_inspection_rejects_unknown_items(db_session, driver, vehicle):
    with pytest.raises(HTTPException) as exc:
        preoperational_service.preoperational_inspections.create(
            db_session,
            _inspection(driver, vehicle, [InspectionDetailCreate(item_id=9999, passed=False)]),
        )

    assert exc.value.status_code == 400
    assert "9999" in exc.value.detail


def test_inspection_stores_details(db_session, driver, vehicle):
    item = preoperational_service.preoperational_items.create(
        db_session, PreoperationalItemCreate(name="Espejos")
    )

    inspection = preoperational_service.preoperational_inspections.create(
        db_session,
        _inspection(
            driver,
            vehicle,
            [InspectionDetailCreate(item_id=item.id, passed=False, observations="Roto")],
        ),
    )

    assert len(inspection.details) == 1
    assert inspection.details[0].passed is False


def test_list_inspections_count_is_total(db_session, driver, vehicle):
    for day in (1, 2, 3):
        preoperational_service.preoperational_inspections.create(
            db_session, _inspection(driver, vehicle, inspection_date=date(2026, 3, day))
        )

    page = preoperational_service.preoperational_inspections.list(
        db_session, str(driver.id), None, None, None, 2, 0
    )

    assert page["count"] == 3
    assert len(page["items"]) == 2
    assert page["items"][0].inspection_date == date(2026, 3, 3)
