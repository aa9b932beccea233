from datetime import date
from decimal import Decimal

import pytest
from fastapi import HTTPException

from backoffice.models.fleet import FuelPurchase
from backoffice.models.siigo import SiigoCostCenter
from backoffice.services.siigo.fuel_migration import FuelJournalError, FuelSiigoMigration, build_journal


@pytest.fixture()
def plate_cost_center(db_session, vehicle):
    row = SiigoCostCenter(id=731, code="731", name=vehicle.plate, active=True)
    db_session.add(row)
    db_session.commit()
    return row


def _purchase(db_session, vehicle, provider="CORALINAS", receipt="R-77", day=10):
    purchase = FuelPurchase(
        purchase_date=date(2026, 4, day),
        vehicle_id=vehicle.id,
        quantity=Decimal("35"),
        total=Decimal("455000"),
        provider=provider,
        receipt=receipt,
    )
    db_session.add(purchase)
    db_session.commit()
    db_session.refresh(purchase)
    return purchase


def test_build_journal_balances_debit_and_credit(db_session, vehicle, plate_cost_center):
    purchase = _purchase(db_session, vehicle)

    journal = build_journal(db_session, purchase)

    assert journal["document"] == {"id": 39068}
    assert journal["date"] == "2026-04-10"
    debit, credit = journal["items"]
    assert debit["account"] == {"code": "62100601", "movement": "Debit"}
    assert debit["cost_center"] == 731
    assert credit["account"]["movement"] == "Credit"
    assert credit["cost_center"] == 518
    assert debit["customer"]["identification"] == "811038233"
    assert debit["value"] == credit["value"] == 455000.0
    assert debit["description"] == "COMBUSTIBLE RECIBO R-77"
    assert vehicle.plate in journal["observations"]


def test_build_journal_requires_known_provider(db_session, vehicle, plate_cost_center):
    purchase = _purchase(db_session, vehicle, provider="DESCONOCIDO")

    with pytest.raises(FuelJournalError) as exc:
        build_journal(db_session, purchase)

    assert "CORALINAS" in str(exc.value)


def test_build_journal_requires_plate_cost_center(db_session, vehicle):
    purchase = _purchase(db_session, vehicle)

    with pytest.raises(FuelJournalError):
        build_journal(db_session, purchase)


def test_migrate_pending_reports_each_purchase(
    db_session, siigo_credentials_row, siigo_test_client, fake_siigo, vehicle, plate_cost_center
):
    good = _purchase(db_session, vehicle, receipt="R-1", day=1)
    bad = _purchase(db_session, vehicle, provider="DESCONOCIDO", receipt="R-2", day=2)

    summary = FuelSiigoMigration(siigo_test_client).migrate_pending(db_session)

    assert summary["total"] == 2
    assert summary["successful"] == 1
    assert summary["failed"] == 1
    assert [item["success"] for item in summary["results"]] == [True, False]
    assert len(fake_siigo.journals) == 1
    db_session.refresh(good)
    db_session.refresh(bad)
    assert good.state is False
    assert bad.state is True


def test_migrate_pending_keeps_purchase_when_siigo_fails(
    db_session, siigo_credentials_row, siigo_test_client, fake_siigo, vehicle, plate_cost_center
):
    purchase = _purchase(db_session, vehicle)
    fake_siigo.fail_paths["/v1/journals"] = 400

    summary = FuelSiigoMigration(siigo_test_client).migrate_pending(db_session)

    assert summary["failed"] == 1
    assert "400" in summary["results"][0]["error"]
    db_session.refresh(purchase)
    assert purchase.state is True


def test_migrate_pending_with_nothing_pending(db_session, siigo_test_client):
    with pytest.raises(HTTPException) as exc:
        FuelSiigoMigration(siigo_test_client).migrate_pending(db_session)

    assert exc.value.status_code == 400


def test_migrate_one_maps_journal_errors_to_bad_request(
    db_session, siigo_credentials_row, siigo_test_client, vehicle
):
    purchase = _purchase(db_session, vehicle)

    with pytest.raises(HTTPException) as exc:
        FuelSiigoMigration(siigo_test_client).migrate_one(db_session, str(purchase.id))

    assert exc.value.status_code == 400
    assert "cost center" in exc.value.detail
