import uuid
from datetime import date
from decimal import Decimal

import pytest
from fastapi import HTTPException

from backoffice.models.logistics import (
    Client,
    Project,
    ProjectMaterialPrice,
    TripRequest,
    TripRequestStatus,
)
from backoffice.schemas.clients import ClientCreate, ClientUpdate, ProjectCreate, ProjectUpdate
from backoffice.services import clients as clients_service


def test_create_client_rejects_duplicate_identification(db_session):
    clients_service.clients.create(db_session, ClientCreate(identification="800100200", name="Acme"))

    with pytest.raises(HTTPException) as exc:
        clients_service.clients.create(db_session, ClientCreate(identification="800100200", name="Other"))

    assert exc.value.status_code == 400


def test_update_client_keeps_own_identification(db_session, customer):
    updated = clients_service.clients.update(
        db_session,
        str(customer.id),
        ClientUpdate(identification=customer.identification, name="Renamed"),
    )

    assert updated.name == "Renamed"


def test_list_clients_filters_by_search(db_session):
    clients_service.clients.create(db_session, ClientCreate(identification="111", name="Gravas del Norte"))
    clients_service.clients.create(db_session, ClientCreate(identification="222", name="Concretos Sur"))

    items = clients_service.clients.list(db_session, "gravas", None, "name", "asc", 50, 0)

    assert [item.name for item in items] == ["Gravas del Norte"]


def test_list_clients_rejects_unknown_order_by(db_session):
    with pytest.raises(HTTPException) as exc:
        clients_service.clients.list(db_session, None, None, "bogus", "asc", 50, 0)

    assert exc.value.status_code == 400
    assert "Allowed" in exc.value.detail


def test_get_client_with_malformed_id_is_bad_request(db_session):
    with pytest.raises(HTTPException) as exc:
        clients_service.clients.get(db_session, "not-a-uuid")

    assert exc.value.status_code == 400


def test_delete_client_with_active_project_is_refused(db_session, customer, project):
    with pytest.raises(HTTPException) as exc:
        clients_service.clients.delete(db_session, str(customer.id))

    assert exc.value.status_code == 400
    assert "active project" in exc.value.detail


def test_delete_client_removes_inactive_projects(db_session, customer, project, material):
    project.is_active = False
    price = ProjectMaterialPrice(
        project_id=project.id,
        material_id=material.id,
        sale_price=Decimal("45000"),
        outsourced_price=Decimal("30000"),
        start_date=date(2026, 1, 1),
        is_active=False,
    )
    db_session.add(price)
    db_session.commit()
    customer_id, project_id, price_id = customer.id, project.id, price.id

    clients_service.clients.delete(db_session, str(customer_id))

    assert db_session.query(Project).filter_by(id=project_id).first() is None
    assert db_session.query(ProjectMaterialPrice).filter_by(id=price_id).first() is None
    assert db_session.query(Client).filter_by(id=customer_id).first() is None


def test_create_project_requires_existing_client(db_session):
    with pytest.raises(HTTPException) as exc:
        clients_service.projects.create(
            db_session, ProjectCreate(name="Ghost", client_id=uuid.uuid4())
        )

    assert exc.value.status_code == 400


def test_project_name_is_unique_per_client(db_session, customer, project):
    with pytest.raises(HTTPException) as exc:
        clients_service.projects.create(
            db_session, ProjectCreate(name=project.name, client_id=customer.id)
        )

    assert exc.value.status_code == 400


def test_update_project_rejects_inverted_dates(db_session, project):
    with pytest.raises(HTTPException) as exc:
        clients_service.projects.update(
            db_session,
            str(project.id),
            ProjectUpdate(end_date=date(2025, 12, 31)),
        )

    assert exc.value.status_code == 400
    assert exc.value.detail == "Start date must be before end date"


def test_delete_project_with_open_trip_request_is_refused(db_session, customer, project):
    db_session.add(TripRequest(project_id=project.id, client_id=customer.id))
    db_session.commit()

    with pytest.raises(HTTPException) as exc:
        clients_service.projects.delete(db_session, str(project.id))

    assert exc.value.status_code == 400


def test_delete_project_removes_cancelled_trip_requests(db_session, customer, project):
    trip_request = TripRequest(
        project_id=project.id,
        client_id=customer.id,
        status=TripRequestStatus.cancelled,
    )
    db_session.add(trip_request)
    db_session.commit()
    project_id, request_id = project.id, trip_request.id

    clients_service.projects.delete(db_session, str(project_id))

    assert db_session.query(Project).filter_by(id=project_id).first() is None
    assert db_session.query(TripRequest).filter_by(id=request_id).first() is None
