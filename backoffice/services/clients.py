from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from backoffice.models.logistics import (
    Client,
    Project,
    ProjectMaterialPrice,
    TripRequest,
    TripRequestStatus,
)
from backoffice.schemas.clients import ClientCreate, ClientUpdate, ProjectCreate, ProjectUpdate
from backoffice.services.common import (
    apply_ordering,
    apply_pagination,
    coerce_uuid,
    ensure_date_order,
)
from backoffice.services.response import ListResponseMixin


def _remove_project(db: Session, project: Project) -> None:
    """Delete a project with its trip requests and price periods."""
    for trip_request in db.query(TripRequest).filter(TripRequest.project_id == project.id).all():
        db.delete(trip_request)
    for price in db.query(ProjectMaterialPrice).filter(ProjectMaterialPrice.project_id == project.id).all():
        db.delete(price)
    db.delete(project)


def _ensure_unique_identification(db: Session, identification: str, exclude_id=None) -> None:
    query = db.query(Client).filter(Client.identification == identification)
    if exclude_id is not None:
        query = query.filter(Client.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=400, detail="A client with this identification already exists")


class Clients(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload: ClientCreate):
        _ensure_unique_identification(db, payload.identification)
        client = Client(**payload.model_dump())
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def get(db: Session, client_id: str):
        client = db.get(Client, coerce_uuid(client_id))
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

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
        query = db.query(Client)
        if search:
            like = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    Client.name.ilike(like),
                    Client.identification.ilike(like),
                    Client.email.ilike(like),
                )
            )
        if is_active is not None:
            query = query.filter(Client.is_active == is_active)
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"created_at": Client.created_at, "name": Client.name, "identification": Client.identification},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, client_id: str, payload: ClientUpdate):
        client = Clients.get(db, client_id)
        data = payload.model_dump(exclude_unset=True)
        if data.get("identification") and data["identification"] != client.identification:
            _ensure_unique_identification(db, data["identification"], exclude_id=client.id)
        for key, value in data.items():
            setattr(client, key, value)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def delete(db: Session, client_id: str):
        client = Clients.get(db, client_id)
        active_projects = (
            db.query(Project)
            .filter(Project.client_id == client.id)
            .filter(Project.is_active.is_(True))
            .count()
        )
        if active_projects:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot delete client with {active_projects} active project(s)",
            )
        for project in db.query(Project).filter(Project.client_id == client.id).all():
            _remove_project(db, project)
        db.delete(client)
        db.commit()


class Projects(ListResponseMixin):
    @staticmethod
    def _ensure_client(db: Session, client_id) -> Client:
        client = db.get(Client, coerce_uuid(client_id))
        if not client:
            raise HTTPException(status_code=400, detail="Client does not exist")
        return client

    @staticmethod
    def _ensure_unique_name(db: Session, client_id, name: str, exclude_id=None) -> None:
        query = (
            db.query(Project)
            .filter(Project.client_id == coerce_uuid(client_id))
            .filter(Project.name == name)
        )
        if exclude_id is not None:
            query = query.filter(Project.id != exclude_id)
        if query.first():
            raise HTTPException(
                status_code=400,
                detail="A project with this name already exists for the client",
            )

    @staticmethod
    def create(db: Session, payload: ProjectCreate):
        Projects._ensure_client(db, payload.client_id)
        Projects._ensure_unique_name(db, payload.client_id, payload.name)
        ensure_date_order(payload.start_date, payload.end_date)
        project = Project(**payload.model_dump())
        db.add(project)
        db.commit()
        db.refresh(project)
        return project

    @staticmethod
    def get(db: Session, project_id: str):
        project = db.get(Project, coerce_uuid(project_id))
        if not project:
            raise HTTPException(status_code=404, detail="Project not found")
        return project

    @staticmethod
    def list(
        db: Session,
        search: str | None,
        client_id: str | None,
        is_active: bool | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        query = db.query(Project).options(selectinload(Project.client))
        if search:
            like = f"%{search.strip()}%"
            query = query.filter(or_(Project.name.ilike(like), Project.description.ilike(like)))
        if client_id:
            query = query.filter(Project.client_id == coerce_uuid(client_id))
        if is_active is not None:
            query = query.filter(Project.is_active == is_active)
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"created_at": Project.created_at, "name": Project.name, "start_date": Project.start_date},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, project_id: str, payload: ProjectUpdate):
        project = Projects.get(db, project_id)
        data = payload.model_dump(exclude_unset=True)
        client_id = data.get("client_id") or project.client_id
        if "client_id" in data and data["client_id"] != project.client_id:
            Projects._ensure_client(db, data["client_id"])
        name = data.get("name") or project.name
        if name != project.name or client_id != project.client_id:
            Projects._ensure_unique_name(db, client_id, name, exclude_id=project.id)
        ensure_date_order(
            data.get("start_date", project.start_date),
            data.get("end_date", project.end_date),
        )
        for key, value in data.items():
            setattr(project, key, value)
        db.commit()
        db.refresh(project)
        return project

    @staticmethod
    def delete(db: Session, project_id: str):
        project = Projects.get(db, project_id)
        open_requests = (
            db.query(TripRequest)
            .filter(TripRequest.project_id == project.id)
            .filter(TripRequest.status != TripRequestStatus.cancelled)
            .count()
        )
        if open_requests:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot delete project with {open_requests} open trip request(s)",
            )
        _remove_project(db, project)
        db.commit()


clients = Clients()
projects = Projects()
