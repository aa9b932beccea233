from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backoffice.api.deps import get_db
from backoffice.schemas.clients import ClientCreate, ClientRead, ClientUpdate
from backoffice.schemas.common import ListResponse
from backoffice.services import clients as clients_service

router = APIRouter(prefix="/clients", tags=["clients"])


@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
def create_client(payload: ClientCreate, db: Session = Depends(get_db)):
    return clients_service.clients.create(db, payload)


@router.get("/{client_id}", response_model=ClientRead)
def get_client(client_id: str, db: Session = Depends(get_db)):
    return clients_service.clients.get(db, client_id)


@router.get("", response_model=ListResponse[ClientRead])
def list_clients(
    search: str | None = None,
    is_active: bool | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return clients_service.clients.list_response(
        db, search, is_active, order_by, order_dir, limit, offset
    )


@router.patch("/{client_id}", response_model=ClientRead)
def update_client(client_id: str, payload: ClientUpdate, db: Session = Depends(get_db)):
    return clients_service.clients.update(db, client_id, payload)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(client_id: str, db: Session = Depends(get_db)):
    clients_service.clients.delete(db, client_id)
