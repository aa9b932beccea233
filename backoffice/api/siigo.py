from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backoffice.api.deps import get_db
from backoffice.schemas.common import SyncStats
from backoffice.schemas.siigo import (
    ConnectionTestResult,
    SiigoCostCenterList,
    SiigoCredentialsRead,
    SiigoCredentialsSave,
    SiigoWarehouseList,
)
from backoffice.services.siigo.catalog import siigo_catalog
from backoffice.services.siigo.client import siigo_client
from backoffice.services.siigo.credentials import siigo_credentials

router = APIRouter(tags=["siigo"])


@router.get("/siigo-credentials", response_model=SiigoCredentialsRead | None)
def get_credentials(db: Session = Depends(get_db)):
    return siigo_credentials.get_active(db)


@router.put("/siigo-credentials", response_model=SiigoCredentialsRead)
def save_credentials(payload: SiigoCredentialsSave, db: Session = Depends(get_db)):
    return siigo_credentials.save(db, payload)


@router.delete("/siigo-credentials", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_credentials(db: Session = Depends(get_db)):
    siigo_credentials.deactivate(db)


@router.post("/siigo-credentials/test-connection", response_model=ConnectionTestResult)
def test_credentials(payload: SiigoCredentialsSave):
    return siigo_credentials.test_connection(payload)


@router.post("/siigo/auth", response_model=ConnectionTestResult)
def test_saved_credentials(db: Session = Depends(get_db)):
    return siigo_client.test_connection(db)


@router.get("/siigo/warehouses", response_model=SiigoWarehouseList)
def list_warehouses(search: str | None = None, active: bool | None = None, db: Session = Depends(get_db)):
    return siigo_catalog.list_warehouses(db, search, active)


@router.post("/siigo/warehouses/sync", response_model=SyncStats)
def sync_warehouses(db: Session = Depends(get_db)):
    return siigo_catalog.sync_warehouses(db)


@router.get("/siigo/cost-centers", response_model=SiigoCostCenterList)
def list_cost_centers(search: str | None = None, active: bool | None = None, db: Session = Depends(get_db)):
    return siigo_catalog.list_cost_centers(db, search, active)


@router.post("/siigo/cost-centers/sync", response_model=SyncStats)
def sync_cost_centers(db: Session = Depends(get_db)):
    return siigo_catalog.sync_cost_centers(db)
