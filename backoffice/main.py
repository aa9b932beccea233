from fastapi import FastAPI
from starlette.responses import Response

from backoffice.api.accounts_payable import router as accounts_payable_router
from backoffice.api.clients import router as clients_router
from backoffice.api.email import router as email_router
from backoffice.api.fleet import router as fleet_router
from backoffice.api.fuel import router as fuel_router
from backoffice.api.materials import router as materials_router
from backoffice.api.preoperational import router as preoperational_router
from backoffice.api.projects import router as projects_router
from backoffice.api.siigo import router as siigo_router
from backoffice.api.trips import router as trips_router
from backoffice.errors import register_error_handlers
from backoffice.logging import configure_logging

configure_logging()

app = FastAPI(title="Backoffice API")
register_error_handlers(app)


def _include_api_router(router, dependencies=None):
    app.include_router(router, dependencies=dependencies)
    app.include_router(router, prefix="/api/v1", dependencies=dependencies)


_include_api_router(clients_router)
_include_api_router(projects_router)
_include_api_router(materials_router)
_include_api_router(fleet_router)
_include_api_router(trips_router)
_include_api_router(fuel_router)
_include_api_router(preoperational_router)
_include_api_router(siigo_router)
_include_api_router(accounts_payable_router)
_include_api_router(email_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.head("/health")
def head_health():
    return Response(status_code=200)
