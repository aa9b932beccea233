import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from backoffice.services.siigo.client import (
    SiigoAuthError,
    SiigoCredentialsError,
    SiigoError,
    SiigoNetworkError,
)

logger = logging.getLogger(__name__)


def _field_name(loc) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


def _validation_detail(errors: list[dict]) -> str:
    missing = [_field_name(err["loc"]) for err in errors if err.get("type") == "missing"]
    invalid = [_field_name(err["loc"]) for err in errors if err.get("type") != "missing"]
    messages = []
    if missing:
        messages.append("Missing required fields: " + ", ".join(missing))
    if invalid:
        messages.append("Invalid fields: " + ", ".join(invalid))
    return "; ".join(messages) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        return JSONResponse(
            status_code=400,
            content={
                "detail": _validation_detail(errors),
                "errors": [
                    {"field": _field_name(err["loc"]), "message": err.get("msg", "")}
                    for err in errors
                ],
            },
        )

    @app.exception_handler(SiigoError)
    async def siigo_exception_handler(request: Request, exc: SiigoError):
        if isinstance(exc, SiigoCredentialsError):
            status_code = 400
        elif isinstance(exc, SiigoNetworkError):
            status_code = 503
        else:
            status_code = 502
        if not isinstance(exc, SiigoCredentialsError | SiigoAuthError):
            logger.warning("siigo_request_failed path=%s error=%s", request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.exception_handler(IntegrityError)
    async def integrity_exception_handler(request: Request, exc: IntegrityError):
        logger.warning("integrity_error path=%s error=%s", request.url.path, exc.orig)
        return JSONResponse(
            status_code=409,
            content={"detail": "Record conflicts with existing data"},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled_error path=%s", request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
