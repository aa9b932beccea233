import time

from fastapi import HTTPException
from fastapi.encoders import jsonable_encoder

from backoffice.celery_app import celery_app
from backoffice.db import SessionLocal
from backoffice.logging import get_logger
from backoffice.services.siigo.accounts_payable_import import accounts_payable_import
from backoffice.services.siigo.fuel_migration import fuel_siigo_migration


@celery_app.task(
    name="backoffice.tasks.siigo.load_all_accounts_payable",
    time_limit=3600,
    soft_time_limit=3540,
)
def load_all_accounts_payable(page_delay: float | None = None, page_size: int | None = None):
    """Import every accounts-payable page from Siigo into a new generated request."""
    start = time.monotonic()
    session = SessionLocal()
    logger = get_logger(__name__)
    logger.info("SIIGO_LOAD_ALL_START page_size=%s page_delay=%s", page_size, page_delay)
    try:
        result = accounts_payable_import.load_all(
            session,
            page_delay=page_delay,
            page_size=page_size,
            user_agent="celery",
        )
        logger.info(
            "SIIGO_LOAD_ALL_COMPLETE request_id=%s pages=%d processed=%d errors=%d duration=%.2fs",
            result.request_id,
            result.total_pages,
            result.total_processed,
            result.total_errors,
            time.monotonic() - start,
        )
        return jsonable_encoder(result.as_dict())
    except Exception:
        session.rollback()
        logger.exception("SIIGO_LOAD_ALL_FAILED")
        raise
    finally:
        session.close()


@celery_app.task(
    name="backoffice.tasks.siigo.migrate_fuel_purchases",
    time_limit=600,
    soft_time_limit=540,
)
def migrate_fuel_purchases():
    session = SessionLocal()
    logger = get_logger(__name__)
    try:
        try:
            summary = fuel_siigo_migration.migrate_pending(session)
        except HTTPException as exc:
            logger.info("SIIGO_FUEL_MIGRATION_SKIPPED reason=%s", exc.detail)
            return {"total": 0, "successful": 0, "failed": 0, "results": []}
        logger.info(
            "SIIGO_FUEL_MIGRATION_COMPLETE total=%d successful=%d failed=%d",
            summary["total"],
            summary["successful"],
            summary["failed"],
        )
        return jsonable_encoder(summary)
    except Exception:
        session.rollback()
        logger.exception("SIIGO_FUEL_MIGRATION_FAILED")
        raise
    finally:
        session.close()
