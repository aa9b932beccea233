"""Import Siigo accounts payable into local records.

Every import run is tracked by one ``SiigoAccountsPayableGenerated`` row that
aggregates how many records were saved and how many failed.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backoffice.config import settings
from backoffice.models.siigo import (
    ImportStatus,
    SiigoAccountsPayable,
    SiigoAccountsPayableGenerated,
)
from backoffice.services.common import coerce_uuid
from backoffice.services.siigo.client import SiigoClient, SiigoError, siigo_client

logger = logging.getLogger(__name__)

ACCOUNTS_PAYABLE_ENDPOINT = "/v1/accounts-payable"


@dataclass
class LoadAllResult:
    """Outcome of a full accounts-payable load."""

    request_id: object
    total_pages: int = 0
    total_results: int = 0
    total_processed: int = 0
    total_errors: int = 0
    duration_ms: int = 0
    status: ImportStatus = ImportStatus.processing
    page_errors: list[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "total_pages": self.total_pages,
            "total_results": self.total_results,
            "total_processed": self.total_processed,
            "total_errors": self.total_errors,
            "duration_ms": self.duration_ms,
            "status": self.status,
        }


def final_status(processed: int, errors: int) -> ImportStatus:
    if errors == 0:
        return ImportStatus.success
    if processed > 0:
        return ImportStatus.partial
    return ImportStatus.error


def _parse_due_date(raw) -> date:
    if not raw:
        return date.today()
    if isinstance(raw, date):
        return raw
    text = str(raw)
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()


def _decimal(value) -> Decimal:
    if value in (None, ""):
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {value!r}") from exc


def record_values(account: dict) -> dict:
    """Flatten one Siigo accounts-payable entry into column values."""
    due = account.get("due") or {}
    provider = account.get("provider") or {}
    cost_center = account.get("cost_center") or {}
    currency = account.get("currency") or {}
    return {
        "prefix": due.get("prefix") or "",
        "consecutive": int(due.get("consecutive") or 0),
        "quote": int(due.get("quote") or 0),
        "due_date": _parse_due_date(due.get("date")),
        "balance": _decimal(due.get("balance")),
        "provider_identification": str(provider.get("identification") or ""),
        "provider_branch_office": int(provider.get("branch_office") or 0),
        "provider_name": provider.get("name") or "",
        "cost_center_code": int(cost_center.get("code") or 0),
        "cost_center_name": cost_center.get("name") or "",
        "currency_code": currency.get("code") or "",
        "currency_balance": _decimal(currency.get("balance")),
    }


class AccountsPayableImport:
    def __init__(self, client: SiigoClient | None = None):
        self.client = client or siigo_client

    @staticmethod
    def create_request_record(
        db: Session,
        page: int,
        page_size: int,
        total_results: int,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> SiigoAccountsPayableGenerated:
        record = SiigoAccountsPayableGenerated(
            endpoint=f"{settings.siigo_api_url.rstrip('/')}{ACCOUNTS_PAYABLE_ENDPOINT}",
            page=page,
            page_size=page_size,
            total_results=total_results,
            records_processed=0,
            status=ImportStatus.processing,
            user_agent=user_agent,
            ip_address=ip_address,
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def update_request_record(db: Session, request_id, **values) -> SiigoAccountsPayableGenerated:
        record = db.get(SiigoAccountsPayableGenerated, coerce_uuid(request_id))
        if not record:
            raise HTTPException(status_code=404, detail="Generated request not found")
        for key, value in values.items():
            setattr(record, key, value)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def save_page(db: Session, records: list[dict], request_id) -> tuple[int, int]:
        """Persist one page of Siigo records under ``request_id``.

        Each record is inserted inside its own savepoint, so a bad record is
        counted as failed without discarding the rest of the page. The page
        is committed once.
        """
        request_uuid = coerce_uuid(request_id)
        processed = 0
        failed = 0
        for account in records:
            try:
                with db.begin_nested():
                    values = record_values(account)
                    db.add(SiigoAccountsPayable(generated_request_id=request_uuid, **values))
                    db.flush()
                processed += 1
            except (TypeError, ValueError, AttributeError, SQLAlchemyError) as exc:
                failed += 1
                logger.warning("accounts_payable_record_failed request_id=%s error=%s", request_id, exc)
        db.commit()
        return processed, failed

    def save_single_page(
        self,
        db: Session,
        records: list[dict],
        pagination: dict,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> dict:
        started = time.monotonic()
        request = self.create_request_record(
            db,
            page=int(pagination.get("page") or 1),
            page_size=int(pagination.get("page_size") or len(records)),
            total_results=int(pagination.get("total_results") or len(records)),
            user_agent=user_agent,
            ip_address=ip_address,
        )
        processed, failed = self.save_page(db, records, request.id)
        status = final_status(processed, failed)
        self.update_request_record(
            db,
            request.id,
            records_processed=processed,
            status=status,
            duration_ms=int((time.monotonic() - started) * 1000),
            error_message=f"{failed} records failed" if failed else None,
        )
        logger.info(
            "accounts_payable_page_saved request_id=%s processed=%s failed=%s",
            request.id,
            processed,
            failed,
        )
        return {"request_id": request.id, "processed": processed, "failed": failed, "status": status}

    def load_all(
        self,
        db: Session,
        page_delay: float | None = None,
        page_size: int | None = None,
        user_agent: str | None = None,
        ip_address: str | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> LoadAllResult:
        """Page through every Siigo accounts-payable record.

        Pages are fetched one after another with ``page_delay`` seconds
        between them. A page that fails to fetch or save counts as one error
        and the loop moves on to the next page. Anything else aborts the run:
        the unsaved page is rolled back and the request is marked as an error.
        """
        page_delay = settings.siigo_page_delay_seconds if page_delay is None else page_delay
        started = time.monotonic()

        first_page = self.client.get_accounts_payable(db, page=1, page_size=page_size)
        pagination = first_page["pagination"]
        total_results = int(pagination.get("total_results") or 0)
        effective_page_size = int(pagination.get("page_size") or page_size or settings.siigo_page_size)
        total_pages = math.ceil(total_results / effective_page_size) if effective_page_size else 0

        request = self.create_request_record(
            db,
            page=1,
            page_size=effective_page_size,
            total_results=total_results,
            user_agent=user_agent,
            ip_address=ip_address,
        )
        result = LoadAllResult(
            request_id=request.id,
            total_pages=total_pages,
            total_results=total_results,
        )
        logger.info(
            "accounts_payable_load_started request_id=%s total_results=%s total_pages=%s",
            request.id,
            total_results,
            total_pages,
        )

        try:
            for page in range(1, total_pages + 1):
                try:
                    page_data = first_page if page == 1 else self.client.get_accounts_payable(
                        db, page=page, page_size=effective_page_size
                    )
                    processed, failed = self.save_page(db, page_data["results"], request.id)
                    result.total_processed += processed
                    result.total_errors += failed
                    logger.info(
                        "accounts_payable_page_loaded page=%s/%s processed=%s failed=%s",
                        page,
                        total_pages,
                        processed,
                        failed,
                    )
                except (SiigoError, SQLAlchemyError, KeyError, TypeError, ValueError) as exc:
                    db.rollback()
                    result.total_errors += 1
                    result.page_errors.append(f"Page {page}: {exc}")
                    logger.warning("accounts_payable_page_failed page=%s error=%s", page, exc)

                if page < total_pages and page_delay > 0:
                    sleep(page_delay)
        except BaseException:
            db.rollback()
            self.update_request_record(
                db,
                request.id,
                status=ImportStatus.error,
                records_processed=result.total_processed,
                duration_ms=int((time.monotonic() - started) * 1000),
                error_message="Import aborted",
            )
            raise

        result.duration_ms = int((time.monotonic() - started) * 1000)
        result.status = final_status(result.total_processed, result.total_errors)
        self.update_request_record(
            db,
            request.id,
            records_processed=result.total_processed,
            status=result.status,
            duration_ms=result.duration_ms,
            error_message=f"{result.total_errors} records failed" if result.total_errors else None,
        )
        logger.info(
            "accounts_payable_load_finished request_id=%s status=%s processed=%s errors=%s duration_ms=%s",
            request.id,
            result.status.value,
            result.total_processed,
            result.total_errors,
            result.duration_ms,
        )
        return result


accounts_payable_import = AccountsPayableImport()
