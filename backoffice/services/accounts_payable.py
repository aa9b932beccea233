"""Payment workflow over imported Siigo accounts payable."""

import logging
from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from backoffice.models.siigo import (
    GeneratedState,
    SiigoAccountsPayable,
    SiigoAccountsPayableGenerated,
)
from backoffice.schemas.siigo import GeneratedRequestRead
from backoffice.services.common import apply_pagination, coerce_uuid, round_money
from backoffice.services.siigo.client import siigo_client

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(UTC)


def _ensure_generated(db: Session, generated_request_id) -> SiigoAccountsPayableGenerated:
    generated = db.get(SiigoAccountsPayableGenerated, coerce_uuid(generated_request_id))
    if not generated:
        raise HTTPException(status_code=404, detail="Generated request not found")
    return generated


def _ensure_record(db: Session, record_id) -> SiigoAccountsPayable:
    record = db.get(SiigoAccountsPayable, coerce_uuid(record_id))
    if not record:
        raise HTTPException(status_code=404, detail="Accounts payable record not found")
    return record


class AccountsPayable:
    @staticmethod
    def fetch_remote_page(db: Session, page: int = 1, page_size: int | None = None) -> dict:
        return siigo_client.get_accounts_payable(db, page=page, page_size=page_size)

    @staticmethod
    def set_payment_value(db: Session, record_id: str, payment_value: Decimal | None):
        record = _ensure_record(db, record_id)
        if payment_value is not None and payment_value > record.balance:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"Payment value ({round_money(payment_value)}) cannot be greater "
                    f"than the balance ({round_money(record.balance)})"
                ),
            )
        record.payment_value = payment_value or None
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def approve_payments(db: Session, generated_request_id: str) -> dict:
        generated = _ensure_generated(db, generated_request_id)
        records = list(generated.accounts_payable)
        with_payment = [r for r in records if r.payment_value is not None and r.payment_value > 0]
        if not with_payment:
            raise HTTPException(status_code=400, detail="No records with payment values to approve")
        try:
            for record in with_payment:
                record.approved = True
            generated.state = GeneratedState.approved
            generated.approved_at = _now()
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(
            "accounts_payable_approved generated_request_id=%s approved=%s",
            generated.id,
            len(with_payment),
        )
        return {"approved_count": len(with_payment), "total_records": len(records)}

    @staticmethod
    def mark_paid(db: Session, ids: list) -> dict:
        if not ids:
            raise HTTPException(status_code=400, detail="A list of payment ids is required")
        record_ids = [coerce_uuid(record_id) for record_id in ids]
        records = (
            db.query(SiigoAccountsPayable)
            .filter(SiigoAccountsPayable.id.in_(record_ids))
            .filter(SiigoAccountsPayable.approved.is_(True))
            .all()
        )
        if len(records) != len(set(record_ids)):
            raise HTTPException(status_code=400, detail="Some payments do not exist or are not approved")
        already_paid = [r.provider_name for r in records if r.paid]
        if already_paid:
            raise HTTPException(
                status_code=400,
                detail=f"Some payments are already marked as paid: {', '.join(already_paid)}",
            )
        for record in records:
            record.paid = True
        db.commit()
        total = sum((r.payment_value or Decimal("0") for r in records), Decimal("0"))
        logger.info("accounts_payable_marked_paid count=%s total=%s", len(records), total)
        return {"count": len(records), "total_amount": round_money(total), "records": records}

    @staticmethod
    def cancel_portfolio(db: Session, generated_request_id: str):
        generated = _ensure_generated(db, generated_request_id)
        if generated.state == GeneratedState.approved:
            raise HTTPException(status_code=400, detail="An approved portfolio cannot be cancelled")
        if generated.state == GeneratedState.cancelled:
            raise HTTPException(status_code=400, detail="The portfolio is already cancelled")
        generated.state = GeneratedState.cancelled
        db.commit()
        db.refresh(generated)
        return generated

    @staticmethod
    def list_generated(db: Session, limit: int, offset: int) -> list[dict]:
        counts = (
            db.query(
                SiigoAccountsPayable.generated_request_id,
                func.count(SiigoAccountsPayable.id).label("records_count"),
            )
            .group_by(SiigoAccountsPayable.generated_request_id)
            .subquery()
        )
        query = (
            db.query(SiigoAccountsPayableGenerated, func.coalesce(counts.c.records_count, 0))
            .outerjoin(counts, counts.c.generated_request_id == SiigoAccountsPayableGenerated.id)
            .order_by(SiigoAccountsPayableGenerated.request_date.desc())
        )
        return [
            {**GeneratedRequestRead.model_validate(generated).model_dump(), "records_count": int(count)}
            for generated, count in apply_pagination(query, limit, offset).all()
        ]

    @staticmethod
    def get_generated(db: Session, generated_request_id: str) -> dict:
        generated = _ensure_generated(db, generated_request_id)
        records = (
            db.query(SiigoAccountsPayable)
            .filter(SiigoAccountsPayable.generated_request_id == generated.id)
            .order_by(SiigoAccountsPayable.due_date.desc())
            .all()
        )
        return {**GeneratedRequestRead.model_validate(generated).model_dump(), "accounts_payable": records}

    @staticmethod
    def list_approved(
        db: Session,
        generated_request_id: str | None = None,
        paid: bool | None = None,
    ) -> list[SiigoAccountsPayable]:
        query = db.query(SiigoAccountsPayable).filter(SiigoAccountsPayable.approved.is_(True))
        if generated_request_id:
            query = query.filter(SiigoAccountsPayable.generated_request_id == coerce_uuid(generated_request_id))
        if paid is not None:
            query = query.filter(SiigoAccountsPayable.paid == paid)
        return query.order_by(
            SiigoAccountsPayable.paid.asc(),
            SiigoAccountsPayable.due_date.asc(),
            SiigoAccountsPayable.provider_name.asc(),
        ).all()

    @staticmethod
    def list_by_date(
        db: Session,
        on_date: date,
        generated_request_id: str | None = None,
    ) -> list[SiigoAccountsPayable]:
        """Approved records whose import was approved on ``on_date``."""
        start = datetime.combine(on_date, time.min, tzinfo=UTC)
        end = start + timedelta(days=1)
        query = (
            db.query(SiigoAccountsPayable)
            .join(
                SiigoAccountsPayableGenerated,
                SiigoAccountsPayableGenerated.id == SiigoAccountsPayable.generated_request_id,
            )
            .filter(SiigoAccountsPayable.approved.is_(True))
            .filter(SiigoAccountsPayableGenerated.state == GeneratedState.approved)
            .filter(SiigoAccountsPayableGenerated.approved_at >= start)
            .filter(SiigoAccountsPayableGenerated.approved_at < end)
        )
        if generated_request_id:
            query = query.filter(SiigoAccountsPayable.generated_request_id == coerce_uuid(generated_request_id))
        return query.order_by(
            SiigoAccountsPayable.paid.asc(),
            SiigoAccountsPayable.due_date.asc(),
            SiigoAccountsPayable.provider_name.asc(),
        ).all()

    @staticmethod
    def list_approved_generated(db: Session) -> list[dict]:
        totals = (
            db.query(
                SiigoAccountsPayable.generated_request_id,
                func.count(SiigoAccountsPayable.id).label("approved_count"),
                func.coalesce(func.sum(SiigoAccountsPayable.payment_value), 0).label("total_value"),
            )
            .filter(SiigoAccountsPayable.approved.is_(True))
            .group_by(SiigoAccountsPayable.generated_request_id)
            .subquery()
        )
        rows = (
            db.query(
                SiigoAccountsPayableGenerated,
                func.coalesce(totals.c.approved_count, 0),
                func.coalesce(totals.c.total_value, 0),
            )
            .outerjoin(totals, totals.c.generated_request_id == SiigoAccountsPayableGenerated.id)
            .filter(SiigoAccountsPayableGenerated.state == GeneratedState.approved)
            .order_by(SiigoAccountsPayableGenerated.approved_at.desc())
            .all()
        )
        return [
            {
                **GeneratedRequestRead.model_validate(generated).model_dump(),
                "approved_count": int(count),
                "total_approved_value": round_money(total),
            }
            for generated, count, total in rows
        ]

    @staticmethod
    def list_all(db: Session, limit: int, offset: int) -> list[SiigoAccountsPayable]:
        query = db.query(SiigoAccountsPayable).order_by(
            SiigoAccountsPayable.created_at.desc(),
            SiigoAccountsPayable.due_date.desc(),
        )
        return apply_pagination(query, limit, offset).all()


accounts_payable = AccountsPayable()
