import uuid
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from fastapi import HTTPException


def round_money(value: Decimal | int | float | None) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def coerce_uuid(value):
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=f"Invalid id: {value}") from exc


def apply_ordering(query, order_by, order_dir, allowed_columns):
    if order_by not in allowed_columns:
        allowed = ", ".join(sorted(allowed_columns))
        raise HTTPException(
            status_code=400,
            detail=f"Invalid order_by. Allowed: {allowed}",
        )
    column = allowed_columns[order_by]
    if order_dir == "desc":
        return query.order_by(column.desc())
    return query.order_by(column.asc())


def apply_pagination(query, limit, offset):
    return query.limit(limit).offset(offset)


def validate_enum(value, enum_cls, label):
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid {label}") from exc


def ensure_date_order(start: date | datetime | None, end: date | datetime | None):
    if start and end and start >= end:
        raise HTTPException(
            status_code=400, detail="Start date must be before end date"
        )
