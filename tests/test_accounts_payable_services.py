from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

import pytest
from fastapi import HTTPException

from backoffice.models.siigo import (
    GeneratedState,
    ImportStatus,
    SiigoAccountsPayable,
    SiigoAccountsPayableGenerated,
)
from backoffice.services import accounts_payable as accounts_payable_service


@pytest.fixture()
def portfolio(db_session):
    generated = SiigoAccountsPayableGenerated(
        endpoint="https://api.siigo.com/v1/accounts-payable",
        total_results=3,
        records_processed=3,
        status=ImportStatus.success,
    )
    generated.accounts_payable = [
        SiigoAccountsPayable(
            prefix="FC",
            consecutive=consecutive,
            due_date=date(2026, 3, consecutive),
            balance=Decimal("100000"),
            provider_name=f"Proveedor {consecutive}",
        )
        for consecutive in (1, 2, 3)
    ]
    db_session.add(generated)
    db_session.commit()
    db_session.refresh(generated)
    return generated


def _records(portfolio):
    return sorted(portfolio.accounts_payable, key=lambda row: row.consecutive)


def test_payment_value_cannot_exceed_balance(db_session, portfolio):
    record = _records(portfolio)[0]

    with pytest.raises(HTTPException) as exc:
        accounts_payable_service.accounts_payable.set_payment_value(
            db_session, str(record.id), Decimal("100000.01")
        )

    assert exc.value.status_code == 400
    assert "100000.01" in exc.value.detail


def test_zero_payment_value_clears_it(db_session, portfolio):
    record = _records(portfolio)[0]
    accounts_payable_service.accounts_payable.set_payment_value(db_session, str(record.id), Decimal("500"))

    updated = accounts_payable_service.accounts_payable.set_payment_value(
        db_session, str(record.id), Decimal("0")
    )

    assert updated.payment_value is None


def test_approve_requires_payment_values(db_session, portfolio):
    with pytest.raises(HTTPException) as exc:
        accounts_payable_service.accounts_payable.approve_payments(db_session, str(portfolio.id))

    assert exc.value.status_code == 400


def test_approve_marks_only_records_with_payment(db_session, portfolio):
    first, second, third = _records(portfolio)
    accounts_payable_service.accounts_payable.set_payment_value(db_session, str(first.id), Decimal("40000"))
    accounts_payable_service.accounts_payable.set_payment_value(db_session, str(third.id), Decimal("100000"))

    result = accounts_payable_service.accounts_payable.approve_payments(db_session, str(portfolio.id))

    assert result == {"approved_count": 2, "total_records": 3}
    db_session.refresh(portfolio)
    assert portfolio.state == GeneratedState.approved
    assert portfolio.approved_at is not None
    assert [row.approved for row in _records(portfolio)] == [True, False, True]


def test_mark_paid_and_reject_double_payment(db_session, portfolio):
    first, second, _ = _records(portfolio)
    for record in (first, second):
        accounts_payable_service.accounts_payable.set_payment_value(db_session, str(record.id), Decimal("25000"))
    accounts_payable_service.accounts_payable.approve_payments(db_session, str(portfolio.id))

    result = accounts_payable_service.accounts_payable.mark_paid(db_session, [str(first.id), str(second.id)])

    assert result["count"] == 2
    assert result["total_amount"] == Decimal("50000.00")
    with pytest.raises(HTTPException) as exc:
        accounts_payable_service.accounts_payable.mark_paid(db_session, [str(first.id)])
    assert exc.value.status_code == 400
    assert "already marked as paid" in exc.value.detail


def test_mark_paid_rejects_unapproved_records(db_session, portfolio):
    record = _records(portfolio)[0]

    with pytest.raises(HTTPException) as exc:
        accounts_payable_service.accounts_payable.mark_paid(db_session, [str(record.id)])

    assert exc.value.status_code == 400


def test_mark_paid_requires_ids(db_session):
    with pytest.raises(HTTPException) as exc:
        accounts_payable_service.accounts_payable.mark_paid(db_session, [])

    assert exc.value.status_code == 400


def test_cancel_portfolio(db_session, portfolio):
    cancelled = accounts_payable_service.accounts_payable.cancel_portfolio(db_session, str(portfolio.id))

    assert cancelled.state == GeneratedState.cancelled
    with pytest.raises(HTTPException) as exc:
        accounts_payable_service.accounts_payable.cancel_portfolio(db_session, str(portfolio.id))
    assert exc.value.status_code == 400


def test_approved_portfolio_cannot_be_cancelled(db_session, portfolio):
    record = _records(portfolio)[0]
    accounts_payable_service.accounts_payable.set_payment_value(db_session, str(record.id), Decimal("1000"))
    accounts_payable_service.accounts_payable.approve_payments(db_session, str(portfolio.id))

    with pytest.raises(HTTPException) as exc:
        accounts_payable_service.accounts_payable.cancel_portfolio(db_session, str(portfolio.id))

    assert exc.value.status_code == 400


def test_list_by_date_uses_approval_day(db_session, portfolio):
    record = _records(portfolio)[1]
    accounts_payable_service.accounts_payable.set_payment_value(db_session, str(record.id), Decimal("1000"))
    accounts_payable_service.accounts_payable.approve_payments(db_session, str(portfolio.id))
    today = datetime.now(UTC).date()

    found = accounts_payable_service.accounts_payable.list_by_date(db_session, today)
    missing = accounts_payable_service.accounts_payable.list_by_date(db_session, today - timedelta(days=1))

    assert [row.id for row in found] == [record.id]
    assert missing == []


def test_list_generated_includes_record_counts(db_session, portfolio):
    items = accounts_payable_service.accounts_payable.list_generated(db_session, 50, 0)

    assert len(items) == 1
    assert items[0]["id"] == portfolio.id
    assert items[0]["records_count"] == 3


def test_list_approved_generated_totals(db_session, portfolio):
    first, second, _ = _records(portfolio)
    accounts_payable_service.accounts_payable.set_payment_value(db_session, str(first.id), Decimal("1000.50"))
    accounts_payable_service.accounts_payable.set_payment_value(db_session, str(second.id), Decimal("2000"))
    accounts_payable_service.accounts_payable.approve_payments(db_session, str(portfolio.id))

    items = accounts_payable_service.accounts_payable.list_approved_generated(db_session)

    assert items[0]["approved_count"] == 2
    assert items[0]["total_approved_value"] == Decimal("3000.50")


def test_get_generated_unknown_id_is_not_found(db_session):
    import uuid

    with pytest.raises(HTTPException) as exc:
        accounts_payable_service.accounts_payable.get_generated(db_session, str(uuid.uuid4()))

    assert exc.value.status_code == 404
