from decimal import Decimal

import pytest
from celery.exceptions import SoftTimeLimitExceeded

from backoffice.models.siigo import (
    ImportStatus,
    SiigoAccountsPayable,
    SiigoAccountsPayableGenerated,
)
from backoffice.services.siigo import accounts_payable_import
from backoffice.services.siigo.accounts_payable_import import (
    AccountsPayableImport,
    final_status,
    record_values,
)
from backoffice.services.siigo.client import SiigoAPIError


class _FlakyClient:
    """Delegates to a real client but fails the listed pages."""

    def __init__(self, client, failing_pages, error=None):
        self.client = client
        self.failing_pages = set(failing_pages)
        self.error = error or SiigoAPIError("Siigo API error (500): boom", status_code=500)

    def get_accounts_payable(self, db, page=1, page_size=None):
        if page in self.failing_pages:
            raise self.error
        return self.client.get_accounts_payable(db, page=page, page_size=page_size)


@pytest.mark.parametrize(
    ("processed", "errors", "expected"),
    [
        (5, 0, ImportStatus.success),
        (0, 0, ImportStatus.success),
        (3, 2, ImportStatus.partial),
        (0, 4, ImportStatus.error),
    ],
)
def test_final_status(processed, errors, expected):
    assert final_status(processed, errors) == expected


def test_record_values_flattens_siigo_entry(make_siigo_account):
    values = record_values(make_siigo_account(42, balance="1500.50"))

    assert values["consecutive"] == 42
    assert values["balance"] == Decimal("1500.50")
    assert values["provider_identification"] == "900123456"
    assert values["cost_center_code"] == 518
    assert values["due_date"].isoformat() == "2026-03-15"


def test_load_all_pages_with_delay(
    db_session, siigo_credentials_row, siigo_test_client, fake_siigo, make_siigo_account
):
    fake_siigo.accounts_payable = [make_siigo_account(n) for n in range(1, 6)]
    sleeps = []

    result = AccountsPayableImport(siigo_test_client).load_all(
        db_session, page_delay=0.25, page_size=2, user_agent="pytest", sleep=sleeps.append
    )

    assert result.total_pages == 3
    assert result.total_results == 5
    assert result.total_processed == 5
    assert result.total_errors == 0
    assert result.status == ImportStatus.success
    assert sleeps == [0.25, 0.25]

    generated = db_session.get(SiigoAccountsPayableGenerated, result.request_id)
    assert generated.status == ImportStatus.success
    assert generated.records_processed == 5
    assert generated.user_agent == "pytest"
    assert len(generated.accounts_payable) == 5


def test_load_all_without_delay_never_sleeps(
    db_session, siigo_credentials_row, siigo_test_client, fake_siigo, make_siigo_account
):
    fake_siigo.accounts_payable = [make_siigo_account(n) for n in range(1, 4)]
    sleeps = []

    AccountsPayableImport(siigo_test_client).load_all(
        db_session, page_delay=0, page_size=1, sleep=sleeps.append
    )

    assert sleeps == []


def test_load_all_counts_failed_page_as_one_error(
    db_session, siigo_credentials_row, siigo_test_client, fake_siigo, make_siigo_account
):
    fake_siigo.accounts_payable = [make_siigo_account(n) for n in range(1, 5)]
    importer = AccountsPayableImport(_FlakyClient(siigo_test_client, failing_pages={2}))

    result = importer.load_all(db_session, page_delay=0, page_size=2)

    assert result.total_processed == 2
    assert result.total_errors == 1
    assert result.status == ImportStatus.partial
    assert len(result.page_errors) == 1
    assert result.page_errors[0].startswith("Page 2:")


def test_load_all_with_only_bad_records_is_error(
    db_session, siigo_credentials_row, siigo_test_client, fake_siigo, make_siigo_account
):
    bad = make_siigo_account(1)
    bad["due"]["balance"] = "not-a-number"
    fake_siigo.accounts_payable = [bad]

    result = AccountsPayableImport(siigo_test_client).load_all(db_session, page_delay=0)

    assert result.total_processed == 0
    assert result.total_errors == 1
    assert result.status == ImportStatus.error
    generated = db_session.get(SiigoAccountsPayableGenerated, result.request_id)
    assert generated.error_message == "1 records failed"


def test_load_all_with_no_results_succeeds(db_session, siigo_credentials_row, siigo_test_client):
    result = AccountsPayableImport(siigo_test_client).load_all(db_session, page_delay=0)

    assert result.total_pages == 0
    assert result.status == ImportStatus.success


def test_save_single_page_keeps_good_records(db_session, make_siigo_account):
    bad = make_siigo_account(2)
    bad["due"]["consecutive"] = "x"
    records = [make_siigo_account(1), bad, make_siigo_account(3)]

    outcome = AccountsPayableImport().save_single_page(
        db_session,
        records,
        {"page": 4, "page_size": 100, "total_results": 350},
        ip_address="10.0.0.1",
    )

    assert outcome["processed"] == 2
    assert outcome["failed"] == 1
    assert outcome["status"] == ImportStatus.partial
    generated = db_session.get(SiigoAccountsPayableGenerated, outcome["request_id"])
    assert generated.page == 4
    assert generated.total_results == 350
    assert generated.ip_address == "10.0.0.1"
    consecutives = sorted(
        row.consecutive
        for row in db_session.query(SiigoAccountsPayable).filter(
            SiigoAccountsPayable.generated_request_id == generated.id
        )
    )
    assert consecutives == [1, 3]


def _single_generated(db_session):
    return db_session.query(SiigoAccountsPayableGenerated).one()


def test_load_all_interrupted_mid_page_keeps_only_committed_pages(
    db_session, siigo_credentials_row, siigo_test_client, fake_siigo, make_siigo_account, monkeypatch
):
    fake_siigo.accounts_payable = [make_siigo_account(n) for n in range(1, 5)]
    calls = []

    def interrupt_on_fourth(account):
        calls.append(account)
        if len(calls) == 4:
            raise KeyboardInterrupt
        return record_values(account)

    monkeypatch.setattr(accounts_payable_import, "record_values", interrupt_on_fourth)

    with pytest.raises(KeyboardInterrupt):
        AccountsPayableImport(siigo_test_client).load_all(db_session, page_delay=0, page_size=2)

    generated = _single_generated(db_session)
    assert generated.status == ImportStatus.error
    assert generated.error_message == "Import aborted"
    assert generated.records_processed == 2
    saved = (
        db_session.query(SiigoAccountsPayable)
        .filter(SiigoAccountsPayable.generated_request_id == generated.id)
        .count()
    )
    assert saved == 2


def test_load_all_lets_soft_time_limit_through(
    db_session, siigo_credentials_row, siigo_test_client, fake_siigo, make_siigo_account
):
    fake_siigo.accounts_payable = [make_siigo_account(n) for n in range(1, 5)]
    importer = AccountsPayableImport(
        _FlakyClient(siigo_test_client, failing_pages={2}, error=SoftTimeLimitExceeded())
    )

    with pytest.raises(SoftTimeLimitExceeded):
        importer.load_all(db_session, page_delay=0, page_size=2)

    generated = _single_generated(db_session)
    assert generated.status == ImportStatus.error
    assert generated.error_message == "Import aborted"
    assert generated.records_processed == 2
