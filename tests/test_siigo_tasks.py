"""Tests for Siigo Celery tasks."""

from backoffice.services.siigo.accounts_payable_import import AccountsPayableImport
from backoffice.services.siigo.fuel_migration import FuelSiigoMigration
from backoffice.tasks import siigo as siigo_tasks


def test_task_names_and_limits():
    assert siigo_tasks.load_all_accounts_payable.name == "backoffice.tasks.siigo.load_all_accounts_payable"
    assert siigo_tasks.load_all_accounts_payable.time_limit == 3600
    assert siigo_tasks.migrate_fuel_purchases.name == "backoffice.tasks.siigo.migrate_fuel_purchases"


def test_load_all_task_returns_json_summary(
    db_session, siigo_credentials_row, siigo_test_client, fake_siigo, make_siigo_account, monkeypatch
):
    fake_siigo.accounts_payable = [make_siigo_account(1), make_siigo_account(2)]
    monkeypatch.setattr(siigo_tasks, "SessionLocal", lambda: db_session)
    monkeypatch.setattr(siigo_tasks, "accounts_payable_import", AccountsPayableImport(siigo_test_client))

    result = siigo_tasks.load_all_accounts_payable(page_delay=0)

    assert result["status"] == "success"
    assert result["total_processed"] == 2
    assert isinstance(result["request_id"], str)


def test_fuel_task_with_nothing_pending_is_skipped(db_session, siigo_test_client, monkeypatch):
    monkeypatch.setattr(siigo_tasks, "SessionLocal", lambda: db_session)
    monkeypatch.setattr(siigo_tasks, "fuel_siigo_migration", FuelSiigoMigration(siigo_test_client))

    assert siigo_tasks.migrate_fuel_purchases() == {
        "total": 0,
        "successful": 0,
        "failed": 0,
        "results": [],
    }
