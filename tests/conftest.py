import json
import os
import uuid
from datetime import date
from decimal import Decimal

import httpx
import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

load_dotenv(os.path.join(os.getcwd(), ".env"))

# Monkey-patch SQLAlchemy's UUID type for SQLite compatibility
# This must happen before any models are imported
from sqlalchemy.sql import sqltypes  # noqa: E402

_original_uuid_bind_processor = sqltypes.Uuid.bind_processor
_original_uuid_result_processor = sqltypes.Uuid.result_processor


def _sqlite_uuid_bind_processor(self, dialect):
    if dialect.name == "sqlite":
        def process(value):
            if value is not None:
                if isinstance(value, uuid.UUID):
                    return str(value)
                return str(uuid.UUID(value)) if value else None
            return None
        return process
    return _original_uuid_bind_processor(self, dialect)


def _sqlite_uuid_result_processor(self, dialect, coltype):
    if dialect.name == "sqlite":
        def process(value):
            if value is not None:
                if isinstance(value, uuid.UUID):
                    return value
                return uuid.UUID(value) if value else None
            return None
        return process
    return _original_uuid_result_processor(self, dialect, coltype)


sqltypes.Uuid.bind_processor = _sqlite_uuid_bind_processor
sqltypes.Uuid.result_processor = _sqlite_uuid_result_processor

from backoffice import models  # noqa: E402,F401
from backoffice.db import Base, get_db  # noqa: E402
from backoffice.models.fleet import Driver, Owner, Vehicle  # noqa: E402
from backoffice.models.logistics import Client, Material, Project, UnitOfMeasure  # noqa: E402
from backoffice.models.siigo import SiigoCredentials, SiigoPlatform  # noqa: E402
from backoffice.services.siigo.client import SiigoClient  # noqa: E402


@pytest.fixture(scope="session")
def engine():
    database_url = os.getenv("TEST_DATABASE_URL")
    if database_url:
        engine = create_engine(database_url)
    else:
        engine = create_engine(
            "sqlite+pysqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

        @event.listens_for(engine, "connect")
        def _sqlite_connect(dbapi_connection, _connection_record):
            # Let SQLAlchemy drive BEGIN so SAVEPOINT works under pysqlite
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _sqlite_begin(conn):
            conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    return engine


@pytest.fixture()
def db_session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autoflush=False,
        autocommit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture()
def client(db_session):
    from backoffice.main import app

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_db, None)


def _unique(prefix: str) -> str:
    return f"{prefix}{uuid.uuid4().hex[:8]}"


@pytest.fixture()
def customer(db_session):
    row = Client(identification=_unique("9"), name="Constructora Andina")
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def project(db_session, customer):
    row = Project(name="Vía Rionegro", client_id=customer.id, start_date=date(2026, 1, 1))
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def material(db_session):
    row = Material(name=_unique("Arena "), unit_of_measure=UnitOfMeasure.m3)
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def owner(db_session):
    row = Owner(document=str(uuid.uuid4().int)[:10], first_name="Luis", last_name="Gómez")
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def vehicle(db_session, owner):
    row = Vehicle(
        plate=_unique("TRK").upper()[:8],
        brand="Kenworth",
        model="T800",
        year=2020,
        type="Volqueta",
        fuel_type="Diesel",
        capacity_m3=Decimal("14"),
        owner_id=owner.id,
    )
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def driver(db_session):
    row = Driver(name="Carlos Pérez", identification=_unique("1"), license=_unique("L"))
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def siigo_credentials_row(db_session):
    row = SiigoCredentials(
        email="api@tyvg.com",
        access_key="secret-key",
        platform=SiigoPlatform.sandbox,
        is_active=True,
    )
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


class FakeSiigo:
    """In-memory Siigo API served through ``httpx.MockTransport``."""

    def __init__(self, expires_in: int = 86400):
        self.expires_in = expires_in
        self.auth_calls = 0
        self.requests: list[httpx.Request] = []
        self.warehouses: list[dict] = []
        self.cost_centers: list[dict] = []
        self.accounts_payable: list[dict] = []
        self.journals: list[dict] = []
        self.fail_paths: dict[str, int] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/auth":
            self.auth_calls += 1
            return httpx.Response(
                200,
                json={"access_token": f"token-{self.auth_calls}", "expires_in": self.expires_in},
            )
        if path in self.fail_paths:
            return httpx.Response(self.fail_paths[path], json={"message": "boom"})
        if path == "/v1/warehouses":
            return httpx.Response(200, json=self.warehouses)
        if path == "/v1/cost-centers":
            return httpx.Response(200, json=self.cost_centers)
        if path == "/v1/accounts-payable":
            page = int(request.url.params.get("page", 1))
            page_size = int(request.url.params.get("page_size", 100))
            start = (page - 1) * page_size
            return httpx.Response(
                200,
                json={
                    "pagination": {
                        "page": page,
                        "page_size": page_size,
                        "total_results": len(self.accounts_payable),
                    },
                    "results": self.accounts_payable[start : start + page_size],
                },
            )
        if path == "/v1/journals" and request.method == "POST":
            self.journals.append(json.loads(request.content))
            return httpx.Response(201, json={"id": f"journal-{len(self.journals)}"})
        return httpx.Response(404, json={"message": "not found"})


@pytest.fixture()
def fake_siigo():
    return FakeSiigo()


@pytest.fixture()
def siigo_test_client(fake_siigo):
    client = SiigoClient(
        "https://siigo.test",
        timeout=5,
        transport=httpx.MockTransport(fake_siigo.handler),
    )
    try:
        yield client
    finally:
        client.close()


@pytest.fixture()
def make_siigo_account():
    def _make(consecutive: int, balance: str = "100000", provider: str = "Proveedor SAS") -> dict:
        return {
            "due": {
                "prefix": "FC",
                "consecutive": consecutive,
                "quote": 1,
                "date": "2026-03-15",
                "balance": balance,
            },
            "provider": {"identification": "900123456", "branch_office": 0, "name": provider},
            "cost_center": {"code": 518, "name": "ADMINISTRACION"},
            "currency": {"code": "COP", "balance": balance},
        }

    return _make
