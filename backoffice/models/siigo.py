import enum
import uuid
from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.db import Base


class SiigoPlatform(enum.Enum):
    sandbox = "sandbox"
    production = "production"
    data = "data"


class ImportStatus(enum.Enum):
    processing = "processing"
    success = "success"
    partial = "partial"
    error = "error"


class GeneratedState(enum.Enum):
    generated = "generated"
    approved = "approved"
    cancelled = "cancelled"


class SiigoCredentials(Base):
    __tablename__ = "siigo_credentials"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    access_key: Mapped[str] = mapped_column(String(255), nullable=False)
    platform: Mapped[SiigoPlatform] = mapped_column(Enum(SiigoPlatform), default=SiigoPlatform.sandbox)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )


class SiigoWarehouse(Base):
    __tablename__ = "siigo_warehouses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    has_movements: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )


class SiigoCostCenter(Base):
    __tablename__ = "siigo_cost_centers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    code: Mapped[str] = mapped_column(String(40), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )


class SiigoAccountsPayableGenerated(Base):
    """One accounts-payable import run against Siigo."""

    __tablename__ = "siigo_accounts_payable_generated"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    request_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    endpoint: Mapped[str] = mapped_column(String(255), nullable=False)
    page: Mapped[int] = mapped_column(Integer, default=1)
    page_size: Mapped[int] = mapped_column(Integer, default=100)
    total_results: Mapped[int] = mapped_column(Integer, default=0)
    records_processed: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[ImportStatus] = mapped_column(Enum(ImportStatus), default=ImportStatus.processing)
    state: Mapped[GeneratedState] = mapped_column(Enum(GeneratedState), default=GeneratedState.generated)
    duration_ms: Mapped[int | None] = mapped_column(Integer)
    error_message: Mapped[str | None] = mapped_column(Text)
    user_agent: Mapped[str | None] = mapped_column(String(500))
    ip_address: Mapped[str | None] = mapped_column(String(64))
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    accounts_payable = relationship(
        "SiigoAccountsPayable",
        back_populates="generated_request",
        cascade="all, delete-orphan",
    )


class SiigoAccountsPayable(Base):
    __tablename__ = "siigo_accounts_payable"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    prefix: Mapped[str] = mapped_column(String(20), default="")
    consecutive: Mapped[int] = mapped_column(BigInteger, default=0)
    quote: Mapped[int] = mapped_column(Integer, default=0)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    balance: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"))
    provider_identification: Mapped[str] = mapped_column(String(40), default="")
    provider_branch_office: Mapped[int] = mapped_column(Integer, default=0)
    provider_name: Mapped[str] = mapped_column(String(255), default="")
    cost_center_code: Mapped[int] = mapped_column(Integer, default=0)
    cost_center_name: Mapped[str] = mapped_column(String(200), default="")
    currency_code: Mapped[str] = mapped_column(String(10), default="")
    currency_balance: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"))
    payment_value: Mapped[Decimal | None] = mapped_column(Numeric(18, 2))
    approved: Mapped[bool] = mapped_column(Boolean, default=False)
    paid: Mapped[bool] = mapped_column(Boolean, default=False)
    generated_request_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("siigo_accounts_payable_generated.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    generated_request = relationship("SiigoAccountsPayableGenerated", back_populates="accounts_payable")
