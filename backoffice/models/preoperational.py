import uuid
from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.db import Base


class PreoperationalItem(Base):
    __tablename__ = "preoperational_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(160), unique=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )


class PreoperationalInspection(Base):
    __tablename__ = "preoperational_inspections"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    inspection_date: Mapped[date] = mapped_column(Date, nullable=False)
    driver_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("drivers.id"), nullable=False)
    vehicle_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("vehicles.id"), nullable=False)
    initial_mileage: Mapped[Decimal | None] = mapped_column(Numeric(12, 1))
    final_mileage: Mapped[Decimal | None] = mapped_column(Numeric(12, 1))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    driver = relationship("Driver")
    vehicle = relationship("Vehicle")
    details = relationship(
        "PreoperationalInspectionDetail",
        back_populates="inspection",
        cascade="all, delete-orphan",
        order_by="PreoperationalInspectionDetail.item_id",
    )


class PreoperationalInspectionDetail(Base):
    __tablename__ = "preoperational_inspection_details"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    inspection_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("preoperational_inspections.id", ondelete="CASCADE"),
        nullable=False,
    )
    item_id: Mapped[int] = mapped_column(Integer, ForeignKey("preoperational_items.id"), nullable=False)
    passed: Mapped[bool] = mapped_column(Boolean, default=True)
    observations: Mapped[str | None] = mapped_column(Text)
    photo_url: Mapped[str | None] = mapped_column(String(500))

    inspection = relationship("PreoperationalInspection", back_populates="details")
    item = relationship("PreoperationalItem")
