from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class FuelPurchaseBase(BaseModel):
    purchase_date: date
    vehicle_id: UUID
    quantity: Decimal = Field(gt=0)
    total: Decimal = Field(gt=0)
    provider: str = Field(min_length=1, max_length=120)
    receipt: str | None = Field(default=None, max_length=60)
    notes: str | None = None


class FuelPurchaseCreate(FuelPurchaseBase):
    pass


class FuelPurchaseUpdate(BaseModel):
    purchase_date: date | None = None
    vehicle_id: UUID | None = None
    quantity: Decimal | None = Field(default=None, gt=0)
    total: Decimal | None = Field(default=None, gt=0)
    provider: str | None = Field(default=None, min_length=1, max_length=120)
    receipt: str | None = Field(default=None, max_length=60)
    notes: str | None = None
    state: bool | None = None


class FuelVehicleSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    plate: str
    brand: str
    model: str


class FuelPurchaseRead(FuelPurchaseBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    state: bool
    vehicle: FuelVehicleSummary | None = None
    created_at: datetime
    updated_at: datetime


class FuelPurchaseBulkImport(BaseModel):
    records: list[FuelPurchaseCreate] = Field(min_length=1)


class FuelPurchaseBulkResult(BaseModel):
    total: int
    migrated: int
    errors: int
    details: list[str]


class FuelMigrationResult(BaseModel):
    id: UUID
    receipt: str | None = None
    success: bool
    error: str | None = None


class FuelMigrationSummary(BaseModel):
    total: int
    successful: int
    failed: int
    results: list[FuelMigrationResult]
