from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from backoffice.models.logistics import (
    TripMeasure,
    TripRequestPriority,
    TripRequestStatus,
    TripStatus,
    UnitOfMeasure,
)


class TripRequestMaterialCreate(BaseModel):
    material_id: UUID
    requested_quantity: Decimal = Field(gt=0)


class TripRequestMaterialRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    material_id: UUID
    requested_quantity: Decimal
    unit_of_measure: UnitOfMeasure


class TripRequestCreate(BaseModel):
    project_id: UUID
    priority: TripRequestPriority = TripRequestPriority.normal
    request_date: date | None = None
    observations: str | None = None
    materials: list[TripRequestMaterialCreate] = Field(min_length=1)


class TripRequestUpdate(BaseModel):
    priority: TripRequestPriority | None = None
    status: TripRequestStatus | None = None
    request_date: date | None = None
    observations: str | None = None
    materials: list[TripRequestMaterialCreate] | None = Field(default=None, min_length=1)


class TripRequestRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    client_id: UUID
    priority: TripRequestPriority
    status: TripRequestStatus
    request_date: date
    observations: str | None = None
    materials: list[TripRequestMaterialRead] = []
    created_at: datetime
    updated_at: datetime


class TripBase(BaseModel):
    material_id: UUID
    project_id: UUID
    driver_id: UUID
    vehicle_id: UUID
    trip_request_id: UUID | None = None
    trip_date: date
    incoming_receipt_number: str | None = Field(default=None, max_length=60)
    outcoming_receipt_number: str | None = Field(default=None, max_length=60)
    quantity: Decimal = Field(gt=0)
    measure: TripMeasure = TripMeasure.cubic_meters
    status: TripStatus = TripStatus.scheduled
    certified_weight: Decimal | None = Field(default=None, gt=0)
    observation: str | None = None


class TripCreate(TripBase):
    sale_price: Decimal | None = Field(default=None, ge=0)
    outsourced_price: Decimal | None = Field(default=None, ge=0)


class TripUpdate(BaseModel):
    driver_id: UUID | None = None
    vehicle_id: UUID | None = None
    trip_date: date | None = None
    incoming_receipt_number: str | None = Field(default=None, max_length=60)
    outcoming_receipt_number: str | None = Field(default=None, max_length=60)
    quantity: Decimal | None = Field(default=None, gt=0)
    measure: TripMeasure | None = None
    sale_price: Decimal | None = Field(default=None, ge=0)
    outsourced_price: Decimal | None = Field(default=None, ge=0)
    status: TripStatus | None = None
    certified_weight: Decimal | None = None
    observation: str | None = None


class TripRead(TripBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sale_price: Decimal
    outsourced_price: Decimal
    is_approved: bool
    created_at: datetime
    updated_at: datetime
