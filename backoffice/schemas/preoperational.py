from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PreoperationalItemBase(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class PreoperationalItemCreate(PreoperationalItemBase):
    pass


class PreoperationalItemUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=160)
    is_active: bool | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str | None) -> str | None:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class PreoperationalItemRead(PreoperationalItemBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime


class InspectionDetailCreate(BaseModel):
    item_id: int
    passed: bool
    observations: str | None = None
    photo_url: str | None = Field(default=None, max_length=500)


class InspectionItemSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class InspectionDetailRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    item_id: int
    passed: bool
    observations: str | None = None
    photo_url: str | None = None
    item: InspectionItemSummary | None = None


class PreoperationalInspectionCreate(BaseModel):
    inspection_date: date
    driver_id: UUID
    vehicle_id: UUID
    initial_mileage: Decimal | None = Field(default=None, ge=0)
    final_mileage: Decimal | None = Field(default=None, ge=0)
    details: list[InspectionDetailCreate] = []


class InspectionDriverSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    identification: str


class InspectionVehicleSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    plate: str
    brand: str
    model: str


class PreoperationalInspectionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    inspection_date: date
    driver_id: UUID
    vehicle_id: UUID
    initial_mileage: Decimal | None = None
    final_mileage: Decimal | None = None
    driver: InspectionDriverSummary | None = None
    vehicle: InspectionVehicleSummary | None = None
    details: list[InspectionDetailRead] = []
    created_at: datetime
    updated_at: datetime
