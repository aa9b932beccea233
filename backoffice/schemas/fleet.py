from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class OwnerBase(BaseModel):
    document: str = Field(min_length=1, max_length=20, pattern=r"^\d+$")
    first_name: str = Field(min_length=1, max_length=120)
    last_name: str = Field(min_length=1, max_length=120)
    is_active: bool = True


class OwnerCreate(OwnerBase):
    pass


class OwnerUpdate(BaseModel):
    document: str | None = Field(default=None, min_length=1, max_length=20, pattern=r"^\d+$")
    first_name: str | None = Field(default=None, min_length=1, max_length=120)
    last_name: str | None = Field(default=None, min_length=1, max_length=120)
    is_active: bool | None = None


class OwnerRead(OwnerBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
    updated_at: datetime


class VehicleBase(BaseModel):
    plate: str = Field(min_length=1, max_length=20)
    brand: str = Field(min_length=1, max_length=80)
    model: str = Field(min_length=1, max_length=80)
    year: int
    type: str = Field(min_length=1, max_length=60)
    status: str = Field(default="active", max_length=40)
    location: str | None = Field(default=None, max_length=160)
    odometer: int = Field(default=0, ge=0)
    fuel_type: str = Field(min_length=1, max_length=40)
    capacity_tons: Decimal | None = Field(default=None, ge=0)
    capacity_m3: Decimal | None = Field(default=None, ge=0)
    last_maintenance: date | None = None
    next_maintenance: date | None = None
    owner_id: UUID | None = None
    is_active: bool = True


class VehicleCreate(VehicleBase):
    pass


class VehicleUpdate(BaseModel):
    plate: str | None = Field(default=None, min_length=1, max_length=20)
    brand: str | None = Field(default=None, min_length=1, max_length=80)
    model: str | None = Field(default=None, min_length=1, max_length=80)
    year: int | None = None
    type: str | None = Field(default=None, min_length=1, max_length=60)
    status: str | None = Field(default=None, max_length=40)
    location: str | None = Field(default=None, max_length=160)
    odometer: int | None = Field(default=None, ge=0)
    fuel_type: str | None = Field(default=None, min_length=1, max_length=40)
    capacity_tons: Decimal | None = Field(default=None, ge=0)
    capacity_m3: Decimal | None = Field(default=None, ge=0)
    last_maintenance: date | None = None
    next_maintenance: date | None = None
    owner_id: UUID | None = None
    is_active: bool | None = None


class VehicleRead(VehicleBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner: OwnerRead | None = None
    created_at: datetime
    updated_at: datetime


class DriverBase(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    identification: str = Field(min_length=1, max_length=40)
    license: str = Field(min_length=1, max_length=40)
    phone: str | None = Field(default=None, max_length=40)
    email: str | None = Field(default=None, max_length=255)
    is_active: bool = True


class DriverCreate(DriverBase):
    pass


class DriverUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=160)
    identification: str | None = Field(default=None, min_length=1, max_length=40)
    license: str | None = Field(default=None, min_length=1, max_length=40)
    phone: str | None = Field(default=None, max_length=40)
    email: str | None = Field(default=None, max_length=255)
    is_active: bool | None = None


class DriverRead(DriverBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
    updated_at: datetime


class DriverVehicleCreate(BaseModel):
    driver_id: UUID
    vehicle_id: UUID


class DriverVehicleUpdate(BaseModel):
    is_active: bool


class AssignedVehicleSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    plate: str
    brand: str
    model: str


class AssignedDriverSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    identification: str


class DriverVehicleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    driver_id: UUID
    vehicle_id: UUID
    is_active: bool
    assigned_at: datetime
    unassigned_at: datetime | None = None
    driver: AssignedDriverSummary | None = None
    vehicle: AssignedVehicleSummary | None = None
