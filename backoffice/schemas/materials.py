from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from backoffice.models.logistics import MaterialType, UnitOfMeasure


class MaterialBase(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    description: str | None = None
    type: MaterialType = MaterialType.non_stocked
    unit_of_measure: UnitOfMeasure = UnitOfMeasure.m3
    is_active: bool = True


class MaterialCreate(MaterialBase):
    pass


class MaterialUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=160)
    description: str | None = None
    type: MaterialType | None = None
    unit_of_measure: UnitOfMeasure | None = None
    is_active: bool | None = None


class MaterialRead(MaterialBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
    updated_at: datetime


class ProjectMaterialPriceBase(BaseModel):
    project_id: UUID
    material_id: UUID
    sale_price: Decimal = Field(gt=0)
    outsourced_price: Decimal = Field(gt=0)
    start_date: date
    end_date: date | None = None
    is_active: bool = True


class ProjectMaterialPriceCreate(ProjectMaterialPriceBase):
    pass


class ProjectMaterialPriceUpdate(BaseModel):
    sale_price: Decimal | None = Field(default=None, gt=0)
    outsourced_price: Decimal | None = Field(default=None, gt=0)
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool | None = None


class PriceProjectSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class PriceMaterialSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    unit_of_measure: UnitOfMeasure


class ProjectMaterialPriceRead(ProjectMaterialPriceBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project: PriceProjectSummary | None = None
    material: PriceMaterialSummary | None = None
    created_at: datetime
    updated_at: datetime
