from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from backoffice.models.siigo import GeneratedState, ImportStatus, SiigoPlatform


class SiigoCredentialsSave(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    access_key: str = Field(min_length=1, max_length=255)
    platform: SiigoPlatform = SiigoPlatform.sandbox


class SiigoCredentialsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    platform: SiigoPlatform
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ConnectionTestResult(BaseModel):
    success: bool
    status: int | None = None
    message: str


class SiigoWarehouseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    active: bool
    has_movements: bool
    updated_at: datetime


class SiigoCostCenterRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    active: bool
    updated_at: datetime


class CatalogStatsRead(BaseModel):
    total: int
    active: int
    inactive: int


class SiigoWarehouseList(BaseModel):
    items: list[SiigoWarehouseRead]
    stats: CatalogStatsRead


class SiigoCostCenterList(BaseModel):
    items: list[SiigoCostCenterRead]
    stats: CatalogStatsRead


class AccountsPayableRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    prefix: str
    consecutive: int
    quote: int
    due_date: date
    balance: Decimal
    provider_identification: str
    provider_branch_office: int
    provider_name: str
    cost_center_code: int
    cost_center_name: str
    currency_code: str
    currency_balance: Decimal
    payment_value: Decimal | None = None
    approved: bool
    paid: bool
    generated_request_id: UUID
    created_at: datetime
    updated_at: datetime


class GeneratedRequestRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    request_date: datetime
    endpoint: str
    page: int
    page_size: int
    total_results: int
    records_processed: int
    status: ImportStatus
    state: GeneratedState
    duration_ms: int | None = None
    error_message: str | None = None
    approved_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class GeneratedRequestSummary(GeneratedRequestRead):
    records_count: int = 0


class GeneratedRequestDetail(GeneratedRequestRead):
    accounts_payable: list[AccountsPayableRead] = []


class ApprovedGeneratedSummary(GeneratedRequestRead):
    approved_count: int = 0
    total_approved_value: Decimal = Decimal("0")


class PaymentValueUpdate(BaseModel):
    payment_value: Decimal | None = Field(default=None, ge=0)


class ApprovePaymentsRequest(BaseModel):
    generated_request_id: UUID


class ApprovePaymentsResult(BaseModel):
    approved_count: int
    total_records: int


class MarkPaidRequest(BaseModel):
    ids: list[UUID]


class MarkPaidResult(BaseModel):
    count: int
    total_amount: Decimal
    records: list[AccountsPayableRead]


class CancelPortfolioRequest(BaseModel):
    generated_request_id: UUID


class LoadAllResult(BaseModel):
    request_id: UUID
    total_pages: int
    total_results: int
    total_processed: int
    total_errors: int
    duration_ms: int
    status: ImportStatus


class SavePageRequest(BaseModel):
    results: list[dict]
    pagination: dict = {}


class SavePageResult(BaseModel):
    request_id: UUID
    processed: int
    failed: int
    status: ImportStatus


class RemotePage(BaseModel):
    results: list[dict]
    pagination: dict
