from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backoffice.api.deps import get_client_info, get_db
from backoffice.schemas.common import ListResponse
from backoffice.schemas.siigo import (
    AccountsPayableRead,
    ApprovedGeneratedSummary,
    ApprovePaymentsRequest,
    ApprovePaymentsResult,
    CancelPortfolioRequest,
    GeneratedRequestDetail,
    GeneratedRequestRead,
    GeneratedRequestSummary,
    LoadAllResult,
    MarkPaidRequest,
    MarkPaidResult,
    PaymentValueUpdate,
    RemotePage,
    SavePageRequest,
    SavePageResult,
)
from backoffice.services.accounts_payable import accounts_payable
from backoffice.services.response import list_response
from backoffice.services.siigo.accounts_payable_import import accounts_payable_import

router = APIRouter(prefix="/accounts-payable", tags=["accounts-payable"])


@router.get("", response_model=RemotePage)
def fetch_remote_page(
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return accounts_payable.fetch_remote_page(db, page, page_size)


@router.post("", response_model=SavePageResult)
def save_page(
    payload: SavePageRequest,
    client_info: dict = Depends(get_client_info),
    db: Session = Depends(get_db),
):
    return accounts_payable_import.save_single_page(
        db,
        payload.results,
        payload.pagination,
        user_agent=client_info["user_agent"],
        ip_address=client_info["ip_address"],
    )


@router.post("/load-all", response_model=LoadAllResult)
def load_all(
    client_info: dict = Depends(get_client_info),
    db: Session = Depends(get_db),
):
    result = accounts_payable_import.load_all(
        db,
        user_agent=client_info["user_agent"],
        ip_address=client_info["ip_address"],
    )
    return result.as_dict()


@router.get("/generated", response_model=ListResponse[GeneratedRequestSummary])
def list_generated(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return list_response(accounts_payable.list_generated(db, limit, offset), limit, offset)


@router.get("/generated/{generated_request_id}", response_model=GeneratedRequestDetail)
def get_generated(generated_request_id: str, db: Session = Depends(get_db)):
    return accounts_payable.get_generated(db, generated_request_id)


@router.get("/approved", response_model=list[AccountsPayableRead])
def list_approved(
    generated_request_id: str | None = None,
    paid: bool | None = None,
    db: Session = Depends(get_db),
):
    return accounts_payable.list_approved(db, generated_request_id, paid)


@router.get("/by-date", response_model=list[AccountsPayableRead])
def list_by_date(
    on_date: date = Query(alias="date"),
    generated_request_id: str | None = None,
    db: Session = Depends(get_db),
):
    return accounts_payable.list_by_date(db, on_date, generated_request_id)


@router.get("/approved-generated", response_model=list[ApprovedGeneratedSummary])
def list_approved_generated(db: Session = Depends(get_db)):
    return accounts_payable.list_approved_generated(db)


@router.get("/all-records", response_model=ListResponse[AccountsPayableRead])
def list_all_records(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return list_response(accounts_payable.list_all(db, limit, offset), limit, offset)


@router.post("/approve-payments", response_model=ApprovePaymentsResult)
def approve_payments(payload: ApprovePaymentsRequest, db: Session = Depends(get_db)):
    return accounts_payable.approve_payments(db, payload.generated_request_id)


@router.post("/mark-paid", response_model=MarkPaidResult)
def mark_paid(payload: MarkPaidRequest, db: Session = Depends(get_db)):
    return accounts_payable.mark_paid(db, payload.ids)


@router.post("/cancel-portfolio", response_model=GeneratedRequestRead)
def cancel_portfolio(payload: CancelPortfolioRequest, db: Session = Depends(get_db)):
    return accounts_payable.cancel_portfolio(db, payload.generated_request_id)


@router.patch("/{record_id}", response_model=AccountsPayableRead)
def set_payment_value(record_id: str, payload: PaymentValueUpdate, db: Session = Depends(get_db)):
    return accounts_payable.set_payment_value(db, record_id, payload.payment_value)
