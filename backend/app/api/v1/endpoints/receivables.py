from __future__ import annotations

import datetime as dt
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.app.api.deps import rate_limit_writes
from backend.app.core.database import get_db
from backend.app.models.receivable import Receivable
from backend.app.schemas.common import DataResponse, MessageResponse
from backend.app.schemas.receivable import (
    ReceivableCreate,
    ReceivableOut,
    ReceivableUpdate,
)
from backend.app.schemas.summary import ReceivableDetailOut
from backend.app.services import receivables as receivable_service
from backend.app.services.balances import PaymentStatus

router = APIRouter()


@router.get("/", response_model=DataResponse[list[ReceivableOut]])
def list_receivables(
    customer: str | None = Query(None, description="Exact customer name"),
    search: str | None = Query(None, description="Customer name contains"),
    city: str | None = Query(None),
    date_from: dt.date | None = Query(None),
    date_to: dt.date | None = Query(None),
    status_: PaymentStatus | None = Query(None, alias="status"),
    db: Session = Depends(get_db),
) -> dict:
    rows = receivable_service.list_receivables(
        db,
        customer=customer,
        search=search,
        city=city,
        date_from=date_from,
        date_to=date_to,
        status=status_,
    )
    return {"data": rows}


@router.post(
    "/",
    response_model=DataResponse[ReceivableOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit_writes)],
)
def create_receivable(
    payload: ReceivableCreate,
    db: Session = Depends(get_db),
) -> dict:
    return {"data": receivable_service.create_receivable(db, payload)}


@router.get("/{receivable_id}", response_model=DataResponse[ReceivableOut])
def get_receivable(receivable_id: UUID, db: Session = Depends(get_db)) -> dict:
    return {"data": _get_or_404(db, receivable_id)}


@router.get("/{receivable_id}/balance", response_model=DataResponse[ReceivableDetailOut])
def receivable_balance(receivable_id: UUID, db: Session = Depends(get_db)) -> dict:
    try:
        balance = receivable_service.get_receivable_balance(db, receivable_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    payments = sorted(
        balance.receivable.payments, key=lambda p: p.payment_date, reverse=True
    )
    return {
        "data": {
            "receivable": balance.receivable,
            "paid_amount": balance.paid_amount,
            "remaining": balance.remaining,
            "status": balance.status,
            "payments": payments,
        }
    }


@router.put(
    "/{receivable_id}",
    response_model=DataResponse[ReceivableOut],
    dependencies=[Depends(rate_limit_writes)],
)
def update_receivable(
    receivable_id: UUID,
    payload: ReceivableUpdate,
    db: Session = Depends(get_db),
) -> dict:
    try:
        receivable = receivable_service.update_receivable(db, receivable_id, payload)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"data": receivable}


@router.delete(
    "/{receivable_id}",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit_writes)],
)
def delete_receivable(receivable_id: UUID, db: Session = Depends(get_db)) -> dict:
    try:
        receivable_service.delete_receivable(db, receivable_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"message": "Receivable deleted successfully"}


def _get_or_404(db: Session, receivable_id: UUID) -> Receivable:
    try:
        return receivable_service.get_receivable(db, receivable_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
