from __future__ import annotations

import datetime as dt
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.app.api.deps import rate_limit_writes
from backend.app.core.database import get_db
from backend.app.schemas.common import DataResponse, MessageResponse
from backend.app.schemas.receivable import PaymentCreate, PaymentOut, PaymentUpdate
from backend.app.services import payments as payment_service

router = APIRouter()


@router.get("/", response_model=DataResponse[list[PaymentOut]])
def list_payments(
    receivable_id: UUID | None = Query(None),
    customer: str | None = Query(None, description="Customer name contains"),
    payment_type: str | None = Query(None),
    date_from: dt.date | None = Query(None),
    date_to: dt.date | None = Query(None),
    db: Session = Depends(get_db),
) -> dict:
    rows = payment_service.list_payments(
        db,
        receivable_id=receivable_id,
        customer=customer,
        payment_type=payment_type,
        date_from=date_from,
        date_to=date_to,
    )
    return {"data": rows}


@router.get("/types", response_model=DataResponse[list[str]])
def payment_types(db: Session = Depends(get_db)) -> dict:
    return {"data": payment_service.payment_types(db)}


@router.post(
    "/",
    response_model=DataResponse[PaymentOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit_writes)],
)
def create_payment(payload: PaymentCreate, db: Session = Depends(get_db)) -> dict:
    try:
        payment = payment_service.create_payment(db, payload)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"data": payment}


@router.get("/{payment_id}", response_model=DataResponse[PaymentOut])
def get_payment(payment_id: UUID, db: Session = Depends(get_db)) -> dict:
    try:
        return {"data": payment_service.get_payment(db, payment_id)}
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put(
    "/{payment_id}",
    response_model=DataResponse[PaymentOut],
    dependencies=[Depends(rate_limit_writes)],
)
def update_payment(
    payment_id: UUID,
    payload: PaymentUpdate,
    db: Session = Depends(get_db),
) -> dict:
    try:
        payment = payment_service.update_payment(db, payment_id, payload)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"data": payment}


@router.delete(
    "/{payment_id}",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit_writes)],
)
def delete_payment(payment_id: UUID, db: Session = Depends(get_db)) -> dict:
    try:
        payment_service.delete_payment(db, payment_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"message": "Payment deleted successfully"}
