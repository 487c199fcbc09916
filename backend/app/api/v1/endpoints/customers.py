from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.database import get_db
from backend.app.schemas.common import DataResponse
from backend.app.schemas.summary import CustomerSummaryOut
from backend.app.services.balances import summarize_all_customers, summarize_customer
from backend.app.services.payments import list_payments
from backend.app.services.receivables import list_receivables

router = APIRouter()


@router.get("/", response_model=DataResponse[list[CustomerSummaryOut]])
def list_customer_summaries(db: Session = Depends(get_db)) -> dict:
    """One summary per distinct customer name, in first-seen order."""
    summaries = summarize_all_customers(list_receivables(db), list_payments(db))
    return {"data": [CustomerSummaryOut.model_validate(s) for s in summaries]}


@router.get("/{customer_name:path}", response_model=DataResponse[CustomerSummaryOut])
def get_customer_summary(customer_name: str, db: Session = Depends(get_db)) -> dict:
    summary = summarize_customer(customer_name, list_receivables(db), list_payments(db))
    if not summary.receivables:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return {"data": CustomerSummaryOut.model_validate(summary)}
