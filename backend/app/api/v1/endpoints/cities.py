from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.database import get_db
from backend.app.schemas.common import DataResponse
from backend.app.schemas.summary import CitySummaryOut
from backend.app.services.balances import summarize_all_cities, summarize_city
from backend.app.services.payments import list_payments
from backend.app.services.receivables import list_receivables

router = APIRouter()


@router.get("/", response_model=DataResponse[list[CitySummaryOut]])
def list_city_summaries(db: Session = Depends(get_db)) -> dict:
    summaries = summarize_all_cities(list_receivables(db), list_payments(db))
    return {"data": [CitySummaryOut.model_validate(s) for s in summaries]}


@router.get("/{city:path}", response_model=DataResponse[CitySummaryOut])
def get_city_summary(city: str, db: Session = Depends(get_db)) -> dict:
    summary = summarize_city(city, list_receivables(db), list_payments(db))
    if not summary.receivables:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="City not found")
    return {"data": CitySummaryOut.model_validate(summary)}
