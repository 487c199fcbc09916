from fastapi import APIRouter

from backend.app.api.v1.endpoints import (
    cities,
    customers,
    payments,
    receivables,
    reports,
)

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(receivables.router, prefix="/receivables", tags=["receivables"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(cities.router, prefix="/cities", tags=["cities"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
