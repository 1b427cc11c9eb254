from fastapi import APIRouter
from app.api.banks.routes import banks_router
from app.api.booking_ledger.routes import booking_ledger_router
from app.api.health.routes import health_router
api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(booking_ledger_router, prefix="/booking-ledger", tags=["booking-ledger"])
api_router.include_router(banks_router, prefix="/bank", tags=["bank"])
