from fastapi import APIRouter
from app.api.v1.endpoints.auth import login, register
from app.api.v1.endpoints.logistics import chain, deliveries, transactions

api_router = APIRouter()

# Authentication routes
api_router.include_router(login.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(register.router, prefix="/auth", tags=["Authentication"])

# Delivery tracking routes
api_router.include_router(deliveries.router, prefix="/deliveries", tags=["Deliveries"])
api_router.include_router(transactions.router, prefix="/transactions", tags=["Transactions"])
api_router.include_router(chain.router, prefix="/chain", tags=["Chain"])
