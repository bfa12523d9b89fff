# app/api/v1/endpoints/logistics/transactions.py
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query

from app.api.dependencies import get_delivery_service
from app.models.shared.enums import TransactionStatus, TransactionType
from app.schemas.logistics.delivery_schema import TransactionFilters, TransactionResponse
from app.services.logistics.delivery_service import DeliveryService

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/", response_model=List[TransactionResponse])
async def get_transactions(
    type: Optional[TransactionType] = Query(None, description="Filter by transaction type"),
    status_filter: Optional[TransactionStatus] = Query(None, alias="status", description="Filter by transaction status"),
    search: Optional[str] = Query(None, description="Search by transaction hash, delivery id or tracking number"),
    delivery_service: DeliveryService = Depends(get_delivery_service)
):
    """Transaction log, newest first"""
    try:
        filters = TransactionFilters(type=type, status=status_filter, search_text=search)
        return await delivery_service.list_transactions(filters)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting transactions: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve transactions"
        )
