# app/api/v1/endpoints/logistics/deliveries.py
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Response

from app.api.dependencies import get_delivery_service
from app.core.exceptions import NotFoundError
from app.schemas.logistics.delivery_schema import (
    CreatedDeliveryResponse, DeliveryCreate, DeliveryStatusUpdate,
    DeliveryView, LocationCreate, TimelineStepResponse
)
from app.services.logistics.delivery_service import DeliveryService

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/recent", response_model=List[DeliveryView])
async def get_recent_deliveries(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Number of deliveries to return"),
    delivery_service: DeliveryService = Depends(get_delivery_service)
):
    """Most recently created deliveries, newest first"""
    try:
        return await delivery_service.get_recent(limit)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting recent deliveries: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve deliveries"
        )

@router.get("/track/{tracking_number}", response_model=DeliveryView)
async def track_delivery(
    tracking_number: str,
    delivery_service: DeliveryService = Depends(get_delivery_service)
):
    """Look up a delivery by tracking number (case-insensitive)"""
    delivery = await delivery_service.track_by_number(tracking_number)
    if delivery is None:
        raise NotFoundError(f"No delivery found with tracking number {tracking_number.strip()}")
    return delivery

@router.get("/{delivery_id}", response_model=DeliveryView)
async def get_delivery(
    delivery_id: int,
    delivery_service: DeliveryService = Depends(get_delivery_service)
):
    delivery = await delivery_service.get_delivery(delivery_id)
    if delivery is None:
        raise NotFoundError(f"Delivery {delivery_id} not found")
    return delivery

@router.get("/{delivery_id}/timeline", response_model=List[TimelineStepResponse])
async def get_delivery_timeline(
    delivery_id: int,
    delivery_service: DeliveryService = Depends(get_delivery_service)
):
    """Status steps with reached/current flags for the progress bar"""
    steps = await delivery_service.timeline(delivery_id)
    if steps is None:
        raise NotFoundError(f"Delivery {delivery_id} not found")
    return steps

@router.post("/", response_model=CreatedDeliveryResponse, status_code=status.HTTP_201_CREATED)
async def create_delivery(
    delivery_data: DeliveryCreate,
    delivery_service: DeliveryService = Depends(get_delivery_service)
):
    """Create a new delivery"""
    try:
        return await delivery_service.create_delivery(delivery_data)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating delivery: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create delivery"
        )

@router.patch("/{delivery_id}/status", status_code=status.HTTP_204_NO_CONTENT)
async def update_delivery_status(
    delivery_id: int,
    status_data: DeliveryStatusUpdate,
    delivery_service: DeliveryService = Depends(get_delivery_service)
):
    """Set the delivery status"""
    try:
        await delivery_service.set_status(delivery_id, status_data.status)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating delivery status: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update delivery status"
        )

@router.post("/{delivery_id}/locations", status_code=status.HTTP_204_NO_CONTENT)
async def add_delivery_location(
    delivery_id: int,
    location_data: LocationCreate,
    delivery_service: DeliveryService = Depends(get_delivery_service)
):
    """Record a new location for the delivery"""
    try:
        await delivery_service.add_location(delivery_id, location_data)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error adding delivery location: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add delivery location"
        )
