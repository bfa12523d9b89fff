from pydantic import BaseModel, ConfigDict
from typing import Any, Optional, Tuple
from datetime import datetime
from app.models.shared.enums import DeliveryStatus, TransactionType, TransactionStatus

# Views (read side) are frozen: the aggregator builds them once per read

class LocationView(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = 0.0
    longitude: float = 0.0
    address: str
    timestamp: int  # ms since epoch

class PackageDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    weight: str = ""
    dimensions: str = ""
    description: str = ""

class DeliveryView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    tracking_number: str
    sender: str
    recipient: str
    origin: str
    destination: str
    status: DeliveryStatus
    status_rank: int
    progress_percent: int
    current_location: LocationView
    location_history: Tuple[LocationView, ...] = ()
    transaction_hash: str
    block_number: Optional[int] = None
    created_at: int  # ms since epoch
    estimated_delivery: int  # ms since epoch
    package_details: Optional[PackageDetails] = None

# Commands (write side)

class DeliveryCreate(BaseModel):
    """Create form. Required fields are checked by the service so each gets its own message."""
    recipient: str = ""
    origin: str = ""
    destination: str = ""
    weight: str = ""
    dimensions: str = ""
    description: str = ""

class DeliveryStatusUpdate(BaseModel):
    status: str

class LocationCreate(BaseModel):
    address: str = ""
    # Unparseable coordinates are accepted and stored as 0.0
    latitude: Optional[Any] = None
    longitude: Optional[Any] = None

class CreatedDeliveryResponse(BaseModel):
    delivery: DeliveryView
    transaction_hash: str
    on_chain: bool

class TimelineStepResponse(BaseModel):
    step: int
    status: DeliveryStatus
    reached: bool
    current: bool

# Transaction log

class TransactionFilters(BaseModel):
    type: Optional[TransactionType] = None
    status: Optional[TransactionStatus] = None
    search_text: Optional[str] = None

class TransactionResponse(BaseModel):
    id: int
    delivery_id: int
    tracking_number: Optional[str] = None
    transaction_hash: str
    type: TransactionType
    block_number: Optional[int] = None
    from_address: str
    gas_used: Optional[str] = None
    status: TransactionStatus
    created_at: datetime

# Chain identity

class ChainIdentityResponse(BaseModel):
    provider: str
    connected: bool
    address: Optional[str] = None
    contract_address: Optional[str] = None
