"""
Delivery aggregation.

Merges one stored delivery row with its location history and its transaction
log into the frozen ``DeliveryView`` every consumer reads. The read path is
fail-soft: a partially written row degrades to default values (0.0
coordinates, the record's own timestamps) instead of raising, so a single bad
location never breaks a tracking page.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Sequence

from app.core.exceptions import ValidationError
from app.models.shared.enums import DeliveryStatus, TransactionType
from app.schemas.logistics.delivery_schema import DeliveryView, LocationView, PackageDetails
from app.services.logistics import status_model

logger = logging.getLogger(__name__)


def coerce_coordinate(value: Any) -> float:
    """Parse a latitude/longitude; anything non-numeric becomes 0.0"""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def to_epoch_ms(value: Any, default: int = 0) -> int:
    """Convert a datetime (naive means UTC) or an epoch-ms number to epoch milliseconds"""
    if value is None:
        return default
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp() * 1000)
    if isinstance(value, str):
        try:
            return to_epoch_ms(datetime.fromisoformat(value.replace("Z", "+00:00")), default)
        except ValueError:
            return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _block_number(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _status(value: Any) -> DeliveryStatus:
    try:
        return status_model.parse_status(value)
    except ValidationError:
        logger.warning(f"Unknown delivery status {value!r} in stored row, showing as Pending")
        return status_model.INITIAL_STATUS


def to_location_view(location: Any, fallback_timestamp: int) -> LocationView:
    return LocationView(
        latitude=coerce_coordinate(getattr(location, "latitude", None)),
        longitude=coerce_coordinate(getattr(location, "longitude", None)),
        address=_text(getattr(location, "address", None)),
        timestamp=to_epoch_ms(getattr(location, "created_at", None), fallback_timestamp),
    )


def find_creation_transaction(transactions: Iterable[Any]) -> Optional[Any]:
    for transaction in transactions:
        transaction_type = getattr(transaction, "transaction_type", None)
        if transaction_type in (TransactionType.CREATE, TransactionType.CREATE.value):
            return transaction
    return None


def aggregate(record: Any, locations: Sequence[Any], transactions: Sequence[Any]) -> DeliveryView:
    """
    Build the view model for one delivery.

    ``locations`` are ordered by timestamp, ties keeping insertion order;
    the last entry is the current location. ``transactions`` may be in any order; the first
    ``create`` entry supplies the provenance hash and block number, falling
    back to the values stored on the record itself.
    """
    created_at = to_epoch_ms(getattr(record, "created_at", None))
    origin = _text(getattr(record, "origin", None))

    # Stable sort: equal timestamps keep insertion order
    location_history = tuple(sorted(
        (to_location_view(location, created_at) for location in locations),
        key=lambda location: location.timestamp,
    ))
    if location_history:
        current_location = location_history[-1]
    else:
        current_location = LocationView(latitude=0.0, longitude=0.0, address=origin, timestamp=created_at)

    creation_tx = find_creation_transaction(transactions)
    if creation_tx is not None:
        transaction_hash = getattr(creation_tx, "transaction_hash", None) or getattr(record, "transaction_hash", None)
        block_number = getattr(creation_tx, "block_number", None) or getattr(record, "block_number", None)
    else:
        transaction_hash = getattr(record, "transaction_hash", None)
        block_number = getattr(record, "block_number", None)

    status = _status(getattr(record, "status", None))

    return DeliveryView(
        id=getattr(record, "id", None) or 0,
        tracking_number=_text(getattr(record, "tracking_number", None)),
        sender=_text(getattr(record, "sender_address", None)),
        recipient=_text(getattr(record, "recipient_name", None)),
        origin=origin,
        destination=_text(getattr(record, "destination", None)),
        status=status,
        status_rank=status_model.rank(status),
        progress_percent=status_model.progress_percent(status),
        current_location=current_location,
        location_history=location_history,
        transaction_hash=_text(transaction_hash),
        block_number=_block_number(block_number),
        created_at=created_at,
        estimated_delivery=to_epoch_ms(getattr(record, "estimated_delivery", None), created_at),
        package_details=PackageDetails(
            weight=_text(getattr(record, "package_weight", None)),
            dimensions=_text(getattr(record, "package_dimensions", None)),
            description=_text(getattr(record, "package_description", None)),
        ),
    )
