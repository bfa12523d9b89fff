# app/services/logistics/delivery_stores.py
"""
Record, location and transaction stores for deliveries.

Stores only ``flush``; the calling service owns the database transaction so a
multi-row mutation commits or rolls back as one unit. Any SQLAlchemy failure is
surfaced as ``StoreError`` carrying the underlying message.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StoreError
from app.models.logistics.delivery import Delivery
from app.models.logistics.delivery_location import DeliveryLocation
from app.models.logistics.delivery_transaction import DeliveryTransaction
from app.schemas.logistics.delivery_schema import TransactionFilters

logger = logging.getLogger(__name__)


def _store_error(action: str, error: SQLAlchemyError) -> StoreError:
    logger.error(f"Error {action}: {str(error)}")
    return StoreError(f"Error {action}: {str(error)}")


class DeliveryRecordStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, fields: Dict[str, Any]) -> Delivery:
        try:
            delivery = Delivery(**fields)
            self.session.add(delivery)
            await self.session.flush()
            return delivery
        except SQLAlchemyError as e:
            raise _store_error("inserting delivery", e)

    async def update(self, delivery_id: int, fields: Dict[str, Any]) -> Delivery:
        delivery = await self.get_by_id(delivery_id)
        if delivery is None:
            raise StoreError(f"Delivery {delivery_id} disappeared during update")
        try:
            for key, value in fields.items():
                setattr(delivery, key, value)
            await self.session.flush()
            return delivery
        except SQLAlchemyError as e:
            raise _store_error(f"updating delivery {delivery_id}", e)

    async def get_by_id(self, delivery_id: int) -> Optional[Delivery]:
        try:
            result = await self.session.execute(select(Delivery).where(Delivery.id == delivery_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise _store_error(f"loading delivery {delivery_id}", e)

    async def get_by_tracking_number(self, tracking_number: str) -> Optional[Delivery]:
        """Case-insensitive lookup"""
        try:
            result = await self.session.execute(
                select(Delivery).where(func.upper(Delivery.tracking_number) == tracking_number.upper())
            )
            return result.scalars().first()
        except SQLAlchemyError as e:
            raise _store_error(f"loading delivery {tracking_number}", e)

    async def tracking_number_exists(self, tracking_number: str) -> bool:
        return await self.get_by_tracking_number(tracking_number) is not None

    async def list(self, limit: int) -> List[Delivery]:
        """Newest first"""
        try:
            result = await self.session.execute(
                select(Delivery)
                .order_by(Delivery.created_at.desc(), Delivery.id.desc())
                .limit(limit)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise _store_error("listing deliveries", e)


class LocationHistoryStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, delivery_id: int, fields: Dict[str, Any]) -> DeliveryLocation:
        try:
            location = DeliveryLocation(delivery_id=delivery_id, **fields)
            self.session.add(location)
            await self.session.flush()
            return location
        except SQLAlchemyError as e:
            raise _store_error(f"appending location to delivery {delivery_id}", e)

    async def list_by_delivery(self, delivery_id: int) -> List[DeliveryLocation]:
        try:
            result = await self.session.execute(
                select(DeliveryLocation)
                .where(DeliveryLocation.delivery_id == delivery_id)
                .order_by(DeliveryLocation.created_at, DeliveryLocation.id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise _store_error(f"listing locations of delivery {delivery_id}", e)


class TransactionLogStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, delivery_id: int, fields: Dict[str, Any]) -> DeliveryTransaction:
        try:
            transaction = DeliveryTransaction(delivery_id=delivery_id, **fields)
            self.session.add(transaction)
            await self.session.flush()
            return transaction
        except SQLAlchemyError as e:
            raise _store_error(f"appending transaction to delivery {delivery_id}", e)

    async def list_by_delivery(self, delivery_id: int) -> List[DeliveryTransaction]:
        try:
            result = await self.session.execute(
                select(DeliveryTransaction)
                .where(DeliveryTransaction.delivery_id == delivery_id)
                .order_by(DeliveryTransaction.id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise _store_error(f"listing transactions of delivery {delivery_id}", e)

    async def list_all(self, filters: TransactionFilters) -> List[Tuple[DeliveryTransaction, str]]:
        """Transactions newest first, each paired with its delivery's tracking number"""
        query = (
            select(DeliveryTransaction, Delivery.tracking_number)
            .join(Delivery, Delivery.id == DeliveryTransaction.delivery_id)
        )

        if filters.type is not None:
            query = query.where(DeliveryTransaction.transaction_type == filters.type.value)
        if filters.status is not None:
            query = query.where(DeliveryTransaction.status == filters.status.value)
        search_text = (filters.search_text or "").strip()
        if search_text:
            pattern = f"%{search_text}%"
            query = query.where(
                or_(
                    DeliveryTransaction.transaction_hash.ilike(pattern),
                    cast(DeliveryTransaction.delivery_id, String).ilike(pattern),
                    Delivery.tracking_number.ilike(pattern),
                )
            )

        query = query.order_by(DeliveryTransaction.created_at.desc(), DeliveryTransaction.id.desc())

        try:
            result = await self.session.execute(query)
            return [(row[0], row[1]) for row in result.all()]
        except SQLAlchemyError as e:
            raise _store_error("listing transactions", e)
