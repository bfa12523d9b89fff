# app/services/logistics/delivery_service.py
"""
Delivery tracking service.

Every mutation runs the same sequence: validate the input, require a signed-in
session, source the transaction hash from the chain provider (falling back to a
local hash), then write all rows and commit once. Reads go through the
aggregator and return ``None`` when nothing matches.
"""
import logging
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import AuthorizationError, NotFoundError, StoreError, ValidationError
from app.db.base import utcnow
from app.models.logistics.delivery import Delivery
from app.models.shared.enums import TransactionStatus, TransactionType
from app.schemas.logistics.delivery_schema import (
    CreatedDeliveryResponse, DeliveryCreate, DeliveryView, LocationCreate,
    LocationView, TimelineStepResponse, TransactionFilters, TransactionResponse
)
from app.services.auth.session_provider import SessionIdentity, SessionProvider
from app.services.chain import ChainProvider, Confirmed, TransactionOutcome, source_transaction
from app.services.logistics import status_model
from app.services.logistics.delivery_aggregator import aggregate, coerce_coordinate, to_epoch_ms
from app.services.logistics.delivery_stores import (
    DeliveryRecordStore, LocationHistoryStore, TransactionLogStore
)
from app.utils.identifiers import generate_tracking_number, normalize_tracking_number

logger = logging.getLogger(__name__)

# Checked in this order; the first empty field is reported
REQUIRED_CREATE_FIELDS = (
    ("recipient", "Please enter recipient name"),
    ("origin", "Please enter origin address"),
    ("destination", "Please enter destination address"),
    ("weight", "Please enter package weight"),
)


class DeliveryService:
    def __init__(
        self,
        session: AsyncSession,
        chain_provider: Optional[ChainProvider],
        session_provider: SessionProvider,
        transition_policy: status_model.TransitionPolicy = status_model.can_transition,
        settings: Settings = default_settings,
    ):
        self.session = session
        self.chain_provider = chain_provider
        self.session_provider = session_provider
        self.transition_policy = transition_policy
        self.settings = settings
        self.records = DeliveryRecordStore(session)
        self.locations = LocationHistoryStore(session)
        self.transactions = TransactionLogStore(session)

    # Reads

    async def track_by_number(self, tracking_number: str) -> Optional[DeliveryView]:
        """Look up a delivery by tracking number, ignoring case and surrounding whitespace"""
        code = normalize_tracking_number(tracking_number)
        if not code:
            return None
        record = await self.records.get_by_tracking_number(code)
        if record is None:
            logger.info(f"No delivery found for tracking number {code}")
            return None
        return await self._view(record)

    async def get_delivery(self, delivery_id: int) -> Optional[DeliveryView]:
        record = await self.records.get_by_id(delivery_id)
        if record is None:
            return None
        return await self._view(record)

    async def get_recent(self, limit: Optional[int] = None) -> List[DeliveryView]:
        """Most recently created deliveries, newest first"""
        if limit is None:
            limit = self.settings.RECENT_DELIVERIES_LIMIT
        records = await self.records.list(limit)
        return [await self._view(record) for record in records]

    async def list_transactions(self, filters: Optional[TransactionFilters] = None) -> List[TransactionResponse]:
        rows = await self.transactions.list_all(filters or TransactionFilters())
        return [
            TransactionResponse(
                id=transaction.id,
                delivery_id=transaction.delivery_id,
                tracking_number=tracking_number,
                transaction_hash=transaction.transaction_hash,
                type=transaction.transaction_type,
                block_number=transaction.block_number,
                from_address=transaction.from_address,
                gas_used=transaction.gas_used,
                status=transaction.status,
                created_at=transaction.created_at,
            )
            for transaction, tracking_number in rows
        ]

    async def timeline(self, delivery_id: int) -> Optional[List[TimelineStepResponse]]:
        record = await self.records.get_by_id(delivery_id)
        if record is None:
            return None
        return [TimelineStepResponse(**step) for step in status_model.timeline(record.status)]

    # Mutations

    async def create_delivery(self, form: DeliveryCreate) -> CreatedDeliveryResponse:
        """Create a Pending delivery with its seed location and its create transaction"""
        self._validate_create_form(form)
        user = self._require_session()

        tracking_number = generate_tracking_number()
        while await self.records.tracking_number_exists(tracking_number):
            tracking_number = generate_tracking_number()

        recipient = form.recipient.strip()
        origin = form.origin.strip()
        destination = form.destination.strip()

        outcome = await source_transaction(
            self.chain_provider,
            lambda provider: provider.create_delivery(tracking_number, recipient, origin, destination),
            f"create {tracking_number}",
        )
        sender = self._sender_address()
        now = utcnow()

        try:
            record = await self.records.insert({
                "tracking_number": tracking_number,
                "sender_address": sender,
                "recipient_name": recipient,
                "origin": origin,
                "destination": destination,
                "status": status_model.INITIAL_STATUS,
                "transaction_hash": outcome.transaction_hash,
                "block_number": self._block_number(outcome),
                "chain_delivery_id": outcome.external_id if isinstance(outcome, Confirmed) else None,
                "estimated_delivery": now + timedelta(days=self.settings.ESTIMATED_DELIVERY_DAYS),
                "package_weight": form.weight.strip(),
                "package_dimensions": form.dimensions.strip() or None,
                "package_description": form.description.strip() or None,
                "created_by": user.user_id,
                "created_at": now,
            })
            await self.locations.append(record.id, {
                "address": origin,
                "latitude": 0.0,
                "longitude": 0.0,
                "transaction_hash": outcome.transaction_hash,
                "created_at": now,
            })
            await self._log_transaction(record.id, TransactionType.CREATE, outcome, sender)
            await self.session.commit()
        except StoreError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error creating delivery {tracking_number}: {str(e)}")
            raise StoreError(f"Error creating delivery: {str(e)}")

        logger.info(f"Delivery created: {tracking_number} (on chain: {isinstance(outcome, Confirmed)})")
        return CreatedDeliveryResponse(
            delivery=await self._view(record),
            transaction_hash=outcome.transaction_hash,
            on_chain=isinstance(outcome, Confirmed),
        )

    async def set_status(self, delivery_id: int, status: str) -> None:
        """Overwrite the status and log a status_update transaction"""
        new_status = status_model.parse_status(status)
        self._require_session()
        record = await self._require_delivery(delivery_id)

        current_status = status_model.parse_status(record.status)
        if not self.transition_policy(current_status, new_status):
            raise ValidationError(
                f"Cannot change status from {current_status.value} to {new_status.value}",
                field="status",
            )

        outcome = await source_transaction(
            self.chain_provider,
            lambda provider: provider.update_status(self._external_id(record), new_status),
            f"status update of {record.tracking_number}",
        )

        try:
            await self.records.update(record.id, {"status": new_status})
            await self._log_transaction(record.id, TransactionType.STATUS_UPDATE, outcome, self._sender_address())
            await self.session.commit()
        except StoreError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error updating status of delivery {delivery_id}: {str(e)}")
            raise StoreError(f"Error updating delivery status: {str(e)}")

        logger.info(f"Delivery {record.tracking_number} status: {current_status.value} -> {new_status.value}")

    async def add_location(self, delivery_id: int, location: LocationCreate) -> None:
        """Append a location and log a location_update transaction"""
        address = (location.address or "").strip()
        if not address:
            raise ValidationError("Please enter location address", field="address")
        self._require_session()
        record = await self._require_delivery(delivery_id)

        now = utcnow()
        view = LocationView(
            latitude=coerce_coordinate(location.latitude),
            longitude=coerce_coordinate(location.longitude),
            address=address,
            timestamp=to_epoch_ms(now),
        )

        outcome = await source_transaction(
            self.chain_provider,
            lambda provider: provider.update_location(self._external_id(record), view),
            f"location update of {record.tracking_number}",
        )

        try:
            await self.locations.append(record.id, {
                "address": view.address,
                "latitude": view.latitude,
                "longitude": view.longitude,
                "transaction_hash": outcome.transaction_hash,
                "created_at": now,
            })
            await self._log_transaction(record.id, TransactionType.LOCATION_UPDATE, outcome, self._sender_address())
            await self.session.commit()
        except StoreError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error adding location to delivery {delivery_id}: {str(e)}")
            raise StoreError(f"Error adding delivery location: {str(e)}")

        logger.info(f"Delivery {record.tracking_number} location: {address}")

    # Helpers

    def _validate_create_form(self, form: DeliveryCreate) -> None:
        for field, message in REQUIRED_CREATE_FIELDS:
            if not (getattr(form, field) or "").strip():
                raise ValidationError(message, field=field)

    def _require_session(self) -> SessionIdentity:
        identity = self.session_provider.get_current_session()
        if identity is None:
            raise AuthorizationError()
        return identity

    async def _require_delivery(self, delivery_id: int) -> Delivery:
        record = await self.records.get_by_id(delivery_id)
        if record is None:
            raise NotFoundError(f"Delivery {delivery_id} not found")
        return record

    def _sender_address(self) -> str:
        identity = self.chain_provider.current_identity() if self.chain_provider is not None else None
        return identity.address if identity is not None else self.settings.DEMO_SENDER_ADDRESS

    @staticmethod
    def _external_id(record: Delivery) -> str:
        return record.chain_delivery_id or str(record.id)

    @staticmethod
    def _block_number(outcome: TransactionOutcome) -> Optional[int]:
        return outcome.block_number if isinstance(outcome, Confirmed) else None

    async def _log_transaction(
        self,
        delivery_id: int,
        transaction_type: TransactionType,
        outcome: TransactionOutcome,
        sender: str,
    ) -> None:
        confirmed = isinstance(outcome, Confirmed)
        await self.transactions.append(delivery_id, {
            "transaction_hash": outcome.transaction_hash,
            "transaction_type": transaction_type.value,
            "block_number": outcome.block_number if confirmed else None,
            "from_address": outcome.from_address if confirmed else sender,
            "gas_used": outcome.gas_used if confirmed else None,
            "status": TransactionStatus.CONFIRMED.value,
        })

    async def _view(self, record: Delivery) -> DeliveryView:
        locations = await self.locations.list_by_delivery(record.id)
        transactions = await self.transactions.list_by_delivery(record.id)
        return aggregate(record, locations, transactions)
