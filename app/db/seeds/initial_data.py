import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.security import get_password_hash
from app.db.base import utcnow
from app.models.auth.user import User
from app.models.logistics.delivery import Delivery
from app.models.logistics.delivery_location import DeliveryLocation
from app.models.logistics.delivery_transaction import DeliveryTransaction
from app.models.shared.enums import DeliveryStatus, TransactionStatus, TransactionType
from app.utils.identifiers import generate_mock_transaction_hash

logger = logging.getLogger(__name__)

DEMO_USER_EMAIL = "demo@delivery-tracker.local"

MADURAI = (9.9252, 78.1198, "Madurai, Tamil Nadu, India")
CHENNAI = (13.0827, 80.2707, "Chennai, Tamil Nadu, India")
COIMBATORE = (11.1271, 78.6569, "Coimbatore, Tamil Nadu, India")
TIRUCHIRAPPALLI = (10.7905, 78.7047, "Tiruchirappalli, Tamil Nadu, India")

# Offsets are relative to seeding time
SAMPLE_DELIVERIES: List[Dict[str, Any]] = [
    {
        "tracking_number": "TRK1001234567",
        "sender_address": "0x742d35Cc6634C0532925a3b844Bc9e7595f0bEb",
        "recipient_name": "John Doe",
        "origin": MADURAI[2],
        "destination": CHENNAI[2],
        "status": DeliveryStatus.IN_TRANSIT,
        "block_number": 18234567,
        "age": timedelta(days=1),
        "eta": timedelta(days=1),
        "package": ("2.5 kg", "30x20x15 cm", "Electronics - Handle with care"),
        "route": [(MADURAI, timedelta(days=1)), (COIMBATORE, timedelta(hours=1))],
    },
    {
        "tracking_number": "TRK1001234568",
        "sender_address": "0x8ba1f109551bD432803012645Ac136ddd64DBA72",
        "recipient_name": "Jane Smith",
        "origin": CHENNAI[2],
        "destination": MADURAI[2],
        "status": DeliveryStatus.DELIVERED,
        "block_number": 18234589,
        "age": timedelta(days=2),
        "eta": -timedelta(hours=2),
        "package": ("1.2 kg", "25x15x10 cm", "Documents"),
        "route": [
            (CHENNAI, timedelta(days=2)),
            (TIRUCHIRAPPALLI, timedelta(days=1)),
            (MADURAI, timedelta(hours=2)),
        ],
    },
    {
        "tracking_number": "TRK1001234569",
        "sender_address": "0xdD2FD4581271e230360230F9337D5c0430Bf44C0",
        "recipient_name": "Robert Johnson",
        "origin": MADURAI[2],
        "destination": COIMBATORE[2],
        "status": DeliveryStatus.PENDING,
        "block_number": 18234601,
        "age": timedelta(minutes=30),
        "eta": timedelta(days=3),
        "package": ("5.0 kg", "40x30x20 cm", "Books"),
        "route": [(MADURAI, timedelta(minutes=30))],
    },
]

async def create_initial_data(session: AsyncSession) -> bool:
    """Create the demo user and the sample deliveries"""
    try:
        logger.info("Creating initial data...")

        user = await create_demo_user(session)
        await create_sample_deliveries(session, user)

        await session.commit()
        logger.info("Initial data created successfully")
        return True

    except Exception as e:
        logger.error(f"Error creating initial data: {str(e)}")
        await session.rollback()
        raise

async def create_demo_user(session: AsyncSession) -> User:
    result = await session.execute(select(User).where(User.email == DEMO_USER_EMAIL))
    user = result.scalar_one_or_none()

    if not user:
        user = User(
            email=DEMO_USER_EMAIL,
            username="demo",
            full_name="Demo Operator",
            hashed_password=get_password_hash("Demo12345"),
            is_active=True,
        )
        session.add(user)
        await session.flush()
        logger.info(f"Created demo user: {DEMO_USER_EMAIL}")
    return user

async def create_sample_deliveries(session: AsyncSession, user: User) -> None:
    now = utcnow()
    for data in SAMPLE_DELIVERIES:
        result = await session.execute(
            select(Delivery).where(Delivery.tracking_number == data["tracking_number"])
        )
        if result.scalar_one_or_none():
            continue

        delivery = _sample_delivery(data, user, now)
        session.add(delivery)
        await session.flush()

        for (latitude, longitude, address), offset in data["route"]:
            session.add(DeliveryLocation(
                delivery_id=delivery.id,
                latitude=latitude,
                longitude=longitude,
                address=address,
                created_at=now - offset,
            ))

        session.add(DeliveryTransaction(
            delivery_id=delivery.id,
            transaction_hash=delivery.transaction_hash,
            transaction_type=TransactionType.CREATE.value,
            block_number=delivery.block_number,
            from_address=delivery.sender_address,
            status=TransactionStatus.CONFIRMED.value,
            created_at=delivery.created_at,
        ))
        logger.info(f"Created sample delivery: {delivery.tracking_number}")

def _sample_delivery(data: Dict[str, Any], user: User, now: datetime) -> Delivery:
    weight, dimensions, description = data["package"]
    return Delivery(
        tracking_number=data["tracking_number"],
        sender_address=data["sender_address"],
        recipient_name=data["recipient_name"],
        origin=data["origin"],
        destination=data["destination"],
        status=data["status"],
        transaction_hash=generate_mock_transaction_hash(),
        block_number=data["block_number"],
        estimated_delivery=now + data["eta"],
        package_weight=weight,
        package_dimensions=dimensions,
        package_description=description,
        created_by=user.id,
        created_at=now - data["age"],
    )
