from sqlalchemy import Column, Integer, BigInteger, String, DateTime, Text, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
from app.models.shared.enums import DeliveryStatus

class Delivery(BaseModel):
    __tablename__ = 'deliveries'

    tracking_number = Column(String(50), unique=True, index=True, nullable=False)
    sender_address = Column(String(255), nullable=False)
    recipient_name = Column(String(255), nullable=False)
    origin = Column(Text, nullable=False)
    destination = Column(Text, nullable=False)
    status = Column(
        SQLEnum(
            DeliveryStatus,
            name="delivery_status",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=DeliveryStatus.PENDING,
        nullable=False,
    )
    transaction_hash = Column(String(100), nullable=False)
    block_number = Column(BigInteger)
    chain_delivery_id = Column(String(100), nullable=True)  # Delivery id assigned by the chain contract
    estimated_delivery = Column(DateTime(timezone=True), nullable=False)
    package_weight = Column(String(50))
    package_dimensions = Column(String(100))
    package_description = Column(Text)
    created_by = Column(Integer, ForeignKey('users.id'), nullable=True)  # User ID

    # Relationships
    creator = relationship("User", back_populates="deliveries_created")
    locations = relationship(
        "DeliveryLocation",
        back_populates="delivery",
        order_by="DeliveryLocation.id",
    )
    transactions = relationship(
        "DeliveryTransaction",
        back_populates="delivery",
        order_by="DeliveryTransaction.id",
    )

    def __repr__(self):
        return f"<Delivery {self.tracking_number} {self.status}>"
