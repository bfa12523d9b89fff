from sqlalchemy import Column, Integer, BigInteger, String, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
from app.models.shared.enums import TransactionStatus

class DeliveryTransaction(BaseModel):
    __tablename__ = 'delivery_transactions'

    delivery_id = Column(Integer, ForeignKey('deliveries.id'), nullable=False, index=True)
    transaction_hash = Column(String(100), nullable=False, index=True)
    transaction_type = Column(String(30), nullable=False, index=True)  # create, status_update, location_update
    block_number = Column(BigInteger)
    from_address = Column(String(255), nullable=False)
    gas_used = Column(String(50))
    status = Column(String(20), default=TransactionStatus.CONFIRMED.value, nullable=False)

    # Relationships
    delivery = relationship("Delivery", back_populates="transactions")
