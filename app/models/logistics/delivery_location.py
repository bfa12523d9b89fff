from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import BaseModel

class DeliveryLocation(BaseModel):
    __tablename__ = 'delivery_locations'

    delivery_id = Column(Integer, ForeignKey('deliveries.id'), nullable=False, index=True)
    latitude = Column(Numeric(10, 8, asdecimal=False))
    longitude = Column(Numeric(11, 8, asdecimal=False))
    address = Column(Text, nullable=False)
    transaction_hash = Column(String(100))

    # Relationships
    delivery = relationship("Delivery", back_populates="locations")
