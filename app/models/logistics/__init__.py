# app/models/logistics/__init__.py
from .delivery import Delivery
from .delivery_location import DeliveryLocation
from .delivery_transaction import DeliveryTransaction

__all__ = ["Delivery", "DeliveryLocation", "DeliveryTransaction"]
