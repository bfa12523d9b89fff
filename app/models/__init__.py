from app.models.auth.user import User
from app.models.logistics.delivery import Delivery
from app.models.logistics.delivery_location import DeliveryLocation
from app.models.logistics.delivery_transaction import DeliveryTransaction
