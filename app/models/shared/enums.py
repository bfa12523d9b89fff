from enum import Enum

# Enums
class DeliveryStatus(str, Enum):
    PENDING = "Pending"
    IN_TRANSIT = "In Transit"
    DELIVERED = "Delivered"

class TransactionType(str, Enum):
    CREATE = "create"
    STATUS_UPDATE = "status_update"
    LOCATION_UPDATE = "location_update"

class TransactionStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"
