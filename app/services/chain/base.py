"""
Chain Provider Base Class

Abstract base class for the service that records delivery mutations on a
ledger and hands back a transaction hash. Implementations own their
connection state; nothing here is a process-wide singleton.
"""
from abc import ABC, abstractmethod
from typing import Optional

from app.models.shared.enums import DeliveryStatus
from app.schemas.logistics.delivery_schema import LocationView

from .models import ChainIdentity, ChainReceipt


class ChainProvider(ABC):
    """
    Abstract chain provider.

    Every call may raise ``ProviderError``; callers go through
    ``source_transaction`` which falls back to a local hash.
    """

    name: str = "abstract"

    @abstractmethod
    async def connect(self) -> ChainIdentity:
        """Open the provider connection and return the signing identity"""
        raise NotImplementedError

    @abstractmethod
    async def disconnect(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def current_identity(self) -> Optional[ChainIdentity]:
        """Identity of the connected account, or None when disconnected"""
        raise NotImplementedError

    @abstractmethod
    async def create_delivery(
        self,
        tracking_number: str,
        recipient: str,
        origin: str,
        destination: str,
    ) -> ChainReceipt:
        raise NotImplementedError

    @abstractmethod
    async def update_status(self, external_id: str, status: DeliveryStatus) -> ChainReceipt:
        raise NotImplementedError

    @abstractmethod
    async def update_location(self, external_id: str, location: LocationView) -> ChainReceipt:
        raise NotImplementedError

    async def close(self) -> None:
        """Release resources held by the provider (HTTP clients etc.)"""
        await self.disconnect()
