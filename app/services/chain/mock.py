"""Mock chain provider."""

import logging
from typing import Optional

from app.core.exceptions import ProviderError
from app.models.shared.enums import DeliveryStatus
from app.schemas.logistics.delivery_schema import LocationView
from app.services.logistics import status_model
from app.utils.identifiers import generate_mock_address, generate_mock_transaction_hash

from .base import ChainProvider
from .models import ChainIdentity, ChainReceipt

logger = logging.getLogger(__name__)

MOCK_GAS_USED = "21000"


class MockChainProvider(ChainProvider):
    """
    In-process stand-in for a contract.

    Hands out pseudo hashes and increasing block numbers once connected.
    ``fail_with`` makes every ledger call raise ``ProviderError`` so the
    fallback path can be exercised.
    """

    name = "mock"

    def __init__(self, address: Optional[str] = None, start_block: int = 18_000_000, fail_with: Optional[str] = None):
        self._address = address
        self._identity: Optional[ChainIdentity] = None
        self._block_number = start_block
        self._next_delivery_id = 1
        self.fail_with = fail_with

    async def connect(self) -> ChainIdentity:
        if self._identity is None:
            self._identity = ChainIdentity(address=self._address or generate_mock_address(), provider=self.name)
            logger.info(f"Mock chain provider connected as {self._identity.address}")
        return self._identity

    async def disconnect(self) -> None:
        if self._identity is not None:
            logger.info(f"Mock chain provider disconnected ({self._identity.address})")
        self._identity = None

    def current_identity(self) -> Optional[ChainIdentity]:
        return self._identity

    async def create_delivery(self, tracking_number: str, recipient: str, origin: str, destination: str) -> ChainReceipt:
        self._ensure_ready()
        external_id = str(self._next_delivery_id)
        self._next_delivery_id += 1
        return self._receipt(external_id)

    async def update_status(self, external_id: str, status: DeliveryStatus) -> ChainReceipt:
        self._ensure_ready()
        status_model.rank(status)  # rejects values the contract cannot encode
        return self._receipt(external_id)

    async def update_location(self, external_id: str, location: LocationView) -> ChainReceipt:
        self._ensure_ready()
        return self._receipt(external_id)

    def _ensure_ready(self) -> None:
        if self._identity is None:
            raise ProviderError("Wallet not connected", provider=self.name)
        if self.fail_with:
            raise ProviderError(self.fail_with, provider=self.name)

    def _receipt(self, external_id: str) -> ChainReceipt:
        self._block_number += 1
        return ChainReceipt(
            transaction_hash=generate_mock_transaction_hash(),
            external_id=external_id,
            block_number=self._block_number,
            gas_used=MOCK_GAS_USED,
        )
