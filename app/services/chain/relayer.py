"""
Relayer chain provider.

Sends delivery mutations to a transaction-relayer HTTP service that signs
and submits calls to the delivery contract, then waits for the receipt.

Relayer API (JSON):
    POST /accounts/connect                  -> {"address"}
    POST /accounts/disconnect               -> {}
    POST /deliveries                        -> {"transaction_hash", "delivery_id", "block_number", "gas_used"}
    POST /deliveries/{id}/status            -> {"transaction_hash", "block_number", "gas_used"}
    POST /deliveries/{id}/location          -> {"transaction_hash", "block_number", "gas_used"}

The contract stores status as its rank (0, 1, 2) and coordinates as integer
micro-degrees.
"""

import logging
import math
from typing import Any, Dict, Optional

import httpx

from app.core.exceptions import ProviderError
from app.models.shared.enums import DeliveryStatus
from app.schemas.logistics.delivery_schema import LocationView
from app.services.logistics import status_model

from .base import ChainProvider
from .models import ChainIdentity, ChainReceipt

logger = logging.getLogger(__name__)

MICRO_DEGREES = 1_000_000


def to_micro_degrees(value: float) -> int:
    return math.floor(value * MICRO_DEGREES)


class RelayerChainProvider(ChainProvider):
    """
    Chain provider backed by a relayer service.

    Usage:
        provider = RelayerChainProvider(base_url="http://relayer:8545", contract_address="0x...")
        await provider.connect()
        receipt = await provider.create_delivery("TRK...", "John Doe", "NY", "LA")
    """

    name = "relayer"

    def __init__(
        self,
        base_url: str,
        contract_address: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not base_url:
            raise ValueError("Relayer base URL is required")
        self.base_url = base_url.rstrip("/")
        self.contract_address = contract_address
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._identity: Optional[ChainIdentity] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy HTTP client initialization"""
        if self._client is None or self._client.is_closed:
            headers = {
                "Content-Type": "application/json",
                "Accept": "application/json",
                "X-Contract-Address": self.contract_address,
            }
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def connect(self) -> ChainIdentity:
        data = await self._post("/accounts/connect", {})
        address = data.get("address")
        if not address:
            raise ProviderError("Relayer did not return an account address", provider=self.name)
        self._identity = ChainIdentity(address=address, provider=self.name)
        logger.info(f"Relayer account connected: {address}")
        return self._identity

    async def disconnect(self) -> None:
        if self._identity is None:
            return
        try:
            await self._post("/accounts/disconnect", {"address": self._identity.address})
        except ProviderError as e:
            logger.warning(f"Relayer disconnect failed, dropping identity anyway: {e}")
        finally:
            self._identity = None

    def current_identity(self) -> Optional[ChainIdentity]:
        return self._identity

    async def close(self) -> None:
        await self.disconnect()
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def create_delivery(self, tracking_number: str, recipient: str, origin: str, destination: str) -> ChainReceipt:
        data = await self._post(
            "/deliveries",
            {
                "tracking_number": tracking_number,
                "recipient": recipient,
                "origin": origin,
                "destination": destination,
            },
        )
        return self._receipt(data, external_id=data.get("delivery_id"))

    async def update_status(self, external_id: str, status: DeliveryStatus) -> ChainReceipt:
        data = await self._post(f"/deliveries/{external_id}/status", {"status": status_model.rank(status)})
        return self._receipt(data, external_id=external_id)

    async def update_location(self, external_id: str, location: LocationView) -> ChainReceipt:
        data = await self._post(
            f"/deliveries/{external_id}/location",
            {
                "latitude": to_micro_degrees(location.latitude),
                "longitude": to_micro_degrees(location.longitude),
                "address": location.address,
            },
        )
        return self._receipt(data, external_id=external_id)

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if path != "/accounts/connect" and self._identity is None:
            raise ProviderError("Wallet not connected", provider=self.name)
        if self._identity is not None:
            payload = {**payload, "from": self._identity.address}
        try:
            response = await self.client.post(path, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"Relayer returned {e.response.status_code} for {path}", provider=self.name
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(f"Relayer request to {path} failed: {e}", provider=self.name) from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ProviderError(
                f"Relayer returned a {type(data).__name__} body for {path}, expected an object", provider=self.name
            )
        return data

    def _receipt(self, data: Dict[str, Any], external_id: Optional[Any]) -> ChainReceipt:
        transaction_hash = data.get("transaction_hash")
        if not transaction_hash:
            raise ProviderError("Relayer response has no transaction hash", provider=self.name)
        block_number = data.get("block_number")
        gas_used = data.get("gas_used")
        try:
            block_number = int(block_number) if block_number is not None else None
        except (TypeError, ValueError) as e:
            raise ProviderError(f"Relayer returned a malformed block number: {block_number!r}", provider=self.name) from e
        return ChainReceipt(
            transaction_hash=transaction_hash,
            external_id=str(external_id) if external_id is not None else None,
            block_number=block_number,
            gas_used=str(gas_used) if gas_used is not None else None,
        )
