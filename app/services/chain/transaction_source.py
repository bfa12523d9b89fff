import logging
from typing import Awaitable, Callable, Optional

from app.core.exceptions import ProviderError
from app.utils.identifiers import generate_mock_transaction_hash

from .base import ChainProvider
from .models import ChainReceipt, Confirmed, LocalFallback, TransactionOutcome

logger = logging.getLogger(__name__)

ChainCall = Callable[[ChainProvider], Awaitable[ChainReceipt]]


async def source_transaction(provider: Optional[ChainProvider], call: ChainCall, action: str) -> TransactionOutcome:
    """
    Obtain the provenance hash for one mutation.

    Without a connected identity the provider is not called at all. A provider
    failure is logged and replaced by a local hash; it never blocks the
    mutation.
    """
    identity = provider.current_identity() if provider is not None else None
    if identity is None:
        logger.info(f"No chain identity connected, using local transaction hash for {action}")
        return LocalFallback(transaction_hash=generate_mock_transaction_hash(), reason="no wallet connected")

    try:
        receipt = await call(provider)
    except ProviderError as e:
        logger.warning(f"Chain transaction for {action} failed, using local hash: {e.message}")
        return LocalFallback(transaction_hash=generate_mock_transaction_hash(), reason=e.message)

    logger.info(f"Chain transaction for {action} confirmed: {receipt.transaction_hash}")
    return Confirmed(
        transaction_hash=receipt.transaction_hash,
        from_address=identity.address,
        block_number=receipt.block_number,
        gas_used=receipt.gas_used,
        external_id=receipt.external_id,
    )
