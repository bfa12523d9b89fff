# app/services/chain/__init__.py
import logging

from app.core.config import Settings

from .base import ChainProvider
from .mock import MockChainProvider
from .models import ChainIdentity, ChainReceipt, Confirmed, LocalFallback, TransactionOutcome
from .relayer import RelayerChainProvider
from .transaction_source import source_transaction

logger = logging.getLogger(__name__)


def build_chain_provider(settings: Settings) -> ChainProvider:
    """Create the provider selected by CHAIN_PROVIDER"""
    provider_name = settings.CHAIN_PROVIDER.lower()
    if provider_name == "relayer":
        logger.info(f"Using relayer chain provider at {settings.CHAIN_RELAYER_URL}")
        return RelayerChainProvider(
            base_url=settings.CHAIN_RELAYER_URL or "",
            contract_address=settings.CHAIN_CONTRACT_ADDRESS,
            api_key=settings.CHAIN_RELAYER_API_KEY,
            timeout=settings.CHAIN_REQUEST_TIMEOUT,
        )
    if provider_name != "mock":
        raise ValueError(f"Unknown CHAIN_PROVIDER: {settings.CHAIN_PROVIDER}")
    logger.info("Using mock chain provider")
    return MockChainProvider()


__all__ = [
    "ChainProvider",
    "MockChainProvider",
    "RelayerChainProvider",
    "ChainIdentity",
    "ChainReceipt",
    "Confirmed",
    "LocalFallback",
    "TransactionOutcome",
    "source_transaction",
    "build_chain_provider",
]
