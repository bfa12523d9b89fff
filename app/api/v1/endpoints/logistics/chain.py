# app/api/v1/endpoints/logistics/chain.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_chain_provider, get_current_user
from app.core.config import settings
from app.core.exceptions import ProviderError
from app.schemas.logistics.delivery_schema import ChainIdentityResponse
from app.services.chain import ChainProvider

router = APIRouter()
logger = logging.getLogger(__name__)

def _identity_response(provider: ChainProvider) -> ChainIdentityResponse:
    identity = provider.current_identity()
    return ChainIdentityResponse(
        provider=provider.name,
        connected=identity is not None,
        address=identity.address if identity else None,
        contract_address=settings.CHAIN_CONTRACT_ADDRESS,
    )

@router.get("/identity", response_model=ChainIdentityResponse)
async def get_chain_identity(chain_provider: ChainProvider = Depends(get_chain_provider)):
    """Connected chain account, if any"""
    return _identity_response(chain_provider)

@router.post("/connect", response_model=ChainIdentityResponse)
async def connect_chain(
    chain_provider: ChainProvider = Depends(get_chain_provider),
    current_user=Depends(get_current_user)
):
    """Connect the chain account used to sign delivery transactions"""
    try:
        await chain_provider.connect()
        logger.info(f"Chain account connected by {current_user.email}")
        return _identity_response(chain_provider)
    except ProviderError as e:
        logger.error(f"Chain connect failed: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not connect to chain provider: {e.message}"
        )

@router.post("/disconnect", response_model=ChainIdentityResponse)
async def disconnect_chain(
    chain_provider: ChainProvider = Depends(get_chain_provider),
    current_user=Depends(get_current_user)
):
    """Disconnect the chain account; later mutations use local transaction hashes"""
    await chain_provider.disconnect()
    logger.info(f"Chain account disconnected by {current_user.email}")
    return _identity_response(chain_provider)
