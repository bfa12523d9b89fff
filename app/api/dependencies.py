from typing import Optional
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_async_session
from app.auth.jwt_handler import get_token_user_id
from app.models.auth.user import User
from app.services.auth.user_service import UserService
from app.services.auth.session_provider import BearerSessionProvider, SessionProvider
from app.services.chain import ChainProvider
from app.services.logistics.delivery_service import DeliveryService
import logging

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)

async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: AsyncSession = Depends(get_async_session)
) -> User:
    """Get current authenticated user"""
    user_id = get_token_user_id(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await UserService(session).get_user(user_id)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.current_user = user
    return user

async def get_session_provider(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    session: AsyncSession = Depends(get_async_session)
) -> SessionProvider:
    """Session for the current request; anonymous when no valid bearer token is sent"""
    token = credentials.credentials if credentials else None
    return await BearerSessionProvider.from_token(session, token)

def get_chain_provider(request: Request) -> ChainProvider:
    """Application-scoped chain provider created in the lifespan handler"""
    provider = getattr(request.app.state, "chain_provider", None)
    if provider is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Chain provider is not initialised"
        )
    return provider

async def get_delivery_service(
    session: AsyncSession = Depends(get_async_session),
    chain_provider: ChainProvider = Depends(get_chain_provider),
    session_provider: SessionProvider = Depends(get_session_provider)
) -> DeliveryService:
    return DeliveryService(session, chain_provider, session_provider)
