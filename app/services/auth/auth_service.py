import logging
from typing import Optional, Dict, Any
from datetime import timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.db.base import utcnow
from app.models.auth.user import User
from app.core.security import verify_password, create_access_token
from app.core.config import settings

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """Authenticate user with email and password"""
        try:
            result = await self.session.execute(
                select(User).where(User.email == email, User.is_active == True)
            )
            user = result.scalar_one_or_none()

            if not user:
                logger.info(f"Failed login for {email}: user not found")
                return None

            if not verify_password(password, user.hashed_password):
                logger.info(f"Failed login for {email}: wrong password")
                return None

            user.last_login = utcnow()
            await self.session.commit()
            await self.session.refresh(user)

            logger.info(f"User logged in: {email}")
            return user

        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error authenticating user: {str(e)}")
            return None

    def create_tokens(self, user: User) -> Dict[str, Any]:
        """Create the bearer access token for a signed-in user"""
        expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        access_token = create_access_token(
            subject=user.id,
            expires_delta=expires,
            extra={"email": user.email, "username": user.username},
        )
        return {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": int(expires.total_seconds()),
        }
