import logging
from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.models.auth.user import User
from app.core.security import get_password_hash
from app.schemas.auth.user import UserCreate

logger = logging.getLogger(__name__)

class UserService:
    """Operator accounts that may sign in and mutate deliveries"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _find_one(self, label: str, *criteria) -> Optional[User]:
        try:
            result = await self.session.execute(select(User).where(*criteria))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"User lookup by {label} failed: {str(e)}")
            return None

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self._find_one(f"id {user_id}", User.id == user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return await self._find_one("email", User.email == email)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return await self._find_one("username", User.username == username)

    async def create_user(self, user_create: UserCreate) -> User:
        """Register an operator; email and username must both be unused"""
        if await self.get_user_by_email(user_create.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )
        if await self.get_user_by_username(user_create.username):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username already taken"
            )

        operator = User(
            email=user_create.email,
            username=user_create.username,
            full_name=user_create.full_name,
            hashed_password=get_password_hash(user_create.password),
        )
        try:
            self.session.add(operator)
            await self.session.commit()
            await self.session.refresh(operator)
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error registering operator {user_create.username}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creating user"
            )

        logger.info(f"Operator registered: {user_create.username}")
        return operator
