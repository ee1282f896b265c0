import uuid
from typing import Optional, Union

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from codeitout.config import logger
from codeitout.data.repositories.database import get_session
from codeitout.data.schemas import User, UserRole
from codeitout.errors import DuplicateEmailException, PersistenceException

user_logger = logger.getChild("user")


class UserRepository:
    """Identity store backed by the users table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_user_by_email(self, email: str) -> Optional[User]:
        try:
            result = await self.session.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            user_logger.error(f"Error retrieving user by email {email}: {str(e)}")
            raise PersistenceException(detail="Failed to retrieve user")

    async def find_user_by_id(self, user_id: Union[str, uuid.UUID]) -> Optional[User]:
        if not isinstance(user_id, uuid.UUID):
            try:
                user_id = uuid.UUID(str(user_id))
            except ValueError:
                user_logger.warning(f"Malformed user ID: {user_id}")
                return None

        try:
            result = await self.session.execute(select(User).where(User.id == user_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            user_logger.error(f"Error retrieving user {user_id}: {str(e)}")
            raise PersistenceException(detail="Failed to retrieve user")

    async def create_user(
        self,
        email: str,
        password_hash: str,
        name: Optional[str] = None,
        role: UserRole = UserRole.USER,
    ) -> User:
        if await self.find_user_by_email(email):
            user_logger.warning(f"Email already registered: {email}")
            raise DuplicateEmailException()

        new_user = User(email=email, password_hash=password_hash, name=name, role=role)
        self.session.add(new_user)
        try:
            await self.session.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration
            await self.session.rollback()
            user_logger.warning(f"Email already registered: {email}")
            raise DuplicateEmailException()
        except SQLAlchemyError as e:
            await self.session.rollback()
            user_logger.error(f"Error creating user {email}: {str(e)}")
            raise PersistenceException(detail="Failed to create user")

        await self.session.refresh(new_user)
        user_logger.info(f"User created: {new_user.email} (ID: {new_user.id})")
        return new_user


def get_user_repository(session: AsyncSession = Depends(get_session)) -> UserRepository:
    return UserRepository(session)
