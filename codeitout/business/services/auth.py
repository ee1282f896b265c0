from fastapi import Depends

from codeitout.business.services.auth_util import generate_password_hash, verify_password
from codeitout.config import logger
from codeitout.data.repositories import UserRepository, get_user_repository
from codeitout.data.schemas import User, UserCreateModel, UserLoginModel
from codeitout.errors import InvalidCredentialsException, UserNotFoundException

auth_logger = logger.getChild("auth")


class UserService:
    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    async def register(self, user_data: UserCreateModel) -> User:
        return await self.user_repository.create_user(
            email=user_data.email,
            password_hash=generate_password_hash(user_data.password),
            name=user_data.name,
        )

    async def authenticate(self, login_data: UserLoginModel) -> User:
        user = await self.user_repository.find_user_by_email(login_data.email)
        if not user:
            auth_logger.warning(f"Login failed: User not found: {login_data.email}")
            raise UserNotFoundException()

        if not verify_password(login_data.password, user.password_hash):
            auth_logger.warning(f"Login failed: Invalid password for: {login_data.email}")
            raise InvalidCredentialsException()

        return user


def get_user_service(
    user_repository: UserRepository = Depends(get_user_repository),
) -> UserService:
    return UserService(user_repository)
