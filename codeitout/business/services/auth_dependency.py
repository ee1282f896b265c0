from fastapi import Depends, Request

from codeitout.business.services.auth_util import SESSION_COOKIE_NAME, verify_session
from codeitout.data.repositories import UserRepository, get_user_repository
from codeitout.data.schemas import User
from codeitout.errors import UnauthorizedException, UserNotFoundException


class SessionFromCookie:
    def __init__(self, cookie_name: str = SESSION_COOKIE_NAME):
        self.cookie_name = cookie_name

    async def __call__(self, request: Request) -> str:
        token = request.cookies.get(self.cookie_name)
        if not token:
            raise UnauthorizedException(detail="Unauthorized - No token provided")

        return verify_session(token)


async def get_current_user(
    user_id: str = Depends(SessionFromCookie()),
    user_repository: UserRepository = Depends(get_user_repository),
) -> User:
    # Role can change between requests, so always reload the user
    user = await user_repository.find_user_by_id(user_id)
    if not user:
        raise UserNotFoundException()
    return user
