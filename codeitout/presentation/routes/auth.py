from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from codeitout.business.services import (
    SESSION_COOKIE_NAME,
    SESSION_EXPIRY,
    UserService,
    get_current_user,
    get_user_service,
    issue_session,
)
from codeitout.config import Config, logger
from codeitout.data.schemas import (
    AuthResponse,
    MessageResponse,
    User,
    UserCreateModel,
    UserLoginModel,
    UserResponseModel,
)

auth_logger = logger.getChild("auth")
auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="Creates a new user account and sets a session token as an HTTP-only cookie.",
)
async def register(
    user_data: UserCreateModel,
    response: Response,
    user_service: UserService = Depends(get_user_service),
):
    auth_logger.info(f"Registration attempt for email: {user_data.email}")
    new_user = await user_service.register(user_data)

    set_session_cookie(response, issue_session(new_user.id))
    auth_logger.info(f"User registered: {new_user.email} (ID: {new_user.id})")
    return AuthResponse(
        message="User registered successfully",
        user=UserResponseModel.model_validate(new_user),
    )


@auth_router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log in a user",
    description="Authenticates a user by email and password and sets a session cookie.",
)
async def login(
    login_data: UserLoginModel,
    response: Response,
    user_service: UserService = Depends(get_user_service),
):
    auth_logger.info(f"Login attempt for email: {login_data.email}")
    user = await user_service.authenticate(login_data)

    set_session_cookie(response, issue_session(user.id))
    auth_logger.info(f"User logged in: {user.email} (ID: {user.id})")
    return AuthResponse(
        message="User logged in successfully",
        user=UserResponseModel.model_validate(user),
    )


@auth_router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out a user",
    description="Clears the session cookie. Tokens are not revoked server-side.",
)
async def logout(current_user: User = Depends(get_current_user)):
    auth_logger.info(f"Logout for user ID: {current_user.id}")
    response = JSONResponse(content={"message": "User logged out successfully"})
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        httponly=True,
        secure=not Config.is_development,
        samesite="strict",
    )
    return response


@auth_router.get(
    "/check",
    response_model=AuthResponse,
    summary="Check the current session",
    description="Returns the user the session cookie belongs to.",
)
async def check(current_user: User = Depends(get_current_user)):
    auth_logger.debug(f"Session check for user ID: {current_user.id}")
    return AuthResponse(
        message="User authenticated successfully",
        user=UserResponseModel.model_validate(current_user),
    )


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=int(SESSION_EXPIRY.total_seconds()),
        httponly=True,
        secure=not Config.is_development,
        samesite="strict",
    )
