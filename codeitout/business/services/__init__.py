from .auth import UserService, get_user_service
from .auth_dependency import SessionFromCookie, get_current_user
from .auth_util import (
    SESSION_COOKIE_NAME,
    SESSION_EXPIRY,
    decode_token,
    encode_token,
    generate_password_hash,
    issue_session,
    verify_password,
    verify_session,
)
from .languages import JUDGE0_LANGUAGE_IDS, get_judge0_language_id
from .problem import ProblemService, get_problem_service

__all__ = [
    "UserService",
    "get_user_service",
    "SessionFromCookie",
    "get_current_user",
    "SESSION_COOKIE_NAME",
    "SESSION_EXPIRY",
    "decode_token",
    "encode_token",
    "generate_password_hash",
    "issue_session",
    "verify_password",
    "verify_session",
    "JUDGE0_LANGUAGE_IDS",
    "get_judge0_language_id",
    "ProblemService",
    "get_problem_service",
]
