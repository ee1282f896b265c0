from .base import APIModel, BaseModel, utc_now
from .enums import Difficulty, UserRole
from .user import User
from .problem import (
    Problem,
    ProblemCreate,
    ProblemCreatedResponse,
    ProblemExample,
    ProblemResponse,
    ReferenceSolution,
    TestCase,
)
from .judge import (
    STATUS_ACCEPTED,
    JudgeResult,
    JudgeStatus,
    SubmissionUnit,
)
from .auth import (
    AuthResponse,
    MessageResponse,
    UserCreateModel,
    UserLoginModel,
    UserResponseModel,
)

__all__ = [
    "APIModel",
    "BaseModel",
    "utc_now",
    "Difficulty",
    "UserRole",
    "User",
    "Problem",
    "ProblemCreate",
    "ProblemCreatedResponse",
    "ProblemExample",
    "ProblemResponse",
    "ReferenceSolution",
    "TestCase",
    "STATUS_ACCEPTED",
    "JudgeResult",
    "JudgeStatus",
    "SubmissionUnit",
    "AuthResponse",
    "MessageResponse",
    "UserCreateModel",
    "UserLoginModel",
    "UserResponseModel",
]
