from .database import get_session, init_db
from .judge_client import JudgeClient, get_judge_client
from .problem import ProblemRepository, get_problem_repository
from .user_repository import UserRepository, get_user_repository

__all__ = [
    "get_session",
    "init_db",
    "JudgeClient",
    "get_judge_client",
    "ProblemRepository",
    "get_problem_repository",
    "UserRepository",
    "get_user_repository",
]
