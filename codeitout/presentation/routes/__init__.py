from .auth import auth_router
from .problem import problem_router

__all__ = [
    "auth_router",
    "problem_router",
]
