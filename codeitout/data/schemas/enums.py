from enum import Enum


class UserRole(str, Enum):
    """Roles a user account can hold."""
    USER = "USER"
    ADMIN = "ADMIN"


class Difficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"
