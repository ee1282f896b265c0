from typing import Optional

from sqlalchemy import Column, Enum, String
from sqlmodel import Field

from codeitout.data.schemas.base import BaseModel
from codeitout.data.schemas.enums import UserRole


class User(BaseModel, table=True):
    """Database model for a user."""

    __tablename__ = "users"

    email: str = Field(
        sa_column=Column(String(255), unique=True, index=True, nullable=False),
        description="Unique email address used to log in.",
    )
    password_hash: str = Field(
        sa_column=Column(String(256), nullable=False),
        exclude=True,
        description="Hashed user password.",
    )
    name: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
        description="Display name.",
    )
    role: UserRole = Field(
        default=UserRole.USER,
        sa_column=Column(Enum(UserRole), nullable=False, default=UserRole.USER),
    )
    image: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
        description="Avatar image reference.",
    )

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
