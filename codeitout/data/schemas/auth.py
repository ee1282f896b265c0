import uuid
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from codeitout.data.schemas.enums import UserRole


class UserCreateModel(BaseModel):
    email: EmailStr = Field(..., examples=["ada@example.com"])
    password: str = Field(
        ...,
        min_length=6,
        max_length=64,
        examples=["Str0ngP@ss!"],
    )
    name: Optional[str] = Field(None, max_length=100, examples=["Ada Lovelace"])


class UserLoginModel(BaseModel):
    email: EmailStr = Field(..., examples=["ada@example.com"])
    password: str = Field(..., min_length=1, max_length=64)


class UserResponseModel(BaseModel):
    id: uuid.UUID
    email: str
    name: Optional[str] = None
    role: UserRole
    image: Optional[str] = None

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    message: str
    user: UserResponseModel


class MessageResponse(BaseModel):
    message: str
