from datetime import datetime, timedelta, timezone
from typing import Any, Union
import uuid

import jwt
from passlib.context import CryptContext

from codeitout.config import Config
from codeitout.errors import InvalidSessionException

passwd_context = CryptContext(schemes=["bcrypt"])

SESSION_COOKIE_NAME = "jwt"
SESSION_EXPIRY = timedelta(days=7)


def generate_password_hash(password: str) -> str:
    return passwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return passwd_context.verify(password, password_hash)


def issue_session(user_id: Union[str, uuid.UUID]) -> str:
    payload = {
        "id": str(user_id),
        "exp": datetime.now(timezone.utc) + SESSION_EXPIRY,
    }
    return encode_token(payload)


def verify_session(token: str) -> str:
    """Return the user id carried by a valid session token."""
    token_data = decode_token(token)
    if not token_data or not token_data.get("id"):
        raise InvalidSessionException()
    return token_data["id"]


def encode_token(payload):
    return jwt.encode(
        payload=payload, key=Config.JWT_SECRET, algorithm=Config.JWT_ALGORITHM
    )


def decode_token(token: str) -> Any | None:
    try:
        token_data = jwt.decode(
            jwt=token, key=Config.JWT_SECRET, algorithms=[Config.JWT_ALGORITHM]
        )
        return token_data

    except jwt.PyJWTError as _:
        return None
