# cooking_suggest/core/security.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from pydantic import BaseModel

from cooking_suggest.core import config

BCRYPT_ROUNDS = 10


class Identity(BaseModel):
    user_id: int
    username: str


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # malformed stored hash or over-long password
        return False


def create_access_token(user_id: int, username: str, expires_in: Optional[timedelta] = None) -> str:
    expires_in = expires_in if expires_in is not None else timedelta(hours=config.JWT_EXPIRES_HOURS)
    payload = {
        "userId": user_id,
        "username": username,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Identity]:
    """
    Verify signature and expiry. Returns None for anything that does not
    check out, including tokens missing the identity claims.
    """
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        return None

    user_id = payload.get("userId")
    username = payload.get("username")
    if not isinstance(user_id, int) or not isinstance(username, str):
        return None
    return Identity(user_id=user_id, username=username)
