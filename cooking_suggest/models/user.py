# cooking_suggest/models/user.py
from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: str
    password: str


class UserRecord(BaseModel):
    id: int
    username: str
    email: str
    password_hash: str
    created_at: datetime


class UserOut(BaseModel):
    id: int
    username: str
    email: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserOut
