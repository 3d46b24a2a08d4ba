# cooking_suggest/services/auth.py
from __future__ import annotations

import logging

from fastapi import HTTPException

from cooking_suggest.core.security import create_access_token, hash_password, verify_password
from cooking_suggest.models.user import AuthResponse, LoginRequest, RegisterRequest, UserOut, UserRecord
from cooking_suggest.services.storage import (
    DuplicateUserError,
    RecipeStore,
    StorageError,
    StorageUnavailable,
)

log = logging.getLogger("cooking_suggest.auth")


def _auth_response(message: str, user: UserRecord) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=create_access_token(user.id, user.username),
        user=UserOut(id=user.id, username=user.username, email=user.email),
    )


def register_user(store: RecipeStore, req: RegisterRequest) -> AuthResponse:
    username = req.username.strip()
    email = req.email.strip()

    try:
        if store.find_user(email=email, username=username):
            raise HTTPException(status_code=400, detail="User already exists")
        user = store.insert_user(
            username=username,
            email=email,
            password_hash=hash_password(req.password),
        )
    except StorageUnavailable:
        raise HTTPException(status_code=500, detail="Database not available")
    except DuplicateUserError:
        raise HTTPException(status_code=400, detail="User already exists")
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Failed to create user: {e}")

    log.info("user registered", extra={"user_id": user.id})
    return _auth_response("User created successfully", user)


def login_user(store: RecipeStore, req: LoginRequest) -> AuthResponse:
    try:
        user = store.find_user(email=req.email.strip())
    except StorageUnavailable:
        raise HTTPException(status_code=500, detail="Database not available")
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Login failed: {e}")

    if user is None or not verify_password(req.password, user.password_hash):
        raise HTTPException(status_code=400, detail="Invalid credentials")

    return _auth_response("Login successful", user)
