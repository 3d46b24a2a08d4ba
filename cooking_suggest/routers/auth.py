# cooking_suggest/routers/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from cooking_suggest.core.auth import get_store
from cooking_suggest.models.user import AuthResponse, LoginRequest, RegisterRequest
from cooking_suggest.services.auth import login_user, register_user
from cooking_suggest.services.storage import RecipeStore

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest, store: RecipeStore = Depends(get_store)) -> AuthResponse:
    return register_user(store, req)


@router.post("/login", response_model=AuthResponse)
def login(req: LoginRequest, store: RecipeStore = Depends(get_store)) -> AuthResponse:
    return login_user(store, req)
