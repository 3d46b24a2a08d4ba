# cooking_suggest/core/auth.py
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cooking_suggest.core.security import Identity, decode_access_token
from cooking_suggest.services.storage import RecipeStore

log = logging.getLogger("cooking_suggest.auth")

bearer_scheme = HTTPBearer(auto_error=False)


def get_store(request: Request) -> RecipeStore:
    return request.app.state.store


def get_llm_client(request: Request) -> Any:
    return request.app.state.llm_client


def optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Identity]:
    # Advisory: a bad token means anonymous, not an error.
    if credentials is None:
        return None
    identity = decode_access_token(credentials.credentials)
    if identity is None:
        log.info("invalid token, proceeding anonymously")
    return identity


def require_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Access token required")
    identity = decode_access_token(credentials.credentials)
    if identity is None:
        raise HTTPException(status_code=403, detail="Invalid token")
    return identity
