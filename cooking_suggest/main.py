import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cooking_suggest.clients.llm import build_client
from cooking_suggest.core import config
from cooking_suggest.core.logging import setup_logging
from cooking_suggest.core.middleware import RequestLoggingMiddleware
from cooking_suggest.routers import auth, health, recipes
from cooking_suggest.services.storage import RecipeStore, open_store

log = logging.getLogger("cooking_suggest")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Open the database once at startup unless a store was injected
    if app.state.store is None:
        app.state.store = open_store(config.DATABASE_PATH)
    if not config.JWT_SECRET_FROM_ENV:
        log.warning("JWT_SECRET not set, tokens will not survive a restart")
    yield


def create_app(store: Optional[RecipeStore] = None, llm_client: Optional[Any] = None) -> FastAPI:
    app = FastAPI(title="AI Cooking Suggest", lifespan=lifespan)
    app.state.store = store
    app.state.llm_client = llm_client if llm_client is not None else build_client()

    app.include_router(recipes.router)
    app.include_router(auth.router)
    app.include_router(health.router)

    setup_logging()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    return app


app = create_app()
