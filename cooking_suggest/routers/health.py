# cooking_suggest/routers/health.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse

from cooking_suggest.core.auth import get_llm_client, get_store
from cooking_suggest.services.health import check_db, check_llm, version_payload
from cooking_suggest.services.storage import RecipeStore

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "AI Cooking Suggest Backend Running"


@router.get("/health")
def health():
    # Liveness only: if the process is serving requests, it's up
    return {"status": "ok", **version_payload()}


@router.get("/health/ready")
async def ready(
    response: Response,
    store: RecipeStore = Depends(get_store),
    llm_client: Any = Depends(get_llm_client),
):
    db = check_db(store)
    llm = await check_llm(llm_client)

    overall = "ok"
    http_status = status.HTTP_200_OK

    # Storage failing outright is fatal; in-memory fallback or a down provider is not
    if db["status"] == "fail":
        overall = "fail"
        http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    elif db["status"] != "ok" or llm["status"] != "ok":
        overall = "degraded"

    response.status_code = http_status
    return {
        "status": overall,
        "checks": {"db": db, "llm": llm},
        **version_payload(),
    }


@router.get("/version")
def version():
    return version_payload()
