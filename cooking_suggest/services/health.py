# cooking_suggest/services/health.py
from __future__ import annotations

import time
from typing import Any, Dict, Optional

from cooking_suggest.core import config
from cooking_suggest.services.storage import RecipeStore


def _ms_since(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _check_result(status: str, latency_ms: int, error: Optional[str] = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {"status": status, "latency_ms": latency_ms}
    if error:
        out["error"] = error
    return out


def check_db(store: RecipeStore) -> Dict[str, Any]:
    start = time.perf_counter()
    if not store.durable:
        # recipes still work, but nothing survives a restart and auth is off
        return _check_result("degraded", _ms_since(start), "in-memory storage")
    try:
        store.ping()
        return _check_result("ok", _ms_since(start))
    except Exception as e:
        return _check_result("fail", _ms_since(start), str(e))


async def check_llm(llm_client: Any) -> Dict[str, Any]:
    start = time.perf_counter()
    try:
        await llm_client.ping()
        return _check_result("ok", _ms_since(start))
    except Exception as e:
        # degraded: generation won't work, listings and auth still do
        return _check_result("degraded", _ms_since(start), str(e))


def version_payload() -> Dict[str, Any]:
    return {
        "version": config.APP_VERSION,
        "git_sha": config.GIT_SHA,
        "build_date": config.BUILD_DATE,
    }
