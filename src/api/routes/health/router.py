"""Liveness e readiness do serviço de callback."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.bootstrap import collect_settings_errors
from config.settings import get_cache_settings

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE = "wechat-callback"
REDIS_PING_TIMEOUT_SECONDS = 2.0

CheckStatus = Literal["ok", "skipped", "failed"]


class HealthResponse(BaseModel):
    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


class CheckResult(BaseModel):
    status: CheckStatus
    latency_ms: float | None = None
    error: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness: o processo responde."""
    return HealthResponse(
        status="healthy",
        service=SERVICE,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness: settings válidas e cache de access_token alcançável.

    Redis só é checado quando é o backend do cache; nos demais casos `skipped`.
    """
    checks = {
        "settings": _check_settings(),
        "token_cache": await _check_token_cache(getattr(request.app.state, "redis_client", None)),
    }
    ready = all(check.status != "failed" for check in checks.values())

    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {name: check.model_dump() for name, check in checks.items()},
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


def _check_settings() -> CheckResult:
    errors = collect_settings_errors()
    if errors:
        return CheckResult(status="failed", error=f"{len(errors)} erro(s) de configuração")
    return CheckResult(status="ok")


async def _check_token_cache(redis_client: Any | None) -> CheckResult:
    if get_cache_settings().backend != "redis":
        return CheckResult(status="skipped")
    if redis_client is None:
        return CheckResult(status="failed", error="not_configured")

    started_at = time.perf_counter()
    try:
        await asyncio.wait_for(redis_client.ping(), timeout=REDIS_PING_TIMEOUT_SECONDS)
    except TimeoutError:
        return CheckResult(status="failed", error="timeout")
    except Exception as exc:
        logger.warning("readiness_redis_check_failed", extra={"error_type": type(exc).__name__})
        return CheckResult(status="failed", error=type(exc).__name__)
    return CheckResult(status="ok", latency_ms=round((time.perf_counter() - started_at) * 1000, 2))
