"""Aplicação ASGI do callback WeChat.

    uvicorn app.app:app --host 0.0.0.0 --port 8080

Rotas:
    GET  /wechat/callback  handshake (echostr)
    POST /wechat/callback  mensagens e eventos
    GET  /health, /ready
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api.routes import create_api_router
from app.bootstrap import SERVICE_NAME, initialize_app, validate_runtime_settings
from app.bootstrap.clients import create_async_redis_client
from config.logging import get_logger
from config.settings import get_cache_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from redis.asyncio import Redis as AsyncRedis

initialize_app()

logger = get_logger(__name__)


def _open_cache_client() -> AsyncRedis[bytes] | None:
    """Abre o Redis apenas quando ele é o backend do cache de access_token."""
    backend = get_cache_settings().backend
    if backend != "redis":
        logger.info("token_cache_backend", extra={"backend": backend})
        return None
    try:
        return create_async_redis_client()
    except ValueError as exc:
        logger.warning("redis_client_not_ready", extra={"error": str(exc)})
        return None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    validate_runtime_settings()
    app.state.redis_client = _open_cache_client()
    logger.info("app_started", extra={"service": SERVICE_NAME})

    yield

    redis_client = app.state.redis_client
    if redis_client is not None:
        await redis_client.aclose()
    logger.info("app_stopped", extra={"service": SERVICE_NAME})


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title="wechat-callback",
        description="Callback e cliente outbound de conta oficial WeChat",
        version="1.0.0",
        lifespan=lifespan,
    )
    fastapi_app.include_router(create_api_router())
    return fastapi_app


app = create_app()


def main() -> None:
    """Executa o serviço localmente com reload."""
    import uvicorn

    uvicorn.run("app.app:app", host="0.0.0.0", port=8080, reload=True)


if __name__ == "__main__":
    main()
