"""Factories do cache de access_token baseadas em configuração de ambiente."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_async_redis_client
from app.infra.stores import FileTokenCache, MemoryTokenCache, RedisTokenCache
from config.settings import get_base_settings, get_cache_settings

if TYPE_CHECKING:
    from app.protocols.cache import AccessTokenCacheProtocol
    from config.settings import CacheSettings

logger = logging.getLogger(__name__)


def create_token_cache(settings: CacheSettings | None = None) -> AccessTokenCacheProtocol:
    """Cria o cache de access_token conforme WECHAT_CACHE_BACKEND.

    Raises:
        ValueError: Backend inválido ou REDIS_URL ausente para backend redis
    """
    cache_settings = settings or get_cache_settings()
    backend = cache_settings.backend

    if backend == "file":
        cache = FileTokenCache(cache_settings.namespace, cache_settings.directory)
        logger.info(
            "token_cache_created",
            extra={"backend": "file", "directory": cache_settings.directory},
        )
        return cache

    if backend == "redis":
        cache = RedisTokenCache(create_async_redis_client())
        logger.info("token_cache_created", extra={"backend": "redis"})
        return cache

    if backend == "memory":
        base = get_base_settings()
        if not base.is_development:
            logger.warning(
                "memory_cache_in_non_dev",
                extra={"backend": "memory", "environment": base.environment},
            )
        logger.info("token_cache_created", extra={"backend": "memory"})
        return MemoryTokenCache()

    msg = f"WECHAT_CACHE_BACKEND inválido: {backend}"
    raise ValueError(msg)
