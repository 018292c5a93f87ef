"""Cliente Redis compartilhado pelo cache de access_token e pelo /ready."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from config.settings import get_base_settings

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def create_async_redis_client() -> AsyncRedis[bytes]:
    """Cria o cliente Redis assíncrono (um por processo).

    Raises:
        ValueError: REDIS_URL ausente
    """
    from redis.asyncio import Redis as AsyncRedis

    base = get_base_settings()
    if not base.redis_url:
        raise ValueError("REDIS_URL não configurado")

    client: AsyncRedis[bytes] = AsyncRedis.from_url(
        base.redis_url,
        decode_responses=False,
        socket_timeout=base.redis_timeout_seconds,
        socket_connect_timeout=base.redis_timeout_seconds,
    )
    logger.info("redis_client_created", extra={"timeout": base.redis_timeout_seconds})
    return client
