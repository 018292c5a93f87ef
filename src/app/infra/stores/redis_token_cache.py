"""Redis Token Cache — access_token compartilhado entre instâncias.

Usa SETEX para gravar valor e TTL numa única operação atômica; a expiração
fica a cargo do Redis.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.cache import DEFAULT_TOKEN_LIFETIME, AccessTokenCacheProtocol
from utils.errors import CacheWriteError, RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

# Prefixo para namespace do cache
TOKEN_CACHE_PREFIX = "wechat_cache:"


class RedisTokenCache(AccessTokenCacheProtocol):
    """Cache de access_token usando Redis assíncrono.

    Args:
        async_redis_client: Cliente Redis assíncrono
    """

    def __init__(self, async_redis_client: AsyncRedis[bytes]) -> None:
        self._async_redis = async_redis_client

    def _key(self, key: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{TOKEN_CACHE_PREFIX}{key}"

    async def get(self, key: str) -> str | None:
        """Lê o valor no Redis.

        Raises:
            RedisConnectionError: Se o Redis não responder.
        """
        try:
            data = await self._async_redis.get(self._key(key))
        except Exception as exc:
            raise RedisConnectionError("Falha ao consultar access_token no Redis") from exc
        if data is None:
            return None
        return data.decode("utf-8") if isinstance(data, bytes) else str(data)

    async def set(self, key: str, value: str, lifetime: int = DEFAULT_TOKEN_LIFETIME) -> None:
        """Grava o valor no Redis com TTL.

        Raises:
            CacheWriteError: Se o Redis recusar a escrita.
        """
        if lifetime <= 0:
            raise CacheWriteError("lifetime deve ser > 0 para o cache Redis")
        try:
            await self._async_redis.setex(self._key(key), lifetime, value)
        except Exception as exc:
            raise CacheWriteError("Falha ao gravar access_token no Redis") from exc
        logger.debug("token_cache_written", extra={"backend": "redis", "ttl": lifetime})
