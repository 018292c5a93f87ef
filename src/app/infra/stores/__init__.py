"""Stores — implementações concretas do cache de access_token.

Módulos disponíveis:
    - file_token_cache: cache em arquivo (padrão)
    - redis_token_cache: cache compartilhado em Redis
    - callback_token_cache: leitor/escritor fornecidos pela aplicação
    - memory_stores: cache em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.callback_token_cache import CallbackTokenCache
from app.infra.stores.file_token_cache import FileTokenCache
from app.infra.stores.memory_stores import MemoryTokenCache
from app.infra.stores.redis_token_cache import RedisTokenCache

__all__ = [
    "CallbackTokenCache",
    "FileTokenCache",
    # Memory (dev/test)
    "MemoryTokenCache",
    # Redis
    "RedisTokenCache",
]
