"""Cache em memória — apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios e
sem compartilhamento entre processos.
"""

from __future__ import annotations

import threading
import time

from app.protocols.cache import DEFAULT_TOKEN_LIFETIME, AccessTokenCacheProtocol


class MemoryTokenCache(AccessTokenCacheProtocol):
    """Cache de access_token em memória — apenas para dev/test."""

    def __init__(self) -> None:
        self._store: dict[str, tuple[str, float]] = {}  # key -> (value, expires_at)
        self._lock = threading.Lock()

    def _get_sync(self, key: str) -> str | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if time.time() >= expires_at:
                del self._store[key]
                return None
            return value

    def _set_sync(self, key: str, value: str, lifetime: int) -> None:
        with self._lock:
            self._store[key] = (value, time.time() + lifetime)

    def expires_at(self, key: str) -> float | None:
        """Instante de expiração da chave (apenas para testes)."""
        entry = self._store.get(key)
        return entry[1] if entry else None

    async def get(self, key: str) -> str | None:
        """Lê o valor da memória."""
        return self._get_sync(key)

    async def set(self, key: str, value: str, lifetime: int = DEFAULT_TOKEN_LIFETIME) -> None:
        """Grava o valor na memória."""
        self._set_sync(key, value, lifetime)
