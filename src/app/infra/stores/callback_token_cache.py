"""Cache com leitor/escritor fornecidos pela aplicação.

Permite plugar qualquer armazenamento (banco, memcached, framework web) sem
escrever uma classe: basta registrar as funções. Quando uma delas não foi
registrada, a operação cai no cache de fallback.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from app.protocols.cache import DEFAULT_TOKEN_LIFETIME, AccessTokenCacheProtocol
from utils.errors import CacheWriteError

CacheGetter = Callable[[str], "str | None | Awaitable[str | None]"]
CacheSetter = Callable[[str, str, int], "Any | Awaitable[Any]"]


class CallbackTokenCache(AccessTokenCacheProtocol):
    """Cache delegando para callables da aplicação.

    Args:
        fallback: Cache usado quando getter/setter não foram registrados
    """

    def __init__(self, fallback: AccessTokenCacheProtocol) -> None:
        self._fallback = fallback
        self._getter: CacheGetter | None = None
        self._setter: CacheSetter | None = None

    def cache_getter(self, handler: object) -> None:
        """Registra o leitor. Valores não-callable são ignorados."""
        if callable(handler):
            self._getter = handler  # type: ignore[assignment]

    def cache_setter(self, handler: object) -> None:
        """Registra o escritor. Valores não-callable são ignorados."""
        if callable(handler):
            self._setter = handler  # type: ignore[assignment]

    async def get(self, key: str) -> str | None:
        if self._getter is None:
            return await self._fallback.get(key)
        result = self._getter(key)
        if inspect.isawaitable(result):
            result = await result
        return result or None

    async def set(self, key: str, value: str, lifetime: int = DEFAULT_TOKEN_LIFETIME) -> None:
        if self._setter is None:
            await self._fallback.set(key, value, lifetime)
            return
        try:
            result = self._setter(key, value, lifetime)
            if inspect.isawaitable(result):
                await result
        except CacheWriteError:
            raise
        except Exception as exc:
            raise CacheWriteError("Escritor do cache falhou ao gravar access_token") from exc
