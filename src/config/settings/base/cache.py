"""Settings do cache de access_token.

O access_token sobrevive entre requests; o backend define onde ele vive.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

CacheBackend = Literal["file", "memory", "redis"]

VALID_CACHE_BACKENDS = ("file", "memory", "redis")


@dataclass(frozen=True)
class CacheSettings:
    """Configurações do cache de access_token.

    Attributes:
        backend: Backend do cache (file|memory|redis)
        namespace: Prefixo das chaves (chave final: <namespace>.access_token)
        directory: Diretório dos arquivos de cache (backend file)
    """

    backend: CacheBackend = "file"
    namespace: str = "wechat"
    directory: str = field(default_factory=tempfile.gettempdir)

    @property
    def access_token_key(self) -> str:
        """Chave do access_token no cache."""
        return f"{self.namespace}.access_token"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de cache.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in VALID_CACHE_BACKENDS:
            errors.append(f"WECHAT_CACHE_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.is_development:
            errors.append(
                "WECHAT_CACHE_BACKEND=memory proibido em staging/production. "
                "Use file ou redis."
            )

        if self.backend == "redis" and not base.redis_url:
            errors.append("WECHAT_CACHE_BACKEND=redis requer REDIS_URL configurado")

        if not self.namespace:
            errors.append("WECHAT_CACHE_NAMESPACE não pode ser vazio")

        return errors


def _load_cache_from_env() -> CacheSettings:
    """Carrega CacheSettings de variáveis de ambiente."""
    backend_str = os.getenv("WECHAT_CACHE_BACKEND", "file").lower()
    backend: CacheBackend = backend_str if backend_str in VALID_CACHE_BACKENDS else "file"
    return CacheSettings(
        backend=backend,
        namespace=os.getenv("WECHAT_CACHE_NAMESPACE", "wechat"),
        directory=os.getenv("WECHAT_CACHE_DIR") or tempfile.gettempdir(),
    )


@lru_cache(maxsize=1)
def get_cache_settings() -> CacheSettings:
    """Retorna instância cacheada de CacheSettings."""
    return _load_cache_from_env()
