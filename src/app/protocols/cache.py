"""Protocolo do cache de access_token.

Interface leve (ABC) dependida pelo gerenciador de access_token.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

DEFAULT_TOKEN_LIFETIME = 7200


class AccessTokenCacheProtocol(ABC):
    """Contrato mínimo assíncrono para o cache de access_token.

    Métodos canônicos:
    - get(key) -> str | None
      Retorna o valor se presente e não expirado.
    - set(key, value, lifetime) -> None
      Grava o valor com tempo de vida em segundos. Falhas de escrita levantam
      CacheWriteError.

    Leituras e escritas devem ser atômicas por chave: o cache é compartilhado
    por requests concorrentes.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Lê o valor da chave.

        Args:
            key: Chave (ex.: "wechat.access_token")

        Returns:
            Valor armazenado ou None se ausente/expirado.
        """

    @abstractmethod
    async def set(self, key: str, value: str, lifetime: int = DEFAULT_TOKEN_LIFETIME) -> None:
        """Grava o valor com TTL.

        Args:
            key: Chave
            value: Valor a armazenar
            lifetime: Tempo de vida em segundos

        Raises:
            CacheWriteError: Se o backend não conseguir persistir.
        """
