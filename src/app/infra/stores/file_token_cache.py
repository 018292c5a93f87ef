"""Cache de access_token em arquivo — backend padrão.

Um arquivo JSON por chave, nomeado por md5(namespace + key), dentro do
diretório configurado (tempdir do sistema por padrão). Compartilhado por todos
os processos da mesma máquina.

Formato do arquivo:
    {"token": "<valor>", "expired_at": <epoch seconds>}
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import os
import tempfile
import time
from pathlib import Path

from app.protocols.cache import DEFAULT_TOKEN_LIFETIME, AccessTokenCacheProtocol
from utils.errors import CacheWriteError

logger = logging.getLogger(__name__)


class FileTokenCache(AccessTokenCacheProtocol):
    """Cache de access_token persistido em arquivo por chave.

    Args:
        namespace: Prefixo usado no hash do nome do arquivo (ex.: app_id)
        directory: Diretório dos arquivos; tempdir do sistema se None
    """

    def __init__(self, namespace: str, directory: str | os.PathLike[str] | None = None) -> None:
        self._namespace = namespace
        self._directory = Path(directory) if directory else Path(tempfile.gettempdir())

    def path_for(self, key: str) -> Path:
        """Caminho do arquivo de cache da chave."""
        digest = hashlib.md5(f"{self._namespace}{key}".encode()).hexdigest()  # noqa: S324
        return self._directory / digest

    def _get_sync(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            # Arquivo corrompido conta como miss; a próxima escrita o substitui
            logger.warning("token_cache_read_failed", extra={"error_type": type(exc).__name__})
            return None

        if not isinstance(data, dict):
            return None
        expired_at = data.get("expired_at", 0)
        if not isinstance(expired_at, (int, float)) or expired_at <= time.time():
            return None
        token = data.get("token")
        return token if isinstance(token, str) and token else None

    def _set_sync(self, key: str, value: str, lifetime: int) -> None:
        path = self.path_for(key)
        payload = json.dumps({"token": value, "expired_at": time.time() + lifetime})
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            # Escrita atômica: arquivo temporário + replace
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{path.name}.")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, path)
        except OSError as exc:
            raise CacheWriteError("Falha ao gravar access_token no cache em arquivo") from exc

    async def get(self, key: str) -> str | None:
        """Lê o valor do arquivo (I/O em thread)."""
        return await asyncio.to_thread(self._get_sync, key)

    async def set(self, key: str, value: str, lifetime: int = DEFAULT_TOKEN_LIFETIME) -> None:
        """Grava o valor no arquivo (I/O em thread)."""
        await asyncio.to_thread(self._set_sync, key, value, lifetime)
