"""Cliente HTTP base (httpx) usado como transporte da API outbound."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_base_seconds: float = 2.0
    backoff_max_seconds: float = 30.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpError(Exception):
    """Erro de requisição HTTP sem dados sensíveis."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable


class HttpClient:
    """Transporte HTTP: envia o request e devolve o corpo bruto.

    Retenta 429/5xx e qualquer httpx.TransportError com backoff exponencial;
    outros status são devolvidos como estão para o executor decodificar o envelope.

    Args:
        config: Timeouts, retries e headers padrão
        transport: Transporte httpx alternativo (ex.: httpx.MockTransport em testes)
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._transport = transport

    async def send(
        self,
        method: str,
        url: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        files: Mapping[str, str] | None = None,
    ) -> bytes:
        """Executa o request e retorna o corpo da resposta (pode ser vazio).

        GET envia params como query; POST envia params como JSON UTF-8 ou,
        com arquivos, como multipart (params viram campos do formulário).

        Raises:
            HttpError: Falha de transporte ou status transitório após retries,
                ou arquivo de upload ilegível
        """
        try:
            request_kwargs, body_headers = await _build_request_kwargs(method, params, files)
        except OSError as exc:
            raise HttpError("http_upload_unreadable") from exc
        merged_headers = {**self._config.default_headers, **body_headers, **(headers or {})}

        for attempt in range(self._config.max_retries + 1):
            try:
                async with httpx.AsyncClient(
                    verify=self._config.verify_ssl,
                    transport=self._transport,
                ) as client:
                    response = await client.request(
                        method.upper(),
                        url,
                        headers=merged_headers,
                        timeout=self._config.timeout_seconds,
                        **request_kwargs,
                    )
                if response.status_code in (429,) or response.status_code >= 500:
                    raise HttpError(
                        "http_retryable_status",
                        status_code=response.status_code,
                        is_retryable=True,
                    )
                return response.content
            except HttpError as exc:
                if not exc.is_retryable or attempt >= self._config.max_retries:
                    raise
                await _backoff_sleep(
                    attempt,
                    self._config.backoff_base_seconds,
                    self._config.backoff_max_seconds,
                )
            except httpx.TransportError as exc:
                if attempt >= self._config.max_retries:
                    raise HttpError("http_connection_error", is_retryable=True) from exc
                await _backoff_sleep(
                    attempt,
                    self._config.backoff_base_seconds,
                    self._config.backoff_max_seconds,
                )
        raise HttpError("http_retry_exhausted", is_retryable=True)


async def _build_request_kwargs(
    method: str,
    params: Mapping[str, Any] | None,
    files: Mapping[str, str] | None,
) -> tuple[dict[str, Any], dict[str, str]]:
    if method.upper() == "GET":
        return ({"params": dict(params)} if params else {}), {}

    if files:
        uploads = {}
        for name, path in files.items():
            content = await asyncio.to_thread(Path(path).read_bytes)
            uploads[name] = (Path(path).name, content)
        return {"files": uploads, "data": dict(params or {})}, {}

    if params is None:
        return {}, {}
    # A plataforma exige UTF-8 literal no JSON (sem escapes \uXXXX)
    content = json.dumps(params, ensure_ascii=False).encode("utf-8")
    return {"content": content}, {"Content-Type": "application/json; charset=utf-8"}


async def _backoff_sleep(attempt: int, base: float, max_seconds: float) -> None:
    backoff = min((2**attempt) * base, max_seconds)
    logger.info("http_backoff", extra={"backoff_seconds": backoff})
    await asyncio.sleep(backoff)
