"""Executor outbound da API WeChat.

Monta a URL (anexando access_token quando pedido), envia pelo transporte e
decodifica o envelope uniforme da plataforma:
- corpo vazio → TransportError("no response from server")
- {"errcode": ..., "errmsg": "ok"} → True
- errcode de erro → ApiError(code, message)
- demais respostas → o JSON decodificado
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from api.connectors.wechat.api_errors import has_error_envelope, parse_wechat_error
from api.connectors.wechat.api_logging import log_api_error, log_success, log_transport_error
from app.infra.http import HttpError
from utils.errors import ApiError, TransportError

if TYPE_CHECKING:
    from app.protocols.http_client import HttpTransportProtocol

logger: logging.Logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Awaitable[str]]

# Resultado decodificado: True (ack) ou o JSON da resposta
OutboundResult = bool | dict[str, Any]


def build_url(
    url: str,
    query: Mapping[str, Any] | None = None,
    access_token: str | None = None,
) -> str:
    """Monta a URL final com query string.

    Função pura: o access_token só entra na URL quando passado explicitamente.
    """
    queries = dict(query or {})
    if access_token is not None:
        queries["access_token"] = access_token
    if not queries:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(queries)}"


def decode_response(body: bytes | str | None, method: str, endpoint: str) -> OutboundResult:
    """Decodifica o envelope uniforme da plataforma.

    Raises:
        TransportError: Corpo vazio ou não-JSON
        ApiError: errcode de erro
    """
    if not body or not body.strip():
        log_transport_error("no_response", method, endpoint)
        raise TransportError("no response from server")

    try:
        contents = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        log_transport_error("invalid_json", method, endpoint)
        raise TransportError("invalid JSON response from server") from exc

    if has_error_envelope(contents):
        api_error = parse_wechat_error(contents)
        if api_error is None:
            log_success(method, endpoint)
            return True
        log_api_error(api_error, method, endpoint)
        raise ApiError(api_error.error_code, api_error.error_message)

    log_success(method, endpoint)
    return contents


class WechatApiClient:
    """Executor das chamadas à API outbound.

    Args:
        transport: Transporte HTTP (send → corpo bruto)
        token_provider: Coroutine que devolve um access_token válido; obrigatório
            para chamadas com attach_token=True
    """

    def __init__(
        self,
        transport: HttpTransportProtocol,
        token_provider: TokenProvider | None = None,
    ) -> None:
        self._transport = transport
        self._token_provider = token_provider

    async def make_url(
        self,
        url: str,
        query: Mapping[str, Any] | None = None,
        *,
        attach_token: bool = True,
    ) -> str:
        """Monta a URL, obtendo o access_token apenas se attach_token=True."""
        if not attach_token:
            return build_url(url, query)
        if self._token_provider is None:
            raise RuntimeError("token_provider não configurado para chamadas autenticadas")
        return build_url(url, query, await self._token_provider())

    async def request(
        self,
        method: str,
        url: str,
        params: Mapping[str, Any] | None = None,
        files: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        *,
        query: Mapping[str, Any] | None = None,
        attach_token: bool = True,
    ) -> OutboundResult:
        """Executa a chamada e decodifica a resposta.

        Raises:
            CredentialError: access_token indisponível (via token_provider)
            TransportError: Falha de rede, corpo vazio ou não-JSON
            ApiError: errcode de erro retornado pela plataforma
        """
        full_url = await self.make_url(url, query, attach_token=attach_token)
        method = method.upper()
        try:
            body = await self._transport.send(method, full_url, params, headers, files)
        except HttpError as exc:
            log_transport_error(str(exc), method, url)
            raise TransportError(f"transport failure: {exc}") from exc

        return decode_response(body, method, url)

    async def get(self, url: str, query: Mapping[str, Any] | None = None) -> OutboundResult:
        return await self.request("GET", url, query=query)

    async def post(
        self,
        url: str,
        params: Mapping[str, Any] | None = None,
        files: Mapping[str, str] | None = None,
        query: Mapping[str, Any] | None = None,
    ) -> OutboundResult:
        return await self.request("POST", url, params, files, query=query)

