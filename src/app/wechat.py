"""Núcleo do protocolo de callback WeChat.

Fluxo de um callback (serve):
1. assinatura do request (AuthenticationError se divergente);
2. probe de verificação → echostr literal;
3. decodificação do payload (modo seguro via crypt);
4. dispatch aos listeners (erros vão para o hook on_error, se houver);
5. composição da resposta (cifrada em modo seguro).

Tudo roda dentro de um ciclo de processamento do access_token, de modo que
chamadas outbound feitas pelos handlers reutilizam o mesmo token.

Uso:
    wechat = Wechat(get_wechat_settings())
    wechat.message("text", lambda msg: f"eco: {msg['Content']}")
    reply = await wechat.serve(envelope)
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from api.connectors.wechat.http_client import OutboundResult, WechatApiClient
from api.connectors.wechat.signature import check_request_signature
from api.connectors.wechat.webhook import decode_payload, verify_handshake
from app.constants.wechat import ListenerDomain
from app.infra.http import HttpClient, HttpClientConfig
from app.services.access_token import AccessTokenManager
from app.services.listener_registry import UNHANDLED, Handler, ListenerRegistry
from app.services.response_composer import compose_response
from app.services.service_locator import ServiceFactory, ServiceLocator
from config.settings import get_cache_settings, get_wechat_settings
from utils.errors import ConfigurationError

if TYPE_CHECKING:
    from app.domain.messages import InboundEnvelope, ListenerKey
    from app.infra.stores import CallbackTokenCache
    from app.protocols.cache import AccessTokenCacheProtocol
    from app.protocols.crypto import MessageCryptProtocol
    from app.protocols.http_client import HttpTransportProtocol
    from app.services.staff import StaffService
    from config.settings import CacheSettings, WechatSettings

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[Exception], Any]


class Wechat:
    """Engine de callback + cliente outbound de uma conta oficial.

    Args:
        settings: Credenciais da conta (app_id, secret e token obrigatórios)
        cache_settings: Backend/namespace do cache de access_token
        cache: Cache de access_token pré-construído (substitui o backend configurado)
        transport: Transporte HTTP (padrão: httpx com retry/backoff)

    Raises:
        ConfigurationError: app_id, secret ou token ausentes
    """

    def __init__(
        self,
        settings: WechatSettings | None = None,
        cache_settings: CacheSettings | None = None,
        *,
        cache: AccessTokenCacheProtocol | None = None,
        transport: HttpTransportProtocol | None = None,
    ) -> None:
        self._settings = settings or get_wechat_settings()
        missing = self._settings.missing_required()
        if missing:
            raise ConfigurationError(f"Configuração obrigatória ausente: {', '.join(missing)}")

        self._cache_settings = cache_settings or get_cache_settings()
        self._registry = ListenerRegistry()
        self._error_handler: ErrorHandler | None = None

        credential_transport = transport
        if transport is None:
            timeout = self._settings.request_timeout_seconds
            transport = HttpClient(HttpClientConfig(timeout_seconds=timeout, max_retries=self._settings.max_retries))
            # Renovação de credencial sem retry interno
            credential_transport = HttpClient(HttpClientConfig(timeout_seconds=timeout, max_retries=0))
        self._client = WechatApiClient(transport, self.get_access_token)
        self._credential_client = WechatApiClient(credential_transport)

        self._locator: ServiceLocator[Wechat] = ServiceLocator(self)
        register_default_services(self._locator, cache)

    # ── Configuração ─────────────────────────────────────────────────────────

    @property
    def settings(self) -> WechatSettings:
        return self._settings

    @property
    def cache_settings(self) -> CacheSettings:
        return self._cache_settings

    @property
    def client(self) -> WechatApiClient:
        return self._client

    @property
    def credential_client(self) -> WechatApiClient:
        """Executor sem access_token e sem retry, usado na renovação do token."""
        return self._credential_client

    @property
    def tokens(self) -> AccessTokenManager:
        return self.resolve("access_token")

    @property
    def staff(self) -> StaffService:
        return self.resolve("staff")

    # ── Listeners ────────────────────────────────────────────────────────────

    def on(
        self,
        domain: ListenerDomain | str,
        subtype: str | Handler | None = None,
        handler: Handler | None = None,
    ) -> bool:
        """Registra um listener (ver ListenerRegistry.register)."""
        return self._registry.register(domain, subtype, handler)

    def message(self, subtype: str | Handler, handler: Handler | None = None) -> bool:
        """Listener de mensagens do usuário; message(handler) registra o coringa."""
        return self.on(ListenerDomain.MESSAGE, subtype, handler)

    def event(self, subtype: str | Handler, handler: Handler | None = None) -> bool:
        """Listener de eventos da plataforma; event(handler) registra o coringa."""
        return self.on(ListenerDomain.EVENT, subtype, handler)

    def listeners(self, key: ListenerKey | None = None) -> Any:
        return self._registry.listeners(key)

    def on_error(self, handler: object) -> bool:
        """Define o hook de erros de dispatch. Valores não-callable são ignorados."""
        if not callable(handler):
            return False
        self._error_handler = handler  # type: ignore[assignment]
        return True

    # ── Serviços ─────────────────────────────────────────────────────────────

    def register_service(self, name: str, factory: ServiceFactory[Wechat]) -> None:
        self._locator.register(name, factory)

    def resolve(self, name: str) -> Any:
        """Resolve um serviço auxiliar por nome (cache, crypt, staff, ...).

        Raises:
            ConfigurationError: Serviço desconhecido
        """
        return self._locator.resolve(name)

    def cache_getter(self, handler: object) -> None:
        """Registra leitor de cache da aplicação para o access_token."""
        cache: CallbackTokenCache = self.resolve("cache")
        cache.cache_getter(handler)

    def cache_setter(self, handler: object) -> None:
        """Registra escritor de cache da aplicação para o access_token."""
        cache: CallbackTokenCache = self.resolve("cache")
        cache.cache_setter(handler)

    # ── Outbound ─────────────────────────────────────────────────────────────

    async def get_access_token(self) -> str:
        """Retorna um access_token válido (ciclo → cache → plataforma)."""
        return await self.tokens.get_token()

    async def make_url(
        self,
        url: str,
        query: Mapping[str, Any] | None = None,
        *,
        attach_token: bool = True,
    ) -> str:
        return await self._client.make_url(url, query, attach_token=attach_token)

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
        """Chamada outbound com o envelope de erro da plataforma decodificado.

        Raises:
            CredentialError: access_token indisponível
            TransportError: Falha de rede ou resposta vazia/inválida
            ApiError: errcode de erro
        """
        return await self._client.request(
            method,
            url,
            params,
            files,
            headers,
            query=query,
            attach_token=attach_token,
        )

    # ── Inbound ──────────────────────────────────────────────────────────────

    def _crypt(self) -> MessageCryptProtocol:
        return self.resolve("crypt")

    async def serve(self, envelope: InboundEnvelope) -> str:
        """Processa um callback e retorna o corpo da resposta.

        Raises:
            AuthenticationError: Assinatura inválida
            FormatError: XML mal-formado
            DecryptionError: Envelope cifrado inválido
            Exception: Erro de handler, quando não há hook on_error
        """
        if envelope.is_handshake:
            echostr = verify_handshake(envelope, self._settings.token)
            logger.info("callback_handshake_verified")
            return echostr

        check_request_signature(
            self._settings.token,
            envelope.timestamp,
            envelope.nonce,
            envelope.signature,
        )

        with self.tokens.processing_cycle():
            decoded = decode_payload(envelope, self._crypt)

            try:
                result = await self._registry.dispatch(decoded.message)
            except Exception as exc:
                if self._error_handler is None:
                    raise
                logger.warning(
                    "listener_failed",
                    extra={"error_type": type(exc).__name__, "msg_type": decoded.message.get("MsgType")},
                )
                outcome = self._error_handler(exc)
                if inspect.isawaitable(outcome):
                    await outcome
                return ""

            if result is UNHANDLED:
                logger.info("callback_unhandled", extra={"msg_type": decoded.message.get("MsgType")})
                return ""

            return compose_response(
                result,
                decoded.message,
                secured=decoded.secured,
                envelope=envelope,
                crypt_resolver=self._crypt,
            )


# ──────────────────────────────────────────────────────────────────────────────
# Serviços padrão
# ──────────────────────────────────────────────────────────────────────────────


def register_default_services(
    locator: ServiceLocator[Wechat],
    cache: AccessTokenCacheProtocol | None = None,
) -> None:
    """Registra as capacidades padrão do núcleo: cache, access_token, crypt e staff."""

    def _cache(core: Wechat) -> CallbackTokenCache:
        from app.bootstrap.dependencies_stores import create_token_cache
        from app.infra.stores import CallbackTokenCache

        backend = cache if cache is not None else create_token_cache(core.cache_settings)
        return CallbackTokenCache(backend)

    locator.register("cache", _cache)
    locator.register("access_token", _access_token)
    locator.register("crypt", _crypt)
    locator.register("staff", _staff)


def _access_token(core: Wechat) -> AccessTokenManager:
    return AccessTokenManager(
        core.settings,
        core.cache_settings,
        core.resolve("cache"),
        core.credential_client,
    )


def _crypt(core: Wechat) -> MessageCryptProtocol:
    from app.infra.crypto import WechatMessageCrypt

    settings = core.settings
    return WechatMessageCrypt(settings.token, settings.aes_key, settings.app_id)


def _staff(core: Wechat) -> StaffService:
    from app.services.staff import StaffService

    return StaffService(core.client, core.settings.api_base_url)
