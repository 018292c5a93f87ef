"""Access-Token Manager.

Fontes do access_token, em ordem:
1. cópia retida no ciclo de processamento corrente (ContextVar);
2. cache compartilhado, chave "<namespace>.access_token";
3. requisição ao endpoint de credencial (sem access_token na URL).

O token novo é gravado com validade expires_in - 2 segundos, absorvendo a
latência entre a emissão pela plataforma e a gravação local.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from utils.errors import ApiError, CacheWriteError, CredentialError, TransportError

if TYPE_CHECKING:
    from api.connectors.wechat.http_client import WechatApiClient
    from app.protocols.cache import AccessTokenCacheProtocol
    from config.settings import CacheSettings, WechatSettings

logger = logging.getLogger(__name__)

GRANT_TYPE = "client_credential"

# Margem subtraída do expires_in informado pela plataforma
EXPIRY_SAFETY_MARGIN_SECONDS = 2

_NO_CYCLE: dict[str, str] | None = None


class AccessTokenManager:
    """Obtém e reutiliza o access_token da conta.

    Args:
        settings: Credenciais (app_id, secret) e URL do endpoint de token
        cache_settings: Namespace da chave de cache
        cache: Cache compartilhado de access_token
        client: Executor outbound (usado com attach_token=False)
    """

    def __init__(
        self,
        settings: WechatSettings,
        cache_settings: CacheSettings,
        cache: AccessTokenCacheProtocol,
        client: WechatApiClient,
    ) -> None:
        self._settings = settings
        self._cache = cache
        self._client = client
        self._cache_key = cache_settings.access_token_key
        self._refresh_lock = asyncio.Lock()
        # Cópia retida por ciclo; cada manager tem a sua variável
        self._held: ContextVar[dict[str, str] | None] = ContextVar(
            f"wechat_access_token_{id(self)}", default=_NO_CYCLE
        )

    @property
    def cache_key(self) -> str:
        return self._cache_key

    @contextmanager
    def processing_cycle(self) -> Iterator[None]:
        """Abre o escopo em que o token obtido fica retido.

        O escopo é context-local: requisições concorrentes nunca compartilham
        a cópia retida. Ao sair, a cópia é descartada.
        """
        reset_token = self._held.set({})
        try:
            yield
        finally:
            self._held.reset(reset_token)

    def _held_token(self) -> str | None:
        held = self._held.get()
        if held is None:
            return None
        return held.get("token")

    def _hold(self, token: str) -> None:
        held = self._held.get()
        if held is not None:
            held["token"] = token

    async def get_token(self) -> str:
        """Retorna um access_token válido.

        Raises:
            CredentialError: Falha ao obter o token da plataforma
        """
        token = self._held_token()
        if token:
            return token

        token = await self._cache.get(self._cache_key)
        if token:
            self._hold(token)
            return token

        async with self._refresh_lock:
            # Outra coroutine pode ter renovado enquanto aguardávamos
            token = await self._cache.get(self._cache_key)
            if not token:
                token = await self._refresh()
        self._hold(token)
        return token

    async def _refresh(self) -> str:
        query = {
            "appid": self._settings.app_id,
            "secret": self._settings.secret,
            "grant_type": GRANT_TYPE,
        }
        try:
            result = await self._client.request(
                "GET",
                self._settings.token_endpoint,
                query=query,
                attach_token=False,
            )
        except (TransportError, ApiError) as exc:
            logger.warning(
                "access_token_refresh_failed",
                extra={"error_type": type(exc).__name__, "error": str(exc)},
            )
            raise CredentialError(f"failed to fetch access token: {exc}") from exc

        token, expires_in = self._parse_token_response(result)
        lifetime = expires_in - EXPIRY_SAFETY_MARGIN_SECONDS

        try:
            await self._cache.set(self._cache_key, token, lifetime)
        except CacheWriteError as exc:
            raise CredentialError(f"failed to store access token: {exc}") from exc

        logger.info("access_token_refreshed", extra={"expires_in": expires_in})
        return token

    @staticmethod
    def _parse_token_response(result: Any) -> tuple[str, int]:
        if not isinstance(result, dict):
            raise CredentialError("unexpected credential response")

        token = result.get("access_token")
        expires_in = result.get("expires_in")
        if not token or expires_in is None:
            logger.warning("access_token_response_incomplete")
            raise CredentialError("credential response missing access_token or expires_in")

        try:
            return str(token), int(expires_in)
        except (TypeError, ValueError) as exc:
            raise CredentialError("invalid expires_in in credential response") from exc
