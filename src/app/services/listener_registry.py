"""Registro de listeners e dispatch de mensagens/eventos.

Ordem de resolução de dispatch:
1. handlers coringa do domínio ("message.*" ou "event.*"), na ordem de registro;
2. handlers do subtipo ("message.text", "event.subscribe", ...), na ordem de registro.

O primeiro handler com resultado não-vazio encerra o dispatch; os seguintes
não são chamados. Handlers coringa funcionam como middleware: interceptam
qualquer mensagem do domínio antes da lógica específica.
"""

from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any

from app.constants.wechat import WILDCARD, ListenerDomain
from app.domain.messages import ListenerKey, StructuredMessage, resolve_listener_key

logger = logging.getLogger(__name__)

Handler = Callable[[StructuredMessage], Any]

# Resultado de dispatch para registro que não é mensagem nem evento
UNHANDLED = False


def is_empty_result(result: Any) -> bool:
    """None e string vazia contam como "sem resposta"."""
    return result is None or result == ""


class ListenerRegistry:
    """Tabela (domínio, subtipo) → handlers, em ordem de registro.

    Escritas são serializadas por lock; o dispatch itera sobre uma cópia, de
    modo que registros em runtime não interferem num dispatch em andamento.
    """

    def __init__(self) -> None:
        self._listeners: dict[ListenerKey, list[Handler]] = {}
        self._lock = threading.Lock()

    def register(
        self,
        domain: ListenerDomain | str,
        subtype: str | Handler | None = None,
        handler: Handler | None = None,
    ) -> bool:
        """Registra um handler.

        Aceita register(domain, handler) — subtipo "*" — ou
        register(domain, subtype, handler). Handler não-callable é ignorado.

        Raises:
            ValueError: Se o domínio não for "message" ou "event"

        Returns:
            True se registrado, False se ignorado
        """
        if handler is None and callable(subtype):
            subtype, handler = WILDCARD, subtype

        key = ListenerKey(ListenerDomain(domain), subtype if isinstance(subtype, str) else WILDCARD)

        if not callable(handler):
            logger.debug("listener_ignored_not_callable", extra={"listener_key": str(key)})
            return False

        with self._lock:
            self._listeners.setdefault(key, []).append(handler)
        logger.debug("listener_registered", extra={"listener_key": str(key)})
        return True

    def handlers_for(self, key: ListenerKey) -> list[Handler]:
        """Cópia dos handlers registrados na chave."""
        with self._lock:
            return list(self._listeners.get(key, ()))

    def listeners(self, key: ListenerKey | None = None) -> dict[str, list[Handler]] | list[Handler]:
        """Introspecção do registro.

        Sem chave: cópia de todo o registro, indexado por "domínio.subtipo".
        Com chave: cópia dos handlers daquela chave.
        """
        if key is not None:
            return self.handlers_for(key)
        with self._lock:
            return {str(k): list(handlers) for k, handlers in self._listeners.items()}

    async def call(self, key: ListenerKey, message: StructuredMessage) -> Any:
        """Chama os handlers da chave até o primeiro resultado não-vazio.

        Handlers assíncronos são aguardados.

        Returns:
            O primeiro resultado não-vazio, ou None
        """
        for handler in self.handlers_for(key):
            result = handler(message)
            if inspect.isawaitable(result):
                result = await result
            if not is_empty_result(result):
                logger.debug("listener_matched", extra={"listener_key": str(key)})
                return result
        return None

    async def dispatch(self, message: Mapping[str, Any]) -> Any:
        """Resolve e chama os handlers da mensagem.

        Returns:
            UNHANDLED (False) se o registro não é mensagem nem evento;
            None se nenhum handler respondeu; senão o resultado do handler
        """
        key = resolve_listener_key(message)
        if key is None:
            logger.debug("dispatch_unhandled")
            return UNHANDLED

        payload = dict(message)
        result = await self.call(key.wildcard(), payload)
        if not is_empty_result(result):
            return result

        if key.is_wildcard:
            return None
        return await self.call(key, payload)
