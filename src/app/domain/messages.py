"""Modelos do lado inbound: envelope do request, mensagem estruturada e chave de listener."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from app.constants.wechat import EVENT_MSG_TYPE, SECURED_ENCRYPT_TYPE, WILDCARD, ListenerDomain

# Campo -> valor decodificado do XML. Campos de topo são strings; blocos
# aninhados de alguns eventos chegam como dict/list.
StructuredMessage = dict[str, Any]


@dataclass(frozen=True)
class InboundEnvelope:
    """Request bruto entregue pela plataforma ao endpoint de callback.

    Attributes:
        raw_body: Corpo do POST (XML em texto puro ou envelope cifrado)
        query: Parâmetros de query (signature, timestamp, nonce, ...)
        form: Campos form-encoded do POST, quando houver
    """

    raw_body: bytes = b""
    query: Mapping[str, str] = field(default_factory=dict)
    form: Mapping[str, str] = field(default_factory=dict)

    @property
    def signature(self) -> str | None:
        return self.query.get("signature")

    @property
    def timestamp(self) -> str:
        return self.query.get("timestamp", "")

    @property
    def nonce(self) -> str:
        return self.query.get("nonce", "")

    @property
    def echostr(self) -> str | None:
        return self.query.get("echostr")

    @property
    def msg_signature(self) -> str:
        return self.query.get("msg_signature", "")

    @property
    def is_handshake(self) -> bool:
        """True para o probe de verificação (echostr presente)."""
        return "echostr" in self.query

    @property
    def is_secured(self) -> bool:
        """True quando o payload vem cifrado (encrypt_type=aes)."""
        return self.query.get("encrypt_type") == SECURED_ENCRYPT_TYPE


@dataclass(frozen=True, slots=True)
class ListenerKey:
    """Chave do registro de listeners: (domínio, subtipo).

    Raises:
        ValueError: Se o domínio não for "message" ou "event"
    """

    domain: ListenerDomain
    subtype: str = WILDCARD

    def __post_init__(self) -> None:
        # Aceita str e normaliza para o enum; domínio fora do conjunto é erro
        object.__setattr__(self, "domain", ListenerDomain(self.domain))
        object.__setattr__(self, "subtype", str(self.subtype))

    @property
    def is_wildcard(self) -> bool:
        return self.subtype == WILDCARD

    def wildcard(self) -> ListenerKey:
        """Chave coringa do mesmo domínio."""
        return ListenerKey(self.domain, WILDCARD)

    def __str__(self) -> str:
        return f"{self.domain.value}.{self.subtype}"


def resolve_listener_key(message: Mapping[str, Any]) -> ListenerKey | None:
    """Determina a chave específica de uma mensagem estruturada.

    - MsgId presente: mensagem do usuário, subtipo = MsgType
    - MsgType == "event": evento, subtipo = Event

    Returns:
        ListenerKey ou None quando o registro não é mensagem nem evento
    """
    if "MsgId" in message:
        return ListenerKey(ListenerDomain.MESSAGE, str(message.get("MsgType", "")))
    if message.get("MsgType") == EVENT_MSG_TYPE:
        return ListenerKey(ListenerDomain.EVENT, str(message.get("Event", "")))
    return None
