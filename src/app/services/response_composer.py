"""Composição da resposta passiva a partir do resultado do dispatch."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from api.payload_builders.wechat import build_reply_xml
from app.domain.outbound import OutboundMessage, TextMessage

if TYPE_CHECKING:
    from app.domain.messages import InboundEnvelope
    from app.protocols.crypto import MessageCryptProtocol

logger = logging.getLogger(__name__)


def to_outbound_message(result: Any) -> OutboundMessage | None:
    """Normaliza o resultado de um handler.

    - None / "" → None (sem resposta)
    - str → TextMessage
    - OutboundMessage → ele mesmo
    - qualquer outro tipo → None (registrado como não suportado)
    """
    if result is None or result == "":
        return None
    if isinstance(result, OutboundMessage):
        return result
    if isinstance(result, str):
        return TextMessage(content=result)

    logger.warning("reply_type_unsupported", extra={"result_type": type(result).__name__})
    return None


def compose_response(
    result: Any,
    inbound: Mapping[str, Any],
    *,
    secured: bool,
    envelope: InboundEnvelope,
    crypt_resolver: Callable[[], MessageCryptProtocol],
) -> str:
    """Converte o resultado do handler no corpo da resposta HTTP.

    A resposta é endereçada de volta ao remetente: from_user recebe o
    ToUserName do inbound e to_user o FromUserName. Em sessão segura o XML é
    cifrado com o nonce/timestamp do request.

    Args:
        result: Valor retornado pelo dispatch
        inbound: Mensagem estruturada recebida
        secured: True se o request veio em modo seguro
        envelope: Request original (nonce/timestamp para o envelope cifrado)
        crypt_resolver: Fornece o crypt sob demanda

    Returns:
        XML da resposta, ou "" quando não há resposta
    """
    message = to_outbound_message(result)
    if message is None:
        return ""

    message = message.addressed(
        from_user=str(inbound.get("ToUserName", "")),
        to_user=str(inbound.get("FromUserName", "")),
    )
    xml = build_reply_xml(message)

    if secured:
        xml = crypt_resolver().encrypt(xml, envelope.nonce, envelope.timestamp)

    logger.debug(
        "reply_composed",
        extra={"reply_type": str(message.reply_type), "secured": secured},
    )
    return xml
