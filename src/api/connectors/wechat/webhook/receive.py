"""Decodificação do payload do callback (texto puro ou modo seguro)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from api.connectors.wechat.xml_codec import parse_xml

if TYPE_CHECKING:
    from app.domain.messages import InboundEnvelope, StructuredMessage
    from app.protocols.crypto import MessageCryptProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DecodedPayload:
    """Mensagem estruturada + flag de sessão segura (resposta deve ser cifrada)."""

    message: StructuredMessage
    secured: bool


def decode_payload(
    envelope: InboundEnvelope,
    crypt_resolver: Callable[[], MessageCryptProtocol],
) -> DecodedPayload:
    """Converte o corpo do request em mensagem estruturada.

    Com encrypt_type=aes o corpo é um envelope cifrado: o crypt confere a
    msg_signature e devolve o XML em texto puro. Campos form-encoded do POST
    entram no resultado, mas os campos do XML prevalecem em colisão.

    Args:
        envelope: Request recebido
        crypt_resolver: Fornece o crypt sob demanda (só chamado no modo seguro)

    Raises:
        FormatError: XML mal-formado
        DecryptionError: Envelope cifrado inválido ou assinatura divergente

    Returns:
        DecodedPayload
    """
    secured = envelope.is_secured

    if secured:
        crypt = crypt_resolver()
        plaintext = crypt.decrypt(
            envelope.msg_signature,
            envelope.nonce,
            envelope.timestamp,
            envelope.raw_body,
        )
        fields = parse_xml(plaintext)
    else:
        fields = parse_xml(envelope.raw_body)

    message: StructuredMessage = {**dict(envelope.form), **fields}

    logger.debug(
        "callback_payload_decoded",
        extra={
            "secured": secured,
            "field_count": len(message),
            "msg_type": message.get("MsgType"),
        },
    )
    return DecodedPayload(message=message, secured=secured)
