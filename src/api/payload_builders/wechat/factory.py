"""Factory para obter o builder correto por tipo de resposta."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from api.connectors.wechat.xml_codec import build_xml
from api.payload_builders.wechat.base import PayloadBuilder, build_base_fields
from api.payload_builders.wechat.media import (
    ImagePayloadBuilder,
    MusicPayloadBuilder,
    VideoPayloadBuilder,
    VoicePayloadBuilder,
)
from api.payload_builders.wechat.news import NewsPayloadBuilder
from api.payload_builders.wechat.text import TextPayloadBuilder, TransferPayloadBuilder
from app.constants.wechat import ReplyType

if TYPE_CHECKING:
    from app.domain.outbound import OutboundMessage

# Mapeamento de tipo de resposta para builder
_BUILDERS: dict[ReplyType, PayloadBuilder] = {
    ReplyType.TEXT: TextPayloadBuilder(),
    ReplyType.IMAGE: ImagePayloadBuilder(),
    ReplyType.VOICE: VoicePayloadBuilder(),
    ReplyType.VIDEO: VideoPayloadBuilder(),
    ReplyType.MUSIC: MusicPayloadBuilder(),
    ReplyType.NEWS: NewsPayloadBuilder(),
    ReplyType.TRANSFER_CUSTOMER_SERVICE: TransferPayloadBuilder(),
}


def get_payload_builder(reply_type: ReplyType) -> PayloadBuilder | None:
    """Retorna o builder para o tipo de resposta (None se não suportado)."""
    return _BUILDERS.get(reply_type)


def build_reply_fields(message: OutboundMessage) -> dict[str, Any]:
    """Monta todos os campos da resposta passiva.

    Raises:
        ValueError: Se o tipo de resposta não for suportado
    """
    builder = get_payload_builder(message.reply_type)
    if builder is None:
        raise ValueError(f"Tipo de resposta não suportado: {message.reply_type}")

    fields = build_base_fields(message)
    fields.update(builder.build(message))
    return fields


def build_reply_xml(message: OutboundMessage) -> str:
    """Serializa a resposta no XML esperado pela plataforma."""
    return build_xml(build_reply_fields(message))
