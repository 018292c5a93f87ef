"""Mensagens de resposta passiva (valores retornados pelos handlers).

Cada tipo declara seu ReplyType; a serialização para XML fica em
api/payload_builders/wechat. Os campos de endereçamento são preenchidos pelo
compositor de resposta a partir do envelope inbound.
"""

from __future__ import annotations

import time
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from app.constants.wechat import ReplyType


class OutboundMessage(BaseModel):
    """Base das respostas passivas."""

    model_config = ConfigDict(extra="forbid")

    reply_type: ClassVar[ReplyType]

    from_user: str = Field(default="", description="Conta oficial (ToUserName do inbound).")
    to_user: str = Field(default="", description="Usuário (FromUserName do inbound).")
    create_time: int = Field(default_factory=lambda: int(time.time()))

    def addressed(self, from_user: str, to_user: str) -> OutboundMessage:
        """Retorna cópia com remetente/destinatário definidos."""
        return self.model_copy(update={"from_user": from_user, "to_user": to_user})


class TextMessage(OutboundMessage):
    reply_type: ClassVar[ReplyType] = ReplyType.TEXT

    content: str


class ImageMessage(OutboundMessage):
    reply_type: ClassVar[ReplyType] = ReplyType.IMAGE

    media_id: str


class VoiceMessage(OutboundMessage):
    reply_type: ClassVar[ReplyType] = ReplyType.VOICE

    media_id: str


class VideoMessage(OutboundMessage):
    reply_type: ClassVar[ReplyType] = ReplyType.VIDEO

    media_id: str
    title: str = ""
    description: str = ""


class MusicMessage(OutboundMessage):
    reply_type: ClassVar[ReplyType] = ReplyType.MUSIC

    title: str = ""
    description: str = ""
    music_url: str = ""
    hq_music_url: str = ""
    thumb_media_id: str


class NewsItem(BaseModel):
    """Artigo de uma resposta de notícias."""

    model_config = ConfigDict(extra="forbid")

    title: str
    description: str = ""
    pic_url: str = ""
    url: str = ""


class NewsMessage(OutboundMessage):
    """Resposta com artigos (a plataforma aceita no máximo 8)."""

    reply_type: ClassVar[ReplyType] = ReplyType.NEWS

    articles: list[NewsItem] = Field(..., min_length=1, max_length=8)


class TransferMessage(OutboundMessage):
    """Encaminha a conversa para o atendimento (opcionalmente a um atendente)."""

    reply_type: ClassVar[ReplyType] = ReplyType.TRANSFER_CUSTOMER_SERVICE

    kf_account: str | None = None
