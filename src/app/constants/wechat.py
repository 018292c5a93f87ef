"""Enums de domínio do protocolo de callback WeChat."""

from __future__ import annotations

from enum import StrEnum

# Subtipo coringa: listener registrado para todos os subtipos de um domínio
WILDCARD = "*"

# Valor de MsgType que identifica eventos da plataforma
EVENT_MSG_TYPE = "event"

# Valor de encrypt_type que ativa o modo seguro
SECURED_ENCRYPT_TYPE = "aes"


class ListenerDomain(StrEnum):
    """Domínios de listener: mensagens do usuário e eventos da plataforma."""

    MESSAGE = "message"
    EVENT = "event"


class ReplyType(StrEnum):
    """Tipos de resposta passiva suportados."""

    TEXT = "text"
    IMAGE = "image"
    VOICE = "voice"
    VIDEO = "video"
    MUSIC = "music"
    NEWS = "news"
    TRANSFER_CUSTOMER_SERVICE = "transfer_customer_service"
