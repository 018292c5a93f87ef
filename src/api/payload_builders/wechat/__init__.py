"""Builders das respostas passivas WeChat (XML).

Um builder por tipo de resposta; factory.build_reply_xml é o ponto de entrada.
"""

from api.payload_builders.wechat.base import PayloadBuilder, build_base_fields
from api.payload_builders.wechat.factory import (
    build_reply_fields,
    build_reply_xml,
    get_payload_builder,
)

__all__ = [
    "PayloadBuilder",
    "build_base_fields",
    "build_reply_fields",
    "build_reply_xml",
    "get_payload_builder",
]
