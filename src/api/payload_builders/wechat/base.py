"""Contrato dos builders e campos comuns da resposta passiva."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.outbound import OutboundMessage


class PayloadBuilder(Protocol):
    """Builder de campos específicos por tipo de resposta."""

    def build(self, message: Any) -> dict[str, Any]: ...


def build_base_fields(message: OutboundMessage) -> dict[str, Any]:
    """Campos de endereçamento presentes em toda resposta.

    A ordem importa apenas para legibilidade; a plataforma não depende dela.
    """
    return {
        "ToUserName": message.to_user,
        "FromUserName": message.from_user,
        "CreateTime": message.create_time,
        "MsgType": message.reply_type.value,
    }
