"""Builders para respostas de texto e transferência ao atendimento."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.domain.outbound import TextMessage, TransferMessage


class TextPayloadBuilder:
    """Builder para respostas de texto simples."""

    def build(self, message: TextMessage) -> dict[str, Any]:
        return {"Content": message.content}


class TransferPayloadBuilder:
    """Builder para transferência ao atendimento (opcionalmente a um atendente)."""

    def build(self, message: TransferMessage) -> dict[str, Any]:
        if not message.kf_account:
            return {}
        return {"TransInfo": {"KfAccount": message.kf_account}}
