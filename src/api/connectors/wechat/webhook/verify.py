"""Handshake de verificação do endpoint (probe com echostr)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from api.connectors.wechat.signature import check_request_signature

if TYPE_CHECKING:
    from app.domain.messages import InboundEnvelope


def verify_handshake(envelope: InboundEnvelope, token: str) -> str:
    """Valida a assinatura do probe e retorna echostr sem alteração.

    Args:
        envelope: Request recebido (query com signature, timestamp, nonce, echostr)
        token: Token configurado no servidor

    Raises:
        AuthenticationError: Se a assinatura for inválida

    Returns:
        Valor literal de echostr (vazio se ausente)
    """
    check_request_signature(token, envelope.timestamp, envelope.nonce, envelope.signature)
    return envelope.echostr or ""
