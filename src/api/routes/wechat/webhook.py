"""Endpoints de callback do WeChat.

Endpoints:
- GET /wechat/callback: handshake de verificação (echostr)
- POST /wechat/callback: mensagens e eventos (texto puro ou modo seguro)

Erros de verificação/decodificação viram 400 determinístico em texto puro;
erros inesperados viram 500. A plataforma não recebe detalhes do erro.
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, Request, Response, status

from app.bootstrap import get_wechat
from app.domain.messages import InboundEnvelope
from app.observability import reset_correlation_id, set_correlation_id
from app.wechat import Wechat
from config.logging import log_rejection
from utils.errors import AuthenticationError, DecryptionError, FormatError

logger = logging.getLogger(__name__)

router = APIRouter()

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Erro → (motivo logado, corpo da resposta 400)
_REJECTIONS: dict[type[Exception], tuple[str, str]] = {
    AuthenticationError: ("invalid_signature", "Invalid signature"),
    DecryptionError: ("decryption_failed", "Invalid encrypted payload"),
    FormatError: ("invalid_payload", "Invalid payload"),
}


def get_wechat_core() -> Wechat:
    """Dependência FastAPI para o núcleo (sobrescrevível em testes)."""
    return get_wechat()


async def build_envelope(request: Request) -> InboundEnvelope:
    """Converte o request HTTP no envelope inbound.

    POST form-encoded entra como campos de formulário; qualquer outro corpo
    é tratado como XML.
    """
    raw_body = await request.body()
    query = dict(request.query_params)
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(FORM_CONTENT_TYPE):
        form = dict(parse_qsl(raw_body.decode("utf-8", errors="replace")))
        return InboundEnvelope(raw_body=b"", query=query, form=form)

    return InboundEnvelope(raw_body=raw_body, query=query)


def _rejection_response(exc: Exception, envelope: InboundEnvelope) -> Response:
    reason, body = _REJECTIONS.get(type(exc), ("rejected", "Bad request"))
    log_rejection(
        logger,
        reason,
        secured=envelope.is_secured,
        status_code=status.HTTP_400_BAD_REQUEST,
    )
    return Response(
        content=body,
        media_type="text/plain",
        status_code=status.HTTP_400_BAD_REQUEST,
    )


async def _serve(request: Request, wechat: Wechat) -> Response:
    correlation_token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        envelope = await build_envelope(request)
        try:
            reply = await wechat.serve(envelope)
        except (AuthenticationError, DecryptionError, FormatError) as exc:
            return _rejection_response(exc, envelope)
        except Exception:
            logger.exception(
                "callback_processing_failed",
                extra={"channel": "wechat", "method": request.method},
            )
            return Response(
                content="Internal error",
                media_type="text/plain",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        logger.info(
            "callback_served",
            extra={
                "channel": "wechat",
                "handshake": envelope.is_handshake,
                "secured": envelope.is_secured,
                "has_reply": bool(reply),
            },
        )
        media_type = "application/xml" if reply.startswith("<") else "text/plain"
        return Response(content=reply, media_type=media_type, status_code=status.HTTP_200_OK)
    finally:
        reset_correlation_id(correlation_token)


@router.get("/callback")
async def verify_callback(request: Request, wechat: Wechat = Depends(get_wechat_core)) -> Response:
    """Handshake de verificação — responde echostr literal se a assinatura confere."""
    return await _serve(request, wechat)


@router.post("/callback")
async def receive_callback(request: Request, wechat: Wechat = Depends(get_wechat_core)) -> Response:
    """Recebimento de mensagens/eventos — responde a resposta passiva (ou vazio)."""
    return await _serve(request, wechat)
