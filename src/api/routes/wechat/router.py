"""Router principal do WeChat — agrega os endpoints do canal."""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.wechat.webhook import router as webhook_router

router = APIRouter()

# Callback endpoints (GET para handshake, POST para mensagens/eventos)
router.include_router(webhook_router)
