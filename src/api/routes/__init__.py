"""Rotas HTTP da API — adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (callback WeChat, health)
- Converter o request HTTP no envelope inbound
- Delegar ao núcleo Wechat
- Respostas HTTP apropriadas (400 para rejeições, 500 para falhas)

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
