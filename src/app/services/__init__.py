"""Serviços de aplicação.

Unidades de orquestração do protocolo (registro de listeners, access_token,
service locator, composição de resposta, contas de atendimento).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.access_token import AccessTokenManager
from app.services.listener_registry import ListenerRegistry
from app.services.response_composer import compose_response
from app.services.service_locator import ServiceLocator
from app.services.staff import StaffService

__all__ = [
    "AccessTokenManager",
    "ListenerRegistry",
    "ServiceLocator",
    "StaffService",
    "compose_response",
]
