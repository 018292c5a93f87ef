"""Helpers de logging para a API WeChat (sem tokens nem payloads)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging import mask_secrets

if TYPE_CHECKING:
    from .api_errors import WechatApiError

logger = logging.getLogger(__name__)


def log_api_error(api_error: WechatApiError, method: str, endpoint: str) -> None:
    """Loga erro da API sem expor dados sensíveis."""
    logger.warning(
        "wechat_api_error",
        extra={
            "method": method,
            "endpoint": mask_secrets(endpoint),
            "error_code": api_error.error_code,
        },
    )


def log_transport_error(reason: str, method: str, endpoint: str) -> None:
    """Loga falha de transporte (sem resposta, JSON inválido, rede)."""
    logger.warning(
        "wechat_transport_error",
        extra={"method": method, "endpoint": mask_secrets(endpoint), "reason": reason},
    )


def log_success(method: str, endpoint: str) -> None:
    """Loga sucesso sem expor dados sensíveis."""
    logger.debug(
        "wechat_api_success",
        extra={"method": method, "endpoint": mask_secrets(endpoint)},
    )
