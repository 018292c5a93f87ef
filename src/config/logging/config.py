"""Configuração centralizada de logging.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização do serviço (app/bootstrap/)
    configure_logging(level="INFO", service_name="wechat_callback")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("callback_served", extra={"secured": True})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter, SecretMaskingFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "wechat_callback"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado no root logger.

    Deve ser chamada uma vez na inicialização do serviço.

    Args:
        level: Nível de log (case insensitive).
        service_name: Nome do serviço injetado em todo record.
        correlation_id_getter: Função que retorna o correlation_id do contexto.

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))
    handler.addFilter(SecretMaskingFilter())

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substituir handlers existentes para evitar duplicação
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo especificado."""
    return logging.getLogger(name)


def log_rejection(
    logger: logging.Logger,
    reason: str,
    *,
    secured: bool | None = None,
    status_code: int | None = None,
) -> None:
    """Loga callback rejeitado (assinatura, formato, decriptação) sem payload.

    Args:
        logger: Logger instance.
        reason: Motivo curto (ex: "invalid_signature").
        secured: Se o request estava em modo seguro, quando conhecido.
        status_code: Status HTTP devolvido à plataforma.
    """
    extra: dict[str, object] = {"rejected": True, "reason": reason}
    if secured is not None:
        extra["secured"] = secured
    if status_code is not None:
        extra["status_code"] = status_code

    logger.warning("callback_rejected", extra=extra)
