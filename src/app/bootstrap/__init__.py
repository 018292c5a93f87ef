"""Composition root do serviço de callback.

Configura logging, valida settings e constrói o núcleo Wechat usado pelas
rotas. O núcleo é criado sob demanda na primeira requisição.

Uso:
    from app.bootstrap import get_wechat, initialize_app

    initialize_app()
    wechat = get_wechat()
"""

from __future__ import annotations

import logging
from functools import lru_cache

from app.observability import get_correlation_id
from app.wechat import Wechat
from config.logging import configure_logging
from config.settings import get_base_settings, get_cache_settings, get_wechat_settings

SERVICE_NAME = "wechat_callback"

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Configura logging JSON (correlation_id + mascaramento de segredos)."""
    configure_logging(
        level=get_base_settings().log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def collect_settings_errors() -> list[str]:
    """Agrega os erros de validação de todas as settings, prefixados pela origem."""
    base = get_base_settings()
    return [
        *(f"base: {error}" for error in base.validate()),
        *(f"wechat: {error}" for error in get_wechat_settings().validate()),
        *(f"cache: {error}" for error in get_cache_settings().validate(base)),
    ]


def validate_runtime_settings() -> None:
    """Valida settings no startup.

    Em staging/production um erro impede o boot; em development apenas loga.

    Raises:
        RuntimeError: settings inválidas em ambiente estrito
    """
    base = get_base_settings()
    errors = collect_settings_errors()

    if not errors:
        logger.info("settings_validated", extra={"environment": base.environment})
        return

    logger.warning(
        "settings_validation_failed",
        extra={"environment": base.environment, "error_count": len(errors), "errors": errors},
    )
    if base.strict_validation:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")


@lru_cache(maxsize=1)
def get_wechat() -> Wechat:
    """Núcleo Wechat do processo, construído a partir do ambiente.

    Raises:
        ConfigurationError: app_id, secret ou token ausentes
    """
    wechat = Wechat(get_wechat_settings(), get_cache_settings())
    logger.info("wechat_core_created", extra={"cache_backend": wechat.cache_settings.backend})
    return wechat


__all__ = [
    "SERVICE_NAME",
    "collect_settings_errors",
    "get_wechat",
    "initialize_app",
    "validate_runtime_settings",
]
