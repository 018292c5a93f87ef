"""Settings base do serviço de callback WeChat.

Ambiente de execução, nível de log e conexão Redis compartilhada.
Nada aqui depende de credenciais da conta oficial.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]

_ENVIRONMENT_ALIASES: dict[str, Environment] = {
    "production": "production",
    "prod": "production",
    "staging": "staging",
    "stage": "staging",
}

STRICT_ENVIRONMENTS: frozenset[str] = frozenset({"staging", "production"})


@dataclass(frozen=True)
class BaseSettings:
    """Configurações comuns do serviço.

    Attributes:
        environment: development|staging|production
        service_name: Nome injetado em todo log estruturado
        log_level: Nível do logger raiz
        redis_url: URL Redis (apenas para WECHAT_CACHE_BACKEND=redis)
        redis_timeout_seconds: Timeout de socket/conexão do cliente Redis
    """

    environment: Environment = "development"
    service_name: str = "wechat-callback"
    log_level: str = "INFO"
    redis_url: str = ""
    redis_timeout_seconds: float = 5.0

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def strict_validation(self) -> bool:
        """True quando settings inválidas devem impedir o boot."""
        return self.environment in STRICT_ENVIRONMENTS

    def validate(self) -> list[str]:
        errors: list[str] = []

        if self.environment not in ("development", "staging", "production"):
            errors.append(f"ENVIRONMENT inválido: {self.environment}")
        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")
        if self.redis_timeout_seconds <= 0:
            errors.append("REDIS_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _parse_environment(raw: str) -> Environment:
    """Aceita aliases curtos; valor desconhecido vira development."""
    return _ENVIRONMENT_ALIASES.get(raw.strip().lower(), "development")


def _load_base_from_env() -> BaseSettings:
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "wechat-callback"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        redis_url=os.getenv("REDIS_URL", ""),
        redis_timeout_seconds=float(os.getenv("REDIS_TIMEOUT_SECONDS", "5")),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
