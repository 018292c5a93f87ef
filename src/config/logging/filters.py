"""Filters de logging: contexto de request e mascaramento de credenciais.

Nenhum log pode carregar access_token, AppSecret ou corpo de mensagem.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

# Parâmetros de query que nunca podem aparecer em log
SENSITIVE_QUERY_PARAMS = ("access_token", "secret")

_SENSITIVE_PATTERN = re.compile(
    r"(?P<name>" + "|".join(SENSITIVE_QUERY_PARAMS) + r")=(?P<value>[^&\s\"']+)"
)
MASK = "***"


def mask_secrets(text: str) -> str:
    """Substitui valores de access_token/secret em URLs por ***."""
    return _SENSITIVE_PATTERN.sub(lambda m: f"{m.group('name')}={MASK}", text)


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record.

    Se correlation_id já foi passado via `extra`, o valor é preservado.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class SecretMaskingFilter(logging.Filter):
    """Mascara credenciais em URLs logadas (campo `url` e mensagem)."""

    def filter(self, record: logging.LogRecord) -> bool:
        url = getattr(record, "url", None)
        if isinstance(url, str):
            record.url = mask_secrets(url)
        if isinstance(record.msg, str):
            record.msg = mask_secrets(record.msg)
        return True
