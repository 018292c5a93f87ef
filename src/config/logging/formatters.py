"""Formatter JSON dos logs do serviço.

Cada linha de log sai como um objeto JSON com os campos de REQUIRED_LOG_FIELDS,
renomeados conforme FIELD_RENAME_MAP.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {"asctime": "...", "level": "INFO", "logger": "app.wechat",
         "message": "callback_served", "correlation_id": "abc-123",
         "service": "wechat_callback", "secured": true}
    """
    return JsonFormatter(
        " ".join(f"%({name})s" for name in REQUIRED_LOG_FIELDS),
        rename_fields=FIELD_RENAME_MAP,
    )
