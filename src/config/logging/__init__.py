"""Logging estruturado JSON do serviço.

Campos presentes em todo log: correlation_id, service, level, logger,
message, asctime. Credenciais em URLs são mascaradas antes da emissão.
"""

from config.logging.config import configure_logging, get_logger, log_rejection
from config.logging.filters import CorrelationIdFilter, SecretMaskingFilter, mask_secrets
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "SecretMaskingFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_rejection",
    "mask_secrets",
]
