"""Protocolos e contratos do core da aplicação."""

from .cache import DEFAULT_TOKEN_LIFETIME, AccessTokenCacheProtocol
from .crypto import MessageCryptProtocol
from .http_client import HttpTransportProtocol

__all__ = [
    "DEFAULT_TOKEN_LIFETIME",
    "AccessTokenCacheProtocol",
    "HttpTransportProtocol",
    "MessageCryptProtocol",
]
