"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    ApiError,
    AuthenticationError,
    CacheWriteError,
    ConfigurationError,
    CredentialError,
    DecryptionError,
    FormatError,
    InfrastructureError,
    RedisConnectionError,
    TransportError,
    WechatError,
)

__all__ = [
    "ApiError",
    "AuthenticationError",
    "CacheWriteError",
    "ConfigurationError",
    "CredentialError",
    "DecryptionError",
    "FormatError",
    "InfrastructureError",
    "RedisConnectionError",
    "TransportError",
    "WechatError",
]
