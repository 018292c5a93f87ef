"""Agregador de settings do serviço de callback WeChat.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    BaseSettings,
    CacheBackend,
    CacheSettings,
    Environment,
    get_base_settings,
    get_cache_settings,
)

# Channel-specific settings
from config.settings.wechat import (
    AES_KEY_LENGTH,
    WECHAT_API_BASE_URL,
    WechatSettings,
    get_wechat_settings,
)

__all__ = [
    # Constants
    "AES_KEY_LENGTH",
    "WECHAT_API_BASE_URL",
    # Base
    "BaseSettings",
    "CacheBackend",
    "CacheSettings",
    "Environment",
    # Channels
    "WechatSettings",
    "get_base_settings",
    "get_cache_settings",
    "get_wechat_settings",
]
