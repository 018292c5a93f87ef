"""Settings específicas do WeChat (Official Account).

Credenciais do app, token de callback e parâmetros da API outbound.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

# Constantes da API
WECHAT_API_BASE_URL: str = "https://api.weixin.qq.com"
AES_KEY_LENGTH: int = 43


@dataclass(frozen=True)
class WechatSettings:
    """Configurações do canal WeChat.

    Attributes:
        app_id: AppID da conta oficial
        secret: AppSecret usado para obter access_token
        token: Token compartilhado para assinatura dos callbacks
        aes_key: EncodingAESKey (43 caracteres) do modo seguro
        api_base_url: URL base da API outbound
        request_timeout_seconds: Timeout para requisições HTTP
        max_retries: Máximo de tentativas do transporte em erros transitórios
    """

    # Credenciais
    app_id: str = ""
    secret: str = ""
    token: str = ""
    aes_key: str = ""

    # API
    api_base_url: str = WECHAT_API_BASE_URL

    # Timeouts e retries (transporte)
    request_timeout_seconds: float = 30.0
    max_retries: int = 3

    @property
    def token_endpoint(self) -> str:
        """URL do endpoint de credencial (client_credential)."""
        return f"{self.api_base_url}/cgi-bin/token"

    @property
    def secured_mode_available(self) -> bool:
        """True se o EncodingAESKey está configurado."""
        return len(self.aes_key) == AES_KEY_LENGTH

    def missing_required(self) -> list[str]:
        """Retorna os campos obrigatórios ausentes (app_id, secret, token)."""
        required = {"app_id": self.app_id, "secret": self.secret, "token": self.token}
        return [name for name, value in required.items() if not value]

    def validate(self) -> list[str]:
        """Valida configurações mínimas do WeChat.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors = [f"WECHAT_{name.upper()} não configurado" for name in self.missing_required()]

        if self.aes_key and len(self.aes_key) != AES_KEY_LENGTH:
            errors.append(f"WECHAT_AES_KEY deve ter {AES_KEY_LENGTH} caracteres")

        if self.request_timeout_seconds <= 0:
            errors.append("WECHAT_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 0:
            errors.append("WECHAT_MAX_RETRIES deve ser >= 0")

        return errors


def _load_from_env() -> WechatSettings:
    """Carrega WechatSettings a partir de variáveis de ambiente."""
    return WechatSettings(
        app_id=os.getenv("WECHAT_APP_ID", ""),
        secret=os.getenv("WECHAT_SECRET", ""),
        token=os.getenv("WECHAT_TOKEN", ""),
        aes_key=os.getenv("WECHAT_AES_KEY", ""),
        api_base_url=os.getenv("WECHAT_API_BASE_URL", WECHAT_API_BASE_URL),
        request_timeout_seconds=float(os.getenv("WECHAT_REQUEST_TIMEOUT_SECONDS", "30")),
        max_retries=int(os.getenv("WECHAT_MAX_RETRIES", "3")),
    )


@lru_cache(maxsize=1)
def get_wechat_settings() -> WechatSettings:
    """Retorna instância cacheada de WechatSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
