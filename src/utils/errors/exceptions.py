"""Exceções de domínio do núcleo WeChat e de infraestrutura."""

from __future__ import annotations


class WechatError(Exception):
    """Base para todos os erros do núcleo de callback WeChat."""


class AuthenticationError(WechatError):
    """Assinatura do request inválida — request rejeitado sem processamento."""


class FormatError(WechatError):
    """Corpo/XML mal-formado ou fora dos limites do parser."""


class DecryptionError(WechatError):
    """Payload em modo seguro falhou na verificação de integridade."""


class ConfigurationError(WechatError):
    """Configuração obrigatória ausente ou serviço desconhecido."""


class CredentialError(WechatError):
    """Falha ao obter/renovar o access_token da plataforma."""


class TransportError(WechatError):
    """Resposta vazia, inválida ou servidor inalcançável."""


class ApiError(WechatError):
    """Erro reportado pela plataforma (errcode diferente de sucesso).

    Attributes:
        code: errcode retornado pela API
        message: errmsg retornado pela API
    """

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"[{code}] {message}")
        self.code = code
        self.message = message


class CacheWriteError(WechatError):
    """Falha ao persistir valor no cache de access_token."""


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""
