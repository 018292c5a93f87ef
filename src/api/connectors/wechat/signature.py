"""Verificação de assinatura dos callbacks WeChat.

signature = SHA-1(sort(token, timestamp, nonce)), comparada por igualdade exata.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.infra.crypto.signature import sha1_signature, signatures_match
from utils.errors import AuthenticationError


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Resultado da verificação de assinatura."""

    valid: bool
    error: str | None = None


def compute_signature(token: str, timestamp: str | None, nonce: str | None) -> str:
    """Calcula a assinatura esperada para o callback."""
    return sha1_signature(token, timestamp, nonce)


def verify_signature(
    token: str,
    timestamp: str | None,
    nonce: str | None,
    signature: str | None,
) -> bool:
    """Retorna True se a assinatura do request confere."""
    return signatures_match(compute_signature(token, timestamp, nonce), signature)


def verify_request_signature(
    token: str,
    timestamp: str | None,
    nonce: str | None,
    signature: str | None,
) -> SignatureResult:
    """Verifica assinatura e explica a falha sem expor valores."""
    if not token:
        return SignatureResult(valid=False, error="missing_token")
    if not signature:
        return SignatureResult(valid=False, error="missing_signature")
    if not verify_signature(token, timestamp, nonce, signature):
        return SignatureResult(valid=False, error="invalid_signature")
    return SignatureResult(valid=True)


def check_request_signature(
    token: str,
    timestamp: str | None,
    nonce: str | None,
    signature: str | None,
) -> SignatureResult:
    """Como verify_request_signature, mas levanta AuthenticationError na falha.

    Raises:
        AuthenticationError: Assinatura ausente ou divergente
    """
    result = verify_request_signature(token, timestamp, nonce, signature)
    if not result.valid:
        raise AuthenticationError(result.error or "invalid_signature")
    return result
