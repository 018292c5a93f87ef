"""Assinatura SHA-1 do protocolo de callback.

A plataforma ordena as partes (token, timestamp, nonce e, no modo seguro, o
ciphertext), concatena e calcula SHA-1 em hex.
"""

from __future__ import annotations

import hashlib
import hmac


def sha1_signature(*parts: str | None) -> str:
    """Calcula a assinatura: sort → join → SHA-1 hex.

    Args:
        parts: Strings assinadas; None conta como string vazia

    Returns:
        Digest SHA-1 em hex minúsculo
    """
    joined = "".join(sorted(part or "" for part in parts))
    return hashlib.sha1(joined.encode("utf-8")).hexdigest()  # noqa: S324


def signatures_match(expected: str, supplied: str | None) -> bool:
    """Compara assinaturas em tempo constante (igualdade exata)."""
    if not supplied:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8"))
