"""Protocolo do colaborador de criptografia do modo seguro (encrypt_type=aes).

O núcleo depende apenas desta interface; a implementação AES padrão fica em
app/infra/crypto.
"""

from __future__ import annotations

from typing import Protocol


class MessageCryptProtocol(Protocol):
    """Interface mínima do crypt de mensagens."""

    def decrypt(self, msg_signature: str, nonce: str, timestamp: str, raw_xml: bytes | str) -> str:
        """Retorna o XML em texto puro; levanta DecryptionError se a assinatura não confere."""
        ...

    def encrypt(self, xml: str, nonce: str, timestamp: str) -> str:
        """Retorna o envelope XML criptografado pronto para resposta."""
        ...
