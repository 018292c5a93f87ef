"""Criptografia do modo seguro (AES) e assinatura SHA-1 do protocolo.

Localizado em app/infra/ como implementação concreta do MessageCryptProtocol.
"""

from .constants import AES_KEY_SIZE, IV_SIZE, PKCS7_BLOCK_SIZE
from .message_crypt import WechatMessageCrypt
from .signature import sha1_signature, signatures_match

__all__ = [
    "AES_KEY_SIZE",
    "IV_SIZE",
    "PKCS7_BLOCK_SIZE",
    "WechatMessageCrypt",
    "sha1_signature",
    "signatures_match",
]
