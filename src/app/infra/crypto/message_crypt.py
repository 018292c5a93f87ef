"""Crypt de mensagens do modo seguro (encrypt_type=aes).

Formato do plaintext cifrado:
    random(16) + len(xml) (4 bytes, big-endian) + xml + app_id

Cifra: AES-256-CBC, chave = base64(EncodingAESKey + "="), IV = chave[:16],
padding PKCS#7 em blocos de 32 bytes. O envelope recebido traz o ciphertext em
<Encrypt>; a integridade é conferida por msg_signature =
SHA-1(sort(token, timestamp, nonce, Encrypt)).
"""

from __future__ import annotations

import base64
import binascii
import os
import struct

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from api.connectors.wechat.xml_codec import build_xml, parse_xml
from app.infra.crypto.constants import (
    AES_KEY_SIZE,
    IV_SIZE,
    LENGTH_PREFIX_SIZE,
    PKCS7_BLOCK_SIZE,
    RANDOM_PREFIX_SIZE,
)
from app.infra.crypto.signature import sha1_signature, signatures_match
from utils.errors import ConfigurationError, DecryptionError, FormatError


def _derive_key(aes_key: str) -> bytes:
    try:
        key = base64.b64decode(aes_key + "=", validate=True)
    except (ValueError, binascii.Error) as exc:
        raise ConfigurationError("EncodingAESKey inválida (base64)") from exc
    if len(key) != AES_KEY_SIZE:
        raise ConfigurationError(f"EncodingAESKey deve gerar {AES_KEY_SIZE} bytes, gerou {len(key)}")
    return key


class WechatMessageCrypt:
    """Implementação padrão do MessageCryptProtocol.

    Args:
        token: Token de callback (entra na msg_signature)
        aes_key: EncodingAESKey de 43 caracteres
        app_id: AppID, anexado ao plaintext e conferido na decriptação

    Raises:
        ConfigurationError: Se a EncodingAESKey for inválida
    """

    def __init__(self, token: str, aes_key: str, app_id: str) -> None:
        self._token = token
        self._app_id = app_id
        self._key = _derive_key(aes_key)
        self._iv = self._key[:IV_SIZE]

    def _cipher(self) -> Cipher:
        return Cipher(algorithms.AES(self._key), modes.CBC(self._iv))

    def decrypt(self, msg_signature: str, nonce: str, timestamp: str, raw_xml: bytes | str) -> str:
        """Verifica msg_signature e decripta o envelope.

        Raises:
            DecryptionError: Envelope sem <Encrypt>, assinatura divergente,
                ciphertext inválido ou AppID diferente
        """
        try:
            envelope = parse_xml(raw_xml)
        except FormatError as exc:
            raise DecryptionError("invalid_encrypted_envelope") from exc

        encrypted = envelope.get("Encrypt")
        if not isinstance(encrypted, str) or not encrypted:
            raise DecryptionError("missing_encrypt_field")

        expected = sha1_signature(self._token, timestamp, nonce, encrypted)
        if not signatures_match(expected, msg_signature):
            raise DecryptionError("invalid_msg_signature")

        return self.decrypt_payload(encrypted)

    def decrypt_payload(self, encrypted_b64: str) -> str:
        """Decripta o conteúdo de <Encrypt> e retorna o XML em texto puro."""
        try:
            ciphertext = base64.b64decode(encrypted_b64, validate=True)
            decryptor = self._cipher().decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            unpadder = padding.PKCS7(PKCS7_BLOCK_SIZE * 8).unpadder()
            plaintext = unpadder.update(padded) + unpadder.finalize()
        except (ValueError, binascii.Error) as exc:
            raise DecryptionError("invalid_ciphertext") from exc

        content = plaintext[RANDOM_PREFIX_SIZE:]
        if len(content) < LENGTH_PREFIX_SIZE:
            raise DecryptionError("truncated_plaintext")
        (xml_length,) = struct.unpack("!I", content[:LENGTH_PREFIX_SIZE])
        xml_end = LENGTH_PREFIX_SIZE + xml_length
        if xml_end > len(content):
            raise DecryptionError("truncated_plaintext")

        from_app_id = content[xml_end:].decode("utf-8", errors="replace")
        if from_app_id != self._app_id:
            raise DecryptionError("app_id_mismatch")

        try:
            return content[LENGTH_PREFIX_SIZE:xml_end].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionError("invalid_plaintext_encoding") from exc

    def encrypt_payload(self, xml: str) -> str:
        """Cifra o XML e retorna o base64 que vai em <Encrypt>."""
        body = xml.encode("utf-8")
        plaintext = (
            os.urandom(RANDOM_PREFIX_SIZE)
            + struct.pack("!I", len(body))
            + body
            + self._app_id.encode("utf-8")
        )
        padder = padding.PKCS7(PKCS7_BLOCK_SIZE * 8).padder()
        padded = padder.update(plaintext) + padder.finalize()
        encryptor = self._cipher().encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return base64.b64encode(ciphertext).decode("ascii")

    def encrypt(self, xml: str, nonce: str, timestamp: str) -> str:
        """Cifra a resposta e monta o envelope com MsgSignature."""
        encrypted = self.encrypt_payload(xml)
        return build_xml(
            {
                "Encrypt": encrypted,
                "MsgSignature": sha1_signature(self._token, timestamp, nonce, encrypted),
                "TimeStamp": int(timestamp) if timestamp.isdigit() else timestamp,
                "Nonce": nonce,
            }
        )
