"""Constantes criptográficas do modo seguro (AES-256-CBC)."""

AES_KEY_SIZE = 32  # 256 bits, derivada de base64(EncodingAESKey + "=")
IV_SIZE = 16  # primeiros 16 bytes da chave
PKCS7_BLOCK_SIZE = 32  # bytes; a plataforma usa blocos de 32 no padding
RANDOM_PREFIX_SIZE = 16
LENGTH_PREFIX_SIZE = 4  # tamanho do XML em network byte order
