"""Webhook WeChat: handshake, assinatura e decodificação do payload."""

from ..signature import (
    SignatureResult,
    check_request_signature,
    compute_signature,
    verify_request_signature,
    verify_signature,
)
from .receive import DecodedPayload, decode_payload
from .verify import verify_handshake

__all__ = [
    "DecodedPayload",
    "SignatureResult",
    "check_request_signature",
    "compute_signature",
    "decode_payload",
    "verify_handshake",
    "verify_request_signature",
    "verify_signature",
]
