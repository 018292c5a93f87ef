"""Testes do handshake de verificação (echostr)."""

from __future__ import annotations

import pytest

from api.connectors.wechat.webhook import verify_handshake
from app.domain.messages import InboundEnvelope
from tests.fakes.fake_wechat_transport import TOKEN, signed_query
from utils.errors import AuthenticationError


def test_echoes_echostr_literally() -> None:
    echostr = "5837397520  spaced&odd=chars"
    envelope = InboundEnvelope(query={**signed_query(), "echostr": echostr})
    assert verify_handshake(envelope, TOKEN) == echostr


def test_invalid_signature_raises() -> None:
    query = {**signed_query(), "echostr": "x", "signature": "0" * 40}
    with pytest.raises(AuthenticationError):
        verify_handshake(InboundEnvelope(query=query), TOKEN)


def test_missing_echostr_returns_empty() -> None:
    assert verify_handshake(InboundEnvelope(query=signed_query()), TOKEN) == ""
