"""Testes do núcleo Wechat (serve, listeners, serviços e outbound)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from api.connectors.wechat.xml_codec import parse_xml
from app import wechat as wechat_module
from app.domain.messages import InboundEnvelope
from app.domain.outbound import TextMessage
from app.infra.crypto import WechatMessageCrypt, sha1_signature
from app.infra.http import HttpClient
from app.infra.http import client as http_client_module
from app.infra.stores import CallbackTokenCache, MemoryTokenCache
from app.services.staff import StaffService
from app.wechat import Wechat
from config.settings import CacheSettings, WechatSettings
from tests.fakes.fake_wechat_transport import (
    AES_KEY,
    APP_ID,
    SECRET,
    TOKEN,
    FakeTransport,
    event_xml,
    plain_envelope,
    signed_query,
    text_message_xml,
)
from utils.errors import AuthenticationError, ConfigurationError, CredentialError, FormatError

SETTINGS = WechatSettings(app_id=APP_ID, secret=SECRET, token=TOKEN, aes_key=AES_KEY)
CACHE_SETTINGS = CacheSettings(backend="memory", namespace="test")


def _wechat(settings: WechatSettings = SETTINGS) -> tuple[Wechat, FakeTransport, MemoryTokenCache]:
    transport = FakeTransport()
    cache = MemoryTokenCache()
    wechat = Wechat(settings, CACHE_SETTINGS, cache=cache, transport=transport)
    return wechat, transport, cache


class TestConstruction:
    @pytest.mark.parametrize("missing", ["app_id", "secret", "token"])
    def test_missing_required_setting_raises(self, missing: str) -> None:
        values = {"app_id": APP_ID, "secret": SECRET, "token": TOKEN, missing: ""}
        with pytest.raises(ConfigurationError, match=missing):
            Wechat(WechatSettings(**values), CACHE_SETTINGS, cache=MemoryTokenCache(), transport=FakeTransport())

    def test_aes_key_is_optional_until_crypt_is_needed(self) -> None:
        wechat, _, _ = _wechat(WechatSettings(app_id=APP_ID, secret=SECRET, token=TOKEN))
        with pytest.raises(ConfigurationError):
            wechat.resolve("crypt")


class TestServe:
    @pytest.mark.asyncio
    async def test_handshake_echoes_echostr(self) -> None:
        wechat, _, _ = _wechat()
        envelope = InboundEnvelope(query={**signed_query(), "echostr": "echo-123"})

        assert await wechat.serve(envelope) == "echo-123"

    @pytest.mark.asyncio
    async def test_invalid_signature_is_rejected_before_handlers(self) -> None:
        wechat, _, _ = _wechat()
        handler = MagicMock(return_value="x")
        wechat.message(handler)
        envelope = InboundEnvelope(raw_body=text_message_xml(), query={**signed_query(), "signature": "0" * 40})

        with pytest.raises(AuthenticationError):
            await wechat.serve(envelope)
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_text_reply_is_addressed_back(self) -> None:
        wechat, _, _ = _wechat()
        wechat.message("text", lambda msg: f"eco: {msg['Content']}")

        reply = parse_xml(await wechat.serve(plain_envelope(text_message_xml("oi"))))

        assert reply["Content"] == "eco: oi"
        assert reply["ToUserName"] == "openid_user"
        assert reply["FromUserName"] == "gh_account"
        assert reply["MsgType"] == "text"

    @pytest.mark.asyncio
    async def test_outbound_message_result(self) -> None:
        wechat, _, _ = _wechat()
        wechat.event("subscribe", lambda msg: TextMessage(content="bem-vindo"))

        reply = parse_xml(await wechat.serve(plain_envelope(event_xml("subscribe"))))

        assert reply["Content"] == "bem-vindo"

    @pytest.mark.asyncio
    async def test_no_handler_yields_empty_reply(self) -> None:
        wechat, _, _ = _wechat()
        assert await wechat.serve(plain_envelope(text_message_xml())) == ""

    @pytest.mark.asyncio
    async def test_unroutable_payload_yields_empty_reply(self) -> None:
        wechat, _, _ = _wechat()
        wechat.message(MagicMock(return_value="x"))
        assert await wechat.serve(plain_envelope(b"<xml><Foo>bar</Foo></xml>")) == ""

    @pytest.mark.asyncio
    async def test_malformed_xml_raises_format_error(self) -> None:
        wechat, _, _ = _wechat()
        with pytest.raises(FormatError):
            await wechat.serve(plain_envelope(b"<xml><Content>"))

    @pytest.mark.asyncio
    async def test_handler_error_goes_to_error_hook(self) -> None:
        wechat, _, _ = _wechat()
        error = RuntimeError("boom")
        hook = MagicMock(return_value="ignored")
        wechat.message("text", MagicMock(side_effect=error))
        assert wechat.on_error(hook) is True

        assert await wechat.serve(plain_envelope(text_message_xml())) == ""
        hook.assert_called_once_with(error)

    @pytest.mark.asyncio
    async def test_async_error_hook_is_awaited(self) -> None:
        wechat, _, _ = _wechat()
        hook = AsyncMock()
        wechat.message("text", MagicMock(side_effect=ValueError("x")))
        wechat.on_error(hook)

        assert await wechat.serve(plain_envelope(text_message_xml())) == ""
        hook.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_handler_error_propagates_without_hook(self) -> None:
        wechat, _, _ = _wechat()
        wechat.message("text", MagicMock(side_effect=RuntimeError("boom")))
        assert wechat.on_error("not-callable") is False

        with pytest.raises(RuntimeError, match="boom"):
            await wechat.serve(plain_envelope(text_message_xml()))

    @pytest.mark.asyncio
    async def test_secured_round_trip(self) -> None:
        wechat, _, _ = _wechat()
        wechat.message("text", lambda msg: f"seguro: {msg['Content']}")
        crypt = WechatMessageCrypt(TOKEN, AES_KEY, APP_ID)

        encrypted = crypt.encrypt_payload(text_message_xml("oi").decode())
        query = {
            **signed_query(),
            "encrypt_type": "aes",
            "msg_signature": sha1_signature(TOKEN, "1700000000", "n0nce", encrypted),
        }
        body = f"<xml><ToUserName>gh_account</ToUserName><Encrypt>{encrypted}</Encrypt></xml>".encode()

        reply = await wechat.serve(InboundEnvelope(raw_body=body, query=query))
        fields = parse_xml(reply)
        plain = parse_xml(crypt.decrypt(fields["MsgSignature"], fields["Nonce"], fields["TimeStamp"], reply))

        assert plain["Content"] == "seguro: oi"
        assert plain["ToUserName"] == "openid_user"

    @pytest.mark.asyncio
    async def test_handlers_share_one_token_per_cycle(self) -> None:
        wechat, transport, _ = _wechat()
        transport.queue({"access_token": "T1", "expires_in": 7200})
        transport.queue({"errcode": 0, "errmsg": "ok"})
        transport.queue({"errcode": 0, "errmsg": "ok"})

        async def handler(message: dict[str, str]) -> str:
            await wechat.request("POST", "https://api.weixin.qq.com/cgi-bin/message/custom/send", {"a": 1})
            await wechat.request("POST", "https://api.weixin.qq.com/cgi-bin/message/custom/send", {"a": 2})
            return ""

        wechat.message("text", handler)
        await wechat.serve(plain_envelope(text_message_xml()))

        assert [sent.path for sent in transport.sent] == [
            "/cgi-bin/token",
            "/cgi-bin/message/custom/send",
            "/cgi-bin/message/custom/send",
        ]
        assert transport.sent[1].query == {"access_token": "T1"}


class TestServicesAndOutbound:
    def test_resolve_is_case_insensitive_and_memoized(self) -> None:
        wechat, _, _ = _wechat()
        assert wechat.resolve("CACHE") is wechat.resolve("cache")
        assert isinstance(wechat.resolve("cache"), CallbackTokenCache)

    def test_default_services(self) -> None:
        wechat, _, _ = _wechat()
        assert isinstance(wechat.resolve("crypt"), WechatMessageCrypt)
        assert isinstance(wechat.staff, StaffService)

    def test_unknown_service(self) -> None:
        wechat, _, _ = _wechat()
        with pytest.raises(ConfigurationError):
            wechat.resolve("translator")

    def test_custom_service_registration(self) -> None:
        wechat, _, _ = _wechat()
        wechat.register_service("greeter", lambda core: f"hello {core.settings.app_id}")
        assert wechat.resolve("Greeter") == f"hello {APP_ID}"

    def test_listeners_introspection(self) -> None:
        wechat, _, _ = _wechat()
        handler = MagicMock()
        wechat.event("CLICK", handler)
        assert wechat.listeners() == {"event.CLICK": [handler]}

    @pytest.mark.asyncio
    async def test_make_url_without_token(self) -> None:
        wechat, transport, _ = _wechat()
        url = await wechat.make_url("https://h/x", {"a": "1"}, attach_token=False)
        assert url == "https://h/x?a=1"
        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_get_access_token_uses_cache(self) -> None:
        wechat, transport, cache = _wechat()
        await cache.set("test.access_token", "CACHED", 100)

        assert await wechat.get_access_token() == "CACHED"
        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_application_cache_callables(self) -> None:
        wechat, transport, _ = _wechat()
        wechat.cache_getter(lambda key: "FROM-APP" if key == "test.access_token" else None)

        assert await wechat.get_access_token() == "FROM-APP"
        assert transport.sent == []


class TestDefaultTransport:
    @pytest.mark.asyncio
    async def test_token_refresh_is_not_retried(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            return httpx.Response(503)

        monkeypatch.setattr(
            wechat_module,
            "HttpClient",
            lambda config: HttpClient(config, transport=httpx.MockTransport(handler)),
        )
        monkeypatch.setattr(http_client_module, "_backoff_sleep", AsyncMock())
        wechat = Wechat(
            WechatSettings(app_id=APP_ID, secret=SECRET, token=TOKEN, max_retries=3),
            CACHE_SETTINGS,
            cache=MemoryTokenCache(),
        )

        with pytest.raises(CredentialError):
            await wechat.get_access_token()

        assert calls == ["/cgi-bin/token"]
