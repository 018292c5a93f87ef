"""Testes do gerenciador de access_token."""

from __future__ import annotations

import asyncio
import time
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from api.connectors.wechat.http_client import WechatApiClient
from app.infra.http import HttpClient, HttpClientConfig
from app.infra.stores import CallbackTokenCache, MemoryTokenCache
from app.services.access_token import AccessTokenManager
from config.settings import CacheSettings, WechatSettings
from tests.fakes.fake_wechat_transport import APP_ID, SECRET, TOKEN, FakeTransport
from utils.errors import CacheWriteError, CredentialError

SETTINGS = WechatSettings(app_id=APP_ID, secret=SECRET, token=TOKEN, api_base_url="https://api.test")
CACHE_SETTINGS = CacheSettings(backend="memory", namespace="acct")


def _manager(
    transport: FakeTransport,
    cache: MemoryTokenCache | None = None,
) -> tuple[AccessTokenManager, MemoryTokenCache]:
    cache = cache or MemoryTokenCache()
    client = WechatApiClient(transport)
    return AccessTokenManager(SETTINGS, CACHE_SETTINGS, cache, client), cache


class TestGetToken:
    @pytest.mark.asyncio
    async def test_refresh_stores_token_with_two_second_margin(self) -> None:
        transport = FakeTransport()
        transport.queue({"access_token": "T1", "expires_in": 7200})
        manager, cache = _manager(transport)

        before = time.time()
        assert await manager.get_token() == "T1"

        expires_at = cache.expires_at("acct.access_token")
        assert expires_at is not None
        assert before + 7198 <= expires_at <= time.time() + 7198

    @pytest.mark.asyncio
    async def test_refresh_url_has_credentials_and_no_access_token(self) -> None:
        transport = FakeTransport()
        transport.queue({"access_token": "T1", "expires_in": 7200})
        manager, _ = _manager(transport)

        await manager.get_token()

        sent = transport.sent[0]
        assert sent.method == "GET"
        assert sent.url.startswith("https://api.test/cgi-bin/token?")
        assert sent.query == {"appid": APP_ID, "secret": SECRET, "grant_type": "client_credential"}
        assert "access_token" not in sent.url

    @pytest.mark.asyncio
    async def test_cached_token_is_reused_before_expiry(self) -> None:
        transport = FakeTransport()
        transport.queue({"access_token": "T1", "expires_in": 7200})
        manager, _ = _manager(transport)

        assert await manager.get_token() == "T1"
        assert await manager.get_token() == "T1"
        assert len(transport.sent) == 1

    @pytest.mark.asyncio
    async def test_cache_hit_skips_network(self) -> None:
        cache = MemoryTokenCache()
        await cache.set("acct.access_token", "CACHED", 100)
        transport = FakeTransport()
        manager, _ = _manager(transport, cache)

        assert await manager.get_token() == "CACHED"
        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_held_copy_survives_cache_eviction_within_cycle(self) -> None:
        cache = MemoryTokenCache()
        await cache.set("acct.access_token", "CACHED", 100)
        manager, _ = _manager(FakeTransport(), cache)

        with manager.processing_cycle():
            assert await manager.get_token() == "CACHED"
            cache.get = AsyncMock(return_value=None)  # type: ignore[method-assign]
            assert await manager.get_token() == "CACHED"

    @pytest.mark.asyncio
    async def test_held_copy_is_dropped_after_cycle(self) -> None:
        cache = MemoryTokenCache()
        await cache.set("acct.access_token", "OLD", 100)
        manager, _ = _manager(FakeTransport(), cache)

        with manager.processing_cycle():
            assert await manager.get_token() == "OLD"

        await cache.set("acct.access_token", "NEW", 100)
        assert await manager.get_token() == "NEW"

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_refresh(self) -> None:
        transport = FakeTransport()
        transport.queue({"access_token": "T1", "expires_in": 7200})
        manager, _ = _manager(transport)

        tokens = await asyncio.gather(*(manager.get_token() for _ in range(5)))

        assert tokens == ["T1"] * 5
        assert len(transport.sent) == 1


class TestRefreshFailures:
    @pytest.mark.asyncio
    async def test_api_error_becomes_credential_error(self) -> None:
        transport = FakeTransport()
        transport.queue({"errcode": 40013, "errmsg": "invalid appid"})
        manager, _ = _manager(transport)

        with pytest.raises(CredentialError):
            await manager.get_token()

    @pytest.mark.asyncio
    async def test_empty_response_becomes_credential_error(self) -> None:
        manager, _ = _manager(FakeTransport())

        with pytest.raises(CredentialError):
            await manager.get_token()

    @pytest.mark.asyncio
    async def test_missing_fields_become_credential_error(self) -> None:
        transport = FakeTransport()
        transport.queue({"expires_in": 7200})
        manager, _ = _manager(transport)

        with pytest.raises(CredentialError):
            await manager.get_token()

    @pytest.mark.asyncio
    async def test_cache_write_failure_becomes_credential_error(self) -> None:
        transport = FakeTransport()
        transport.queue({"access_token": "T1", "expires_in": 7200})
        cache = MemoryTokenCache()
        cache.set = AsyncMock(side_effect=CacheWriteError("disk full"))  # type: ignore[method-assign]
        manager, _ = _manager(transport, cache)

        with pytest.raises(CredentialError):
            await manager.get_token()

    @pytest.mark.asyncio
    async def test_no_internal_retry(self) -> None:
        transport = FakeTransport()
        transport.queue({"errcode": -1, "errmsg": "system busy"})
        manager, _ = _manager(transport)

        with pytest.raises(CredentialError):
            await manager.get_token()
        assert len(transport.sent) == 1

    @pytest.mark.parametrize("error_type", [httpx.ReadError, httpx.RemoteProtocolError])
    @pytest.mark.asyncio
    async def test_httpx_transport_failure_becomes_credential_error(
        self, error_type: type[httpx.TransportError]
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise error_type("boom", request=request)

        transport = HttpClient(HttpClientConfig(max_retries=0), transport=httpx.MockTransport(handler))
        manager = AccessTokenManager(SETTINGS, CACHE_SETTINGS, MemoryTokenCache(), WechatApiClient(transport))

        with pytest.raises(CredentialError):
            await manager.get_token()

    @pytest.mark.asyncio
    async def test_failing_application_setter_becomes_credential_error(self) -> None:
        transport = FakeTransport()
        transport.queue({"access_token": "T1", "expires_in": 7200})
        cache = CallbackTokenCache(MemoryTokenCache())
        cache.cache_setter(MagicMock(side_effect=OSError("read-only")))
        manager = AccessTokenManager(SETTINGS, CACHE_SETTINGS, cache, WechatApiClient(transport))

        with pytest.raises(CredentialError):
            await manager.get_token()
