"""Testes do serviço de contas de atendimento."""

from __future__ import annotations

import hashlib
from unittest.mock import AsyncMock

import pytest

from api.connectors.wechat.http_client import WechatApiClient
from app.services.staff import StaffService
from tests.fakes.fake_wechat_transport import FakeTransport
from utils.errors import ApiError

BASE_URL = "https://api.test"


def _service() -> tuple[StaffService, FakeTransport]:
    transport = FakeTransport()
    client = WechatApiClient(transport, AsyncMock(return_value="ACCESS"))
    return StaffService(client, BASE_URL), transport


@pytest.mark.asyncio
async def test_all_lists_accounts() -> None:
    service, transport = _service()
    transport.queue({"kf_list": [{"kf_account": "a@gh"}]})

    assert await service.all() == [{"kf_account": "a@gh"}]
    assert transport.sent[0].path == "/cgi-bin/customservice/getkflist"
    assert transport.sent[0].query == {"access_token": "ACCESS"}


@pytest.mark.asyncio
async def test_all_online_lists_online_accounts() -> None:
    service, transport = _service()
    transport.queue({"kf_online_list": [{"kf_account": "b@gh", "status": 1}]})

    assert await service.all_online() == [{"kf_account": "b@gh", "status": 1}]
    assert transport.sent[0].path == "/cgi-bin/customservice/getonlinekflist"


@pytest.mark.asyncio
async def test_create_hashes_password() -> None:
    service, transport = _service()
    transport.queue({"errcode": 0, "errmsg": "ok"})

    assert await service.create("kf1@gh", "Atendente", "s3cret") is True

    sent = transport.sent[0]
    assert sent.method == "POST"
    assert sent.path == "/customservice/kfaccount/add"
    assert sent.params == {
        "kf_account": "kf1@gh",
        "nickname": "Atendente",
        "password": hashlib.md5(b"s3cret").hexdigest(),
    }


@pytest.mark.asyncio
async def test_update_uses_update_endpoint() -> None:
    service, transport = _service()
    transport.queue({"errcode": 0, "errmsg": "ok"})

    await service.update("kf1@gh", "Novo nome", "x")

    assert transport.sent[0].path == "/customservice/kfaccount/update"


@pytest.mark.asyncio
async def test_delete_uses_delete_endpoint() -> None:
    service, transport = _service()
    transport.queue({"errcode": 0, "errmsg": "ok"})

    assert await service.delete("kf1@gh") is True

    sent = transport.sent[0]
    assert sent.method == "GET"
    assert sent.path == "/customservice/kfaccount/del"
    assert sent.query["kf_account"] == "kf1@gh"


@pytest.mark.asyncio
async def test_avatar_uploads_file() -> None:
    service, transport = _service()
    transport.queue({"errcode": 0, "errmsg": "ok"})

    await service.avatar("kf1@gh", "/tmp/avatar.jpg")

    sent = transport.sent[0]
    assert sent.path == "/customservice/kfaccount/uploadheadimg"
    assert sent.files == {"media": "/tmp/avatar.jpg"}
    assert sent.query["kf_account"] == "kf1@gh"


@pytest.mark.asyncio
async def test_api_errors_propagate() -> None:
    service, transport = _service()
    transport.queue({"errcode": 61451, "errmsg": "invalid parameter"})

    with pytest.raises(ApiError) as exc_info:
        await service.create("kf1@gh", "x", "y")
    assert exc_info.value.code == 61451
