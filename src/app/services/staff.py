"""Gestão de contas de atendimento (customer service / "staff").

Endpoints de gestão usam o host de API padrão; consultas de lista e status
online ficam em /cgi-bin/customservice.
"""

from __future__ import annotations

import hashlib
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from api.connectors.wechat.http_client import OutboundResult, WechatApiClient

logger = logging.getLogger(__name__)

API_LIST = "/cgi-bin/customservice/getkflist"
API_ONLINE = "/cgi-bin/customservice/getonlinekflist"
API_CREATE = "/customservice/kfaccount/add"
API_UPDATE = "/customservice/kfaccount/update"
API_DELETE = "/customservice/kfaccount/del"
API_AVATAR_UPLOAD = "/customservice/kfaccount/uploadheadimg"


def hash_password(password: str) -> str:
    """A plataforma espera a senha da conta como MD5 hex."""
    return hashlib.md5(password.encode("utf-8")).hexdigest()


class StaffService:
    """Operações sobre as contas de atendimento da conta oficial.

    Args:
        client: Executor outbound (anexa access_token)
        api_base_url: Host da API (ex.: https://api.weixin.qq.com)
    """

    def __init__(self, client: WechatApiClient, api_base_url: str) -> None:
        self._client = client
        self._base_url = api_base_url.rstrip("/")

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def all(self) -> list[dict[str, Any]]:
        """Lista todas as contas de atendimento."""
        result = await self._client.get(self._url(API_LIST))
        return _extract_list(result, "kf_list")

    async def all_online(self) -> list[dict[str, Any]]:
        """Lista as contas de atendimento online no momento."""
        result = await self._client.get(self._url(API_ONLINE))
        return _extract_list(result, "kf_online_list")

    async def create(self, account: str, nickname: str, password: str) -> OutboundResult:
        """Cria uma conta de atendimento (account no formato nome@conta)."""
        logger.info("staff_create", extra={"kf_account": account})
        return await self._client.post(
            self._url(API_CREATE),
            _account_params(account, nickname, password),
        )

    async def update(self, account: str, nickname: str, password: str) -> OutboundResult:
        """Atualiza apelido/senha de uma conta."""
        logger.info("staff_update", extra={"kf_account": account})
        return await self._client.post(
            self._url(API_UPDATE),
            _account_params(account, nickname, password),
        )

    async def delete(self, account: str) -> OutboundResult:
        """Remove uma conta de atendimento."""
        logger.info("staff_delete", extra={"kf_account": account})
        return await self._client.get(self._url(API_DELETE), query={"kf_account": account})

    async def avatar(self, account: str, path: str) -> OutboundResult:
        """Envia a imagem de perfil (upload multipart do arquivo em path)."""
        logger.info("staff_avatar_upload", extra={"kf_account": account})
        return await self._client.post(
            self._url(API_AVATAR_UPLOAD),
            files={"media": path},
            query={"kf_account": account},
        )


def _account_params(account: str, nickname: str, password: str) -> dict[str, str]:
    return {
        "kf_account": account,
        "nickname": nickname,
        "password": hash_password(password),
    }


def _extract_list(result: Any, field: str) -> list[dict[str, Any]]:
    if isinstance(result, dict):
        return list(result.get(field, []))
    return []
