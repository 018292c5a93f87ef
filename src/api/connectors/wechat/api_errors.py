"""Erros e helpers de parsing do envelope errcode/errmsg da API WeChat."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# errmsg que a plataforma usa para sucesso em respostas com errcode
SUCCESS_MESSAGE = "ok"


@dataclass(frozen=True)
class WechatApiError:
    """Erro retornado pela API WeChat."""

    error_code: int
    error_message: str


def has_error_envelope(response_data: Any) -> bool:
    """True se a resposta traz o campo errcode."""
    return isinstance(response_data, Mapping) and "errcode" in response_data


def is_success_envelope(response_data: Mapping[str, Any]) -> bool:
    """Envelope com errcode que ainda assim significa sucesso.

    A plataforma devolve {"errcode": 0, "errmsg": "ok"} em operações sem
    retorno; errmsg "ok" é aceito mesmo com errcode diferente de zero.
    """
    if response_data.get("errmsg") == SUCCESS_MESSAGE:
        return True
    return _coerce_code(response_data.get("errcode")) == 0


def parse_wechat_error(response_data: Any) -> WechatApiError | None:
    """Extrai o erro do envelope.

    Returns:
        WechatApiError se houver erro, None se sucesso ou sem envelope
    """
    if not has_error_envelope(response_data) or is_success_envelope(response_data):
        return None

    return WechatApiError(
        error_code=_coerce_code(response_data.get("errcode")),
        error_message=str(response_data.get("errmsg", "Erro desconhecido")),
    )


def _coerce_code(raw_code: Any) -> int:
    try:
        return int(raw_code)
    except (TypeError, ValueError):
        return -1
