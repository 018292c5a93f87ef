"""Protocolos HTTP usados pelo app.

Evita dependência direta do cliente concreto (httpx) no executor outbound.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class HttpTransportProtocol(Protocol):
    """Contrato mínimo de transporte HTTP.

    Retorna o corpo bruto da resposta; vazio quando o servidor não respondeu
    conteúdo. Falhas de rede levantam HttpError.
    """

    async def send(
        self,
        method: str,
        url: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        files: Mapping[str, str] | None = None,
    ) -> bytes: ...
