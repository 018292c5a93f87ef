"""Payload builders por canal — serialização de respostas para a plataforma.

Estrutura:
- wechat/: respostas passivas em XML
"""

__all__: list[str] = []
