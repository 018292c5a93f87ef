"""Connectors por canal — adapters de borda para APIs externas.

Estrutura:
- wechat/: WeChat Official Account (callback + API outbound)
"""

__all__: list[str] = []
