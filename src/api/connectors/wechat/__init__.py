"""Conector WeChat — adapter de borda para callbacks e API outbound.

Responsabilidades:
- Webhook (handshake, assinatura, decodificação do payload)
- Codec XML do protocolo
- Executor outbound com decodificação do envelope errcode/errmsg

Mantido sem imports no pacote: app/infra/crypto usa o codec XML daqui e o
executor depende de app/; importar tudo aqui criaria ciclos.
"""
