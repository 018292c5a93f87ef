"""API — camada de borda e adapters do canal WeChat.

Responsabilidades:
- Receber callbacks da plataforma (handshake e mensagens)
- Validar assinaturas e decodificar payloads (texto puro ou modo seguro)
- Executar chamadas à API outbound e decodificar o envelope de erro
- Serializar respostas passivas no XML da plataforma

Subpastas:
- connectors/: adapters por canal (webhook, HTTP, XML)
- payload_builders/: serialização das respostas passivas
- routes/: endpoints HTTP (callback, health)

NÃO PODE conter: registro de listeners, política de access_token, service locator.
"""
