"""App — coração do sistema: núcleo do protocolo, serviços e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- services/: registro de listeners, access_token, service locator, resposta
- domain/: envelope inbound, chaves de listener, mensagens de resposta
- infra/: implementações concretas de IO (cache, crypto, http)
- protocols/: contratos/interfaces
- observability/: correlation_id
- constants/: constantes do protocolo

Padrão: app executa; api adapta; utils apoia.
"""
