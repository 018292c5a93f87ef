"""Service locator: resolução preguiçosa e memoizada de serviços auxiliares.

Cada nome é associado a uma factory que recebe o núcleo. A primeira resolução
constrói a instância; as seguintes devolvem a mesma instância enquanto o
núcleo existir.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

CoreT = TypeVar("CoreT")
ServiceFactory = Callable[[CoreT], Any]


def normalize_service_name(name: str) -> str:
    """Nomes de serviço não diferenciam maiúsculas/minúsculas."""
    return name.strip().lower()


class ServiceLocator(Generic[CoreT]):
    """Registro nome → factory com memoização por instância do núcleo.

    Args:
        core: Objeto passado a cada factory na construção
    """

    def __init__(self, core: CoreT) -> None:
        self._core = core
        self._factories: dict[str, ServiceFactory[CoreT]] = {}
        self._resolved: dict[str, Any] = {}
        # RLock: uma factory pode resolver outro serviço (ex.: crypt → cache)
        self._lock = threading.RLock()

    def register(self, name: str, factory: ServiceFactory[CoreT]) -> None:
        """Registra (ou substitui, se ainda não resolvida) a factory do serviço.

        Raises:
            ConfigurationError: Se o serviço já foi construído
        """
        service_name = normalize_service_name(name)
        with self._lock:
            if service_name in self._resolved:
                raise ConfigurationError(f"Serviço '{service_name}' já foi resolvido")
            self._factories[service_name] = factory

    def resolve(self, name: str) -> Any:
        """Retorna a instância do serviço, construindo-a uma única vez.

        Raises:
            ConfigurationError: Serviço desconhecido
        """
        service_name = normalize_service_name(name)
        instance = self._resolved.get(service_name)
        if instance is not None:
            return instance

        with self._lock:
            # Re-checagem sob lock: outra thread pode ter construído
            if service_name in self._resolved:
                return self._resolved[service_name]

            factory = self._factories.get(service_name)
            if factory is None:
                raise ConfigurationError(f"Serviço desconhecido '{service_name}'")

            instance = factory(self._core)
            self._resolved[service_name] = instance

        logger.debug("service_resolved", extra={"service_name": service_name})
        return instance
