from __future__ import annotations

from abc import ABC, abstractmethod

from boleto_sync.core.domain.entities.client_entity import ClientEntity


class ClientRepository(ABC):
    @abstractmethod
    def find_by_id(self, client_id) -> ClientEntity | None:
        """Retorna o cliente pelo ID interno."""
        ...

    @abstractmethod
    def list_active(self) -> list[ClientEntity]:
        """Clientes ativos (usado pelo agendamento mensal)."""
        ...
