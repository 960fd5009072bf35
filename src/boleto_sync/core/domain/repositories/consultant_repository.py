from __future__ import annotations

from abc import ABC, abstractmethod

from boleto_sync.core.domain.entities.consultant_entity import ConsultantEntity


class ConsultantRepository(ABC):
    @abstractmethod
    def find_by_id(self, consultant_id) -> ConsultantEntity | None:
        ...

    @abstractmethod
    def list_active_by_client(self, client_id) -> list[ConsultantEntity]:
        """Consultores ativos do cliente."""
        ...
