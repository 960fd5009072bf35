from abc import ABC, abstractmethod

from boleto_sync.core.domain.entities.filter_config_entity import FilterConfigEntity


class FilterConfigRepository(ABC):
    @abstractmethod
    def get_for_client(self, client_id) -> FilterConfigEntity:
        """Configuração do cliente, ou a padrão (apenas ATIVO) se ausente."""
        ...
