from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from boleto_sync.core.application.cqrs import PagedResult
from boleto_sync.core.domain.entities.boleto_entity import BoletoEntity, UpsertOutcome
from boleto_sync.core.domain.entities.consultant_entity import ConsultantEntity


class BoletoRepository(ABC):
    @abstractmethod
    def upsert(self, boleto: BoletoEntity) -> UpsertOutcome:
        """
        Insere ou atualiza pelo par (client, nosso_numero).
        O resultado serve apenas para estatística.
        """
        ...

    @abstractmethod
    def find_by_id(self, boleto_id) -> BoletoEntity | None:
        """Boleto completo, com nomes de consultor e cliente."""
        ...

    @abstractmethod
    def find_by_natural_key(self, client_id, nosso_numero: str) -> BoletoEntity | None:
        ...

    @abstractmethod
    def list(self, filtros: dict[str, Any], page: int, page_size: int) -> PagedResult[BoletoEntity]:
        """
        Lista paginada por cliente (obrigatório), ordenada por vencimento
        desc e criação desc. `extra` traz o `logo_url` do cliente.
        """
        ...

    @abstractmethod
    def update_payment_info(
        self, client_id, nosso_numero: str, *, pix_copy_paste: str | None, pdf_url: str | None
    ) -> int:
        """Persiste PIX copia-e-cola e link do PDF obtidos sob demanda."""
        ...

    @abstractmethod
    def consultant_summary(self, client_id, consultant_id) -> dict[str, Any]:
        ...

    @abstractmethod
    def distinct_consultants_for_period(self, client_id, period: str) -> list[ConsultantEntity]:
        """Consultores com ao menos um boleto na competência."""
        ...
