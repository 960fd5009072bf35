from __future__ import annotations

from abc import ABC, abstractmethod

from boleto_sync.core.domain.entities.consultor_link_entity import ConsultorLinkEntity


class ConsultorLinkRepository(ABC):
    @abstractmethod
    def find(self, client_id, consultant_id, period: str) -> ConsultorLinkEntity | None:
        ...

    @abstractmethod
    def find_by_id(self, link_id) -> ConsultorLinkEntity | None:
        ...

    @abstractmethod
    def find_by_slug(self, slug: str) -> ConsultorLinkEntity | None:
        """Inclui nome do consultor e logo do cliente."""
        ...

    @abstractmethod
    def find_by_short_code(self, short_code: str) -> ConsultorLinkEntity | None:
        ...

    @abstractmethod
    def short_code_exists(self, short_code: str) -> bool:
        ...

    @abstractmethod
    def create(self, link: ConsultorLinkEntity) -> ConsultorLinkEntity | None:
        """
        Grava um link novo. Retorna None se alguma restrição de unicidade
        (slug, short code ou trio client/consultant/period) rejeitar a linha.
        """
        ...

    @abstractmethod
    def assign_short_code(self, link_id, short_code: str) -> bool:
        """Preenche o short code apenas se ainda estiver vazio."""
        ...

    @abstractmethod
    def touch(self, link_id) -> None:
        """Atualiza apenas `updated_at`."""
        ...

    @abstractmethod
    def list(self, client_id, period: str | None = None) -> list[ConsultorLinkEntity]:
        """Ordenado por competência desc e nome do consultor."""
        ...

    @abstractmethod
    def rebuild_full_urls(self, build_url) -> int:
        """Recalcula `full_url` de todos os links com `build_url(slug)`."""
        ...
