from __future__ import annotations

import structlog

from boleto_sync.core.application.commands.boleto_commands import RefreshBoletoDetailCommand
from boleto_sync.core.application.cqrs import CommandHandler, PagedResult, QueryHandler
from boleto_sync.core.application.handlers.sync_handlers import SgaClientFactory
from boleto_sync.core.application.queries.boleto_queries import (
    GetBoletoByNossoNumeroQuery,
    GetBoletoQuery,
    GetConsultantSummaryQuery,
    ListBoletosQuery,
)
from boleto_sync.core.domain.entities.boleto_entity import BoletoEntity
from boleto_sync.core.domain.exceptions import ClientInactiveError, ClientNotFoundError
from boleto_sync.core.domain.repositories.boleto_repository import BoletoRepository
from boleto_sync.core.domain.repositories.client_repository import ClientRepository

logger = structlog.get_logger(__name__)


class RefreshBoletoDetailHandler(CommandHandler[RefreshBoletoDetailCommand]):
    """
    Consulta `buscar/boleto/{nosso_numero}` no SGA do cliente e grava
    o PIX copia-e-cola e o link do PDF no boleto local.
    Retorna o payload do SGA (lista de itens) para repasse ao chamador.
    """

    def __init__(
        self,
        client_repo: ClientRepository,
        boleto_repo: BoletoRepository,
        sga_client_factory: SgaClientFactory,
    ) -> None:
        self.client_repo = client_repo
        self.boleto_repo = boleto_repo
        self.sga_client_factory = sga_client_factory

    def handle(self, cmd: RefreshBoletoDetailCommand) -> list[dict]:
        client = self.client_repo.find_by_id(cmd.client_id)
        if client is None:
            raise ClientNotFoundError(cmd.client_id)
        if not client.active:
            raise ClientInactiveError(cmd.client_id)

        sga = self.sga_client_factory(base_url=client.api_base_url, token=client.bearer_token)
        items = sga.get_boleto_detail(cmd.nosso_numero)
        if items:
            first = items[0]
            updated = self.boleto_repo.update_payment_info(
                client.id,
                cmd.nosso_numero,
                pix_copy_paste=first.pix_copy_paste,
                pdf_url=first.pdf_url,
            )
            logger.info(
                "boleto.detail_refreshed",
                client_id=str(client.id),
                nosso_numero=cmd.nosso_numero,
                persisted=bool(updated),
                has_pix=bool(first.pix_copy_paste),
                has_pdf=bool(first.pdf_url),
            )
        return [item.model_dump(mode="json", exclude_none=True) for item in items]


class ListBoletosHandler(QueryHandler[ListBoletosQuery, PagedResult]):
    def __init__(self, boleto_repo: BoletoRepository):
        self._repo = boleto_repo

    def handle(self, query: ListBoletosQuery) -> PagedResult[BoletoEntity]:
        return self._repo.list(filtros=query.filtros, page=query.page, page_size=query.page_size)


class GetBoletoHandler(QueryHandler[GetBoletoQuery, object]):
    def __init__(self, boleto_repo: BoletoRepository):
        self._repo = boleto_repo

    def handle(self, query: GetBoletoQuery) -> BoletoEntity | None:
        return self._repo.find_by_id(query.boleto_id)


class GetBoletoByNossoNumeroHandler(QueryHandler[GetBoletoByNossoNumeroQuery, object]):
    def __init__(self, boleto_repo: BoletoRepository):
        self._repo = boleto_repo

    def handle(self, query: GetBoletoByNossoNumeroQuery) -> BoletoEntity | None:
        return self._repo.find_by_natural_key(query.client_id, query.nosso_numero)


class GetConsultantSummaryHandler(QueryHandler[GetConsultantSummaryQuery, dict]):
    def __init__(self, boleto_repo: BoletoRepository):
        self._repo = boleto_repo

    def handle(self, query: GetConsultantSummaryQuery) -> dict:
        return self._repo.consultant_summary(query.client_id, query.consultant_id)
