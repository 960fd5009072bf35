from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from boleto_sync.adapters.api_clients.sga_api_client import SgaAPIClient
from boleto_sync.adapters.locks.client_sync_lock import ClientSyncLock
from boleto_sync.adapters.observability.metrics import (
    BOLETOS_UPSERTED,
    RECORD_ERRORS,
    RECORDS_REJECTED,
    SYNC_DURATION,
    SYNC_RUNS,
)
from boleto_sync.core.application.commands.link_commands import IssueConsultorLinksCommand
from boleto_sync.core.application.commands.sync_commands import SyncBoletosCommand
from boleto_sync.core.application.cqrs import CommandHandler
from boleto_sync.core.application.dtos.sga_dtos import SgaBoletoDTO
from boleto_sync.core.application.dtos.sync_dtos import RecordErrorDTO, SyncStatsDTO
from boleto_sync.core.application.handlers.link_handlers import IssueConsultorLinksHandler
from boleto_sync.core.application.services.eligibility_filter import EligibilityFilter
from boleto_sync.core.domain.entities.boleto_entity import UpsertOutcome
from boleto_sync.core.domain.entities.client_entity import ClientEntity
from boleto_sync.core.domain.entities.consultant_entity import ConsultantEntity
from boleto_sync.core.domain.exceptions import (
    ClientInactiveError,
    ClientNotFoundError,
    InvalidDateError,
    MalformedRecordError,
    NoActiveConsultantsError,
)
from boleto_sync.core.domain.mappers.sga_payload_mapper import SgaPayloadMapper
from boleto_sync.core.domain.repositories.boleto_repository import BoletoRepository
from boleto_sync.core.domain.repositories.client_repository import ClientRepository
from boleto_sync.core.domain.repositories.consultant_repository import ConsultantRepository
from boleto_sync.core.domain.repositories.filter_config_repository import FilterConfigRepository
from boleto_sync.core.utils.date_utils import parse_br_date, period_from_date

logger = structlog.get_logger(__name__)

SgaClientFactory = Callable[..., SgaAPIClient]


class SyncBoletosHandler(CommandHandler[SyncBoletosCommand]):
    """
    Orquestra a sincronização de UM cliente em um intervalo de vencimento:

      0. lock exclusivo por cliente
      1. valida cliente ativo + consultores ativos (fatal)
      2. carrega situações de veículo aceitas
      3. busca todas as páginas no SGA
      4. filtra e grava cada boleto (falhas por boleto não interrompem o lote)
      5. emite os links da competência (falha vira `links_issued = 0`)
      6. devolve as estatísticas
    """

    def __init__(  # noqa: PLR0913
        self,
        client_repo: ClientRepository,
        consultant_repo: ConsultantRepository,
        filter_config_repo: FilterConfigRepository,
        boleto_repo: BoletoRepository,
        link_issuer: IssueConsultorLinksHandler,
        sga_client_factory: SgaClientFactory,
        sync_lock: ClientSyncLock,
        eligibility: EligibilityFilter | None = None,
        mapper: SgaPayloadMapper | None = None,
    ) -> None:
        self.client_repo = client_repo
        self.consultant_repo = consultant_repo
        self.filter_config_repo = filter_config_repo
        self.boleto_repo = boleto_repo
        self.link_issuer = link_issuer
        self.sga_client_factory = sga_client_factory
        self.sync_lock = sync_lock
        self.eligibility = eligibility or EligibilityFilter()
        self.mapper = mapper or SgaPayloadMapper()

    def handle(self, cmd: SyncBoletosCommand) -> SyncStatsDTO:
        start = parse_br_date(cmd.start_date)
        end = parse_br_date(cmd.end_date)
        if start > end:
            raise InvalidDateError("A data inicial deve ser anterior ou igual à data final.")
        period = period_from_date(start)

        client_label = str(cmd.client_id)
        with self.sync_lock.hold(cmd.client_id):
            try:
                with SYNC_DURATION.labels(client=client_label).time():
                    stats = self._run(cmd, period)
            except Exception:
                SYNC_RUNS.labels(client=client_label, outcome="error").inc()
                raise
        SYNC_RUNS.labels(client=client_label, outcome="success").inc()
        return stats

    # ---------------------------------------------------------------- etapas --------
    def _validate(self, client_id) -> tuple[ClientEntity, list[ConsultantEntity]]:
        client = self.client_repo.find_by_id(client_id)
        if client is None:
            raise ClientNotFoundError(client_id)
        if not client.active:
            raise ClientInactiveError(client_id)
        consultants = self.consultant_repo.list_active_by_client(client.id)
        if not consultants:
            raise NoActiveConsultantsError(client_id)
        return client, consultants

    def _run(self, cmd: SyncBoletosCommand, period: str) -> SyncStatsDTO:
        started = time.perf_counter()
        log = logger.bind(client_id=str(cmd.client_id), period=period)
        log.info("sync.start", start_date=cmd.start_date, end_date=cmd.end_date, situation_code=cmd.situation_code)

        client, consultants = self._validate(cmd.client_id)
        consultants_by_code = {c.sga_consultant_code: c for c in consultants}
        accepted = self.filter_config_repo.get_for_client(client.id).accepted_set()
        log.debug("sync.configured", consultants=len(consultants), accepted_statuses=sorted(accepted))

        sga = self.sga_client_factory(base_url=client.api_base_url, token=client.bearer_token)
        records = sga.fetch_boletos(
            situation_code=cmd.situation_code, start_date=cmd.start_date, end_date=cmd.end_date
        )

        stats = SyncStatsDTO(client_id=client.id, period=period)
        for record in records:
            stats.total_processed += 1
            try:
                self._reconcile(record, client, accepted, consultants_by_code, stats)
            except Exception as exc:  # noqa: BLE001
                RECORD_ERRORS.labels(client=str(client.id)).inc()
                log.error("sync.record_error", nosso_numero=record.nosso_numero, error=str(exc), exc_info=True)
                stats.errors.append(RecordErrorDTO(nosso_numero=record.nosso_numero, error=str(exc)))

        self._publish(client, period, stats, log)

        stats.duration_seconds = round(time.perf_counter() - started, 3)
        log.info(
            "sync.done",
            processed=stats.total_processed,
            inserted=stats.total_inserted,
            updated=stats.total_updated,
            rejected=stats.total_rejected,
            errors=len(stats.errors),
            links=stats.links_issued,
            duration=stats.duration_seconds,
        )
        return stats

    def _reconcile(
        self,
        record: SgaBoletoDTO,
        client: ClientEntity,
        accepted: frozenset[str],
        consultants_by_code: dict[str, ConsultantEntity],
        stats: SyncStatsDTO,
    ) -> None:
        if record.validation_error:
            raise MalformedRecordError(record.validation_error)

        result = self.eligibility.evaluate(record, accepted, consultants_by_code)
        for reason, amount in result.rejections.items():
            stats.rejected.add(reason, amount)
            RECORDS_REJECTED.labels(client=str(client.id), reason=reason).inc(amount)

        # todos os elegíveis apontam para o mesmo consultor; o último veículo prevalece
        for eligible in result.eligible:
            entity = self.mapper.map_boleto(
                record, client_id=client.id, consultant_id=eligible.consultant.id, vehicle=eligible.vehicle
            )
            outcome = self.boleto_repo.upsert(entity)
            if outcome is UpsertOutcome.INSERTED:
                stats.total_inserted += 1
            else:
                stats.total_updated += 1
            BOLETOS_UPSERTED.labels(client=str(client.id), outcome=outcome.value).inc()

    def _publish(self, client: ClientEntity, period: str, stats: SyncStatsDTO, log) -> None:
        try:
            links = self.link_issuer.handle(IssueConsultorLinksCommand(client_id=str(client.id), period=period))
        except Exception as exc:  # noqa: BLE001
            log.error("sync.links_failed", error=str(exc), exc_info=True)
            stats.links = []
            stats.links_issued = 0
            return
        stats.links = links
        stats.links_issued = len(links)
