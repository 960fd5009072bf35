from __future__ import annotations

import structlog
from celery import Task, shared_task
from django.conf import settings

from boleto_sync.adapters.config.composition_root import setup_di_container_from_settings
from boleto_sync.core.application.commands.sync_commands import SyncBoletosCommand
from boleto_sync.core.domain.exceptions import TRANSIENT_UPSTREAM_ERRORS, SyncAlreadyRunningError
from boleto_sync.core.utils.date_utils import current_month_range

log = structlog.get_logger(__name__)

# ──────────────────────────────────────────────────────────────────────────
# Constantes de filas e parâmetros
# ──────────────────────────────────────────────────────────────────────────
QUEUE_BOLETO_SYNC = "boleto_sync"
QUEUE_DEAD_LETTER = "dead_letter"


# ──────────────────────────────────────────────────────────────────────────
# Base Task com DLQ
# ──────────────────────────────────────────────────────────────────────────
class BaseTaskWithDLQ(Task):
    """
    Envia p/ Dead Letter Queue quando falhar após todas as retentativas.
    Evita enviar na configuração 'task_always_eager'.
    """
    def on_failure(self, exc, task_id, args, kwargs, einfo):
        is_eager = bool(getattr(self.app.conf, "task_always_eager", False))
        if is_eager:
            log.critical(
                "task.failed_eager_mode",
                task=self.name, task_id=task_id, error=str(exc),
                note="DLQ não utilizada em eager; apenas log."
            )
        else:
            log.critical(
                "task.failed_dlq_redirect",
                task=self.name, task_id=task_id, error=str(exc),
                queue=QUEUE_DEAD_LETTER
            )
            self.app.send_task(
                self.name,
                args=args,
                kwargs=kwargs,
                queue=QUEUE_DEAD_LETTER,
                routing_key=QUEUE_DEAD_LETTER,
            )
        super().on_failure(exc, task_id, args, kwargs, einfo)


# ──────────────────────────────────────────────────────────────────────────
# Sincronização de boletos (por cliente)
# ──────────────────────────────────────────────────────────────────────────
@shared_task(
    base=BaseTaskWithDLQ, bind=True, max_retries=3, default_retry_delay=300,
    acks_late=True, queue=QUEUE_BOLETO_SYNC
)
def execute_boleto_sync_for_client(
    self,
    client_id: str,
    start_date: str | None = None,
    end_date: str | None = None,
    situation_code: str | None = None,
):
    """
    [Granular] Sincroniza UM cliente. Sem datas ⇒ mês corrente.

    Só falhas transitórias do SGA (5xx / rede) e lock ocupado geram nova
    tentativa; erros de configuração falham direto.
    """
    default_start, default_end = current_month_range()
    cmd = SyncBoletosCommand(
        client_id=str(client_id),
        start_date=start_date or default_start,
        end_date=end_date or default_end,
        situation_code=situation_code or settings.SGA_DEFAULT_SITUATION_CODE,
    )
    bus = setup_di_container_from_settings(settings).command_bus()

    try:
        stats = bus.dispatch(cmd)
    except SyncAlreadyRunningError as exc:
        log.warning("boleto_sync.lock_busy", client_id=cmd.client_id, retry_in=settings.SYNC_BUSY_RETRY_SECONDS)
        raise self.retry(exc=exc, countdown=settings.SYNC_BUSY_RETRY_SECONDS)  # noqa: B904
    except TRANSIENT_UPSTREAM_ERRORS as exc:
        log.error("boleto_sync.upstream_transient", client_id=cmd.client_id, error=str(exc))
        raise self.retry(exc=exc)  # noqa: B904

    log.info(
        "boleto_sync.task_ok",
        client_id=cmd.client_id,
        period=stats.period,
        inserted=stats.total_inserted,
        updated=stats.total_updated,
        links=stats.links_issued,
    )
    return stats.as_response()


@shared_task(queue=QUEUE_BOLETO_SYNC)
def schedule_monthly_boleto_sync():
    """
    [Orquestração] Enfileira a sincronização do mês corrente para cada cliente ativo.
    """
    clients = setup_di_container_from_settings(settings).client_repo().list_active()
    start_date, end_date = current_month_range()
    for client in clients:
        execute_boleto_sync_for_client.delay(str(client.id), start_date, end_date)
    log.info("boleto_sync.enqueued", total=len(clients), start_date=start_date, end_date=end_date)
    return len(clients)
