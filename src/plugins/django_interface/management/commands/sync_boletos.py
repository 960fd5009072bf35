from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from boleto_sync.adapters.config.composition_root import setup_di_container_from_settings
from boleto_sync.core.application.commands.sync_commands import SyncBoletosCommand
from boleto_sync.core.domain.exceptions import BoletoSyncError
from boleto_sync.core.utils.date_utils import current_month_range


class Command(BaseCommand):
    help = "Sincroniza os boletos de um cliente a partir do SGA (padrão: mês corrente)"

    def add_arguments(self, parser):
        parser.add_argument("--client-id", required=True, type=str)
        parser.add_argument("--start-date", type=str, help="DD/MM/YYYY")
        parser.add_argument("--end-date", type=str, help="DD/MM/YYYY")
        parser.add_argument("--situation-code", type=str, default=None)

    def handle(self, *a, **opts):
        default_start, default_end = current_month_range()
        bus = setup_di_container_from_settings(None).command_bus()
        try:
            stats = bus.dispatch(
                SyncBoletosCommand(
                    client_id=opts["client_id"],
                    start_date=opts["start_date"] or default_start,
                    end_date=opts["end_date"] or default_end,
                    situation_code=opts["situation_code"] or settings.SGA_DEFAULT_SITUATION_CODE,
                )
            )
        except BoletoSyncError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(
            self.style.SUCCESS(
                f"✅ {stats.period}: {stats.total_processed} processados, "
                f"{stats.total_inserted} inseridos, {stats.total_updated} atualizados, "
                f"{stats.total_rejected} rejeitados, {len(stats.errors)} erros, "
                f"{stats.links_issued} links"
            )
        )
        for err in stats.errors:
            self.stderr.write(self.style.WARNING(f"  • {err.nosso_numero}: {err.error}"))
