from django.core.management.base import BaseCommand, CommandError

from boleto_sync.adapters.config.composition_root import setup_di_container_from_settings
from boleto_sync.core.application.commands.link_commands import IssueConsultorLinksCommand
from boleto_sync.core.domain.exceptions import BoletoSyncError


class Command(BaseCommand):
    help = "Emite (ou reaproveita) os links de consultor de uma competência"

    def add_arguments(self, parser):
        parser.add_argument("--client-id", required=True, type=str)
        parser.add_argument("--period", required=True, type=str, help="MM/YYYY")

    def handle(self, *a, **opts):
        bus = setup_di_container_from_settings(None).command_bus()
        try:
            links = bus.dispatch(IssueConsultorLinksCommand(client_id=opts["client_id"], period=opts["period"]))
        except BoletoSyncError as exc:
            raise CommandError(str(exc)) from exc

        for link in links:
            self.stdout.write(f"{link.consultant_name}: {link.short_url or link.full_url}")
        self.stdout.write(self.style.SUCCESS(f"✅ {len(links)} link(s) para {opts['period']}"))
