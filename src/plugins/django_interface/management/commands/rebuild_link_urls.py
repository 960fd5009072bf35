from django.core.management.base import BaseCommand

from boleto_sync.adapters.config.composition_root import setup_di_container_from_settings
from boleto_sync.core.application.commands.link_commands import RebuildLinkUrlsCommand


class Command(BaseCommand):
    help = "Recalcula a URL completa gravada em cada link (ex.: troca de domínio)"

    def add_arguments(self, parser):
        parser.add_argument("--base-url", type=str, default=None, help="Padrão: APP_BASE_URL")

    def handle(self, *a, **opts):
        bus = setup_di_container_from_settings(None).command_bus()
        changed = bus.dispatch(RebuildLinkUrlsCommand(base_url=opts["base_url"]))
        self.stdout.write(self.style.SUCCESS(f"✅ {changed} link(s) atualizados"))
