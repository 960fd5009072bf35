from __future__ import annotations

from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone

from boleto_sync.core.domain.services.link_token_service import build_short_url
from boleto_sync.core.utils.date_utils import period_bounds
from boleto_sync.core.utils.phone_utils import format_br_phone
from plugins.django_interface.models import ConsultorLink


class Command(BaseCommand):
    """
    Gera uma lista em markdown com o link curto de cada consultor,
    usando a competência mais recente que possui short code.
    """
    help = "Exporta os links curtos dos consultores em markdown"

    def add_arguments(self, parser):
        parser.add_argument("--client-id", type=str, default=None)
        parser.add_argument("--base-url", type=str, default=None, help="Padrão: APP_BASE_URL")
        parser.add_argument("--output", type=str, default=None, help="Arquivo de saída (padrão: stdout)")

    def handle(self, *a, **opts):
        base_url = (opts["base_url"] or settings.APP_BASE_URL or "").rstrip("/")
        markdown = render_markdown(latest_links(opts["client_id"]), base_url)

        if opts["output"]:
            with open(opts["output"], "w", encoding="utf-8") as fh:
                fh.write(markdown)
            self.stdout.write(self.style.SUCCESS(f"✅ Arquivo gerado: {opts['output']}"))
        else:
            self.stdout.write(markdown)


def latest_links(client_id: str | None = None) -> list[ConsultorLink]:
    """Um link por consultor: o da competência mais recente."""
    qs = ConsultorLink.objects.select_related("consultant").filter(short_code__isnull=False)
    if client_id:
        qs = qs.filter(client_id=client_id)

    latest: dict = {}
    for link in qs:
        current = latest.get(link.consultant_id)
        if current is None or period_bounds(link.period)[0] > period_bounds(current.period)[0]:
            latest[link.consultant_id] = link
    return sorted(latest.values(), key=lambda link: (link.consultant.name or "").strip().lower())


def render_markdown(links: list[ConsultorLink], base_url: str) -> str:
    lines = ["*Links da Central do Consultor*", "", f"Base: {base_url}", ""]
    for i, link in enumerate(links, start=1):
        lines.append(f"{i}. {link.consultant.name.strip()} - {format_br_phone(link.consultant.contact)}")
        lines.append(build_short_url(base_url, link.short_code))
        lines.append("")
    generated = timezone.localtime().strftime("%d/%m/%Y %H:%M:%S")
    lines.append(f"_Gerado em {generated} - {len(links)} consultor(es)_")
    return "\n".join(lines)
