from dataclasses import dataclass

from boleto_sync.core.application.cqrs import CommandDTO


@dataclass(frozen=True)
class IssueConsultorLinksCommand(CommandDTO):
    """Garante um link por consultor com boletos na competência (MM/YYYY)."""
    client_id: str
    period: str


@dataclass(frozen=True)
class RebuildLinkUrlsCommand(CommandDTO):
    """Recalcula `full_url` de todos os links (ex.: troca de domínio)."""
    base_url: str | None = None
