from dataclasses import dataclass

from boleto_sync.core.application.cqrs import QueryDTO


@dataclass(frozen=True, kw_only=True)
class ListConsultorLinksQuery(QueryDTO):
    client_id: str
    period: str | None = None


@dataclass(frozen=True, kw_only=True)
class ResolveSlugQuery(QueryDTO):
    slug: str


@dataclass(frozen=True, kw_only=True)
class ResolveShortCodeQuery(QueryDTO):
    short_code: str
