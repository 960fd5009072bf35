from __future__ import annotations

import uuid

import structlog

from boleto_sync.adapters.observability.metrics import LINKS_ISSUED
from boleto_sync.core.application.commands.link_commands import (
    IssueConsultorLinksCommand,
    RebuildLinkUrlsCommand,
)
from boleto_sync.core.application.cqrs import CommandHandler, QueryHandler
from boleto_sync.core.application.dtos.sync_dtos import IssuedLinkDTO, ResolvedLinkDTO
from boleto_sync.core.application.queries.link_queries import (
    ListConsultorLinksQuery,
    ResolveShortCodeQuery,
    ResolveSlugQuery,
)
from boleto_sync.core.domain.entities.consultant_entity import ConsultantEntity
from boleto_sync.core.domain.entities.consultor_link_entity import ConsultorLinkEntity
from boleto_sync.core.domain.exceptions import ShortCodeExhaustedError
from boleto_sync.core.domain.repositories.boleto_repository import BoletoRepository
from boleto_sync.core.domain.repositories.consultor_link_repository import ConsultorLinkRepository
from boleto_sync.core.domain.services import link_token_service as tokens
from boleto_sync.core.utils.date_utils import validate_period

logger = structlog.get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 10


def to_issued_dto(link: ConsultorLinkEntity, base_url: str) -> IssuedLinkDTO:
    return IssuedLinkDTO(
        consultant_id=link.consultant_id,
        consultant_name=link.consultant_name or "",
        period=link.period,
        slug=link.slug,
        short_code=link.short_code,
        full_url=link.full_url or tokens.build_full_url(base_url, link.slug),
        short_url=tokens.build_short_url(base_url, link.short_code),
    )


def to_resolved_dto(link: ConsultorLinkEntity, base_url: str) -> ResolvedLinkDTO:
    return ResolvedLinkDTO(
        client_id=link.client_id,
        consultant_id=link.consultant_id,
        period=link.period,
        consultant_name=link.consultant_name or "",
        logo_url=link.logo_url,
        slug=link.slug,
        full_url=link.full_url or tokens.build_full_url(base_url, link.slug),
    )


# ───────────────────────────────────────────────
# Emissão
# ───────────────────────────────────────────────
class IssueConsultorLinksHandler(CommandHandler[IssueConsultorLinksCommand]):
    """
    Um link por (cliente, consultor, competência) para cada consultor com
    ao menos um boleto na competência. Reemissão nunca troca slug nem
    short code; apenas atualiza `updated_at` e preenche short code ausente.

    O short code é conferido antes e gravado sob a constraint única; uma
    colisão na gravação gera novo sorteio, até `max_attempts`.
    """

    def __init__(
        self,
        boleto_repo: BoletoRepository,
        link_repo: ConsultorLinkRepository,
        app_base_url: str = "",
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self.boleto_repo = boleto_repo
        self.link_repo = link_repo
        self.app_base_url = (app_base_url or "").rstrip("/")
        self.max_attempts = max_attempts

    def handle(self, cmd: IssueConsultorLinksCommand) -> list[IssuedLinkDTO]:
        period = validate_period(cmd.period)
        log = logger.bind(client_id=str(cmd.client_id), period=period)

        consultants = self.boleto_repo.distinct_consultants_for_period(cmd.client_id, period)
        issued: list[IssuedLinkDTO] = []
        for consultant in consultants:
            link = self._ensure_link(cmd.client_id, consultant, period)
            issued.append(to_issued_dto(link, self.app_base_url))

        log.info("links.issued", consultants=len(consultants), links=len(issued))
        return issued

    # ---------------------------------------------------------------- internos ------
    def _ensure_link(self, client_id, consultant: ConsultantEntity, period: str) -> ConsultorLinkEntity:
        existing = self.link_repo.find(client_id, consultant.id, period)
        if existing is None:
            return self._create(client_id, consultant, period)
        if not existing.short_code:
            return self._backfill_short_code(existing)
        self.link_repo.touch(existing.id)
        return existing

    def _draw_free_code(self) -> str | None:
        code = tokens.generate_short_code()
        if self.link_repo.short_code_exists(code):
            logger.debug("links.short_code.taken", short_code=code)
            return None
        return code

    def _create(self, client_id, consultant: ConsultantEntity, period: str) -> ConsultorLinkEntity:
        for attempt in range(1, self.max_attempts + 1):
            code = self._draw_free_code()
            if code is None:
                continue
            slug = tokens.generate_slug()
            created = self.link_repo.create(
                ConsultorLinkEntity(
                    id=uuid.uuid4(),
                    client_id=client_id,
                    consultant_id=consultant.id,
                    period=period,
                    slug=slug,
                    short_code=code,
                    full_url=tokens.build_full_url(self.app_base_url, slug),
                )
            )
            if created is not None:
                LINKS_ISSUED.labels(client=str(client_id)).inc()
                logger.info(
                    "links.created",
                    consultant_id=str(consultant.id),
                    period=period,
                    short_code=code,
                    attempt=attempt,
                )
                return created

            # a linha pode ter sido criada por uma emissão concorrente
            concurrent = self.link_repo.find(client_id, consultant.id, period)
            if concurrent is not None:
                return concurrent if concurrent.short_code else self._backfill_short_code(concurrent)

        logger.error("links.short_code.exhausted", consultant_id=str(consultant.id), attempts=self.max_attempts)
        raise ShortCodeExhaustedError(self.max_attempts)

    def _backfill_short_code(self, link: ConsultorLinkEntity) -> ConsultorLinkEntity:
        for _ in range(self.max_attempts):
            code = self._draw_free_code()
            if code is None:
                continue
            if self.link_repo.assign_short_code(link.id, code):
                logger.info("links.short_code.backfilled", link_id=str(link.id), short_code=code)
                return self.link_repo.find_by_id(link.id)
            current = self.link_repo.find_by_id(link.id)
            if current is not None and current.short_code:
                return current

        logger.error("links.short_code.exhausted", link_id=str(link.id), attempts=self.max_attempts)
        raise ShortCodeExhaustedError(self.max_attempts)


class RebuildLinkUrlsHandler(CommandHandler[RebuildLinkUrlsCommand]):
    def __init__(self, link_repo: ConsultorLinkRepository, app_base_url: str = "") -> None:
        self.link_repo = link_repo
        self.app_base_url = (app_base_url or "").rstrip("/")

    def handle(self, cmd: RebuildLinkUrlsCommand) -> int:
        base_url = (cmd.base_url or self.app_base_url).rstrip("/")
        changed = self.link_repo.rebuild_full_urls(lambda slug: tokens.build_full_url(base_url, slug))
        logger.info("links.urls_rebuilt", base_url=base_url, changed=changed)
        return changed


# ───────────────────────────────────────────────
# Consultas
# ───────────────────────────────────────────────
class ListConsultorLinksHandler(QueryHandler[ListConsultorLinksQuery, list]):
    def __init__(self, link_repo: ConsultorLinkRepository, app_base_url: str = "") -> None:
        self.link_repo = link_repo
        self.app_base_url = (app_base_url or "").rstrip("/")

    def handle(self, query: ListConsultorLinksQuery) -> list[IssuedLinkDTO]:
        period = validate_period(query.period) if query.period else None
        return [to_issued_dto(link, self.app_base_url) for link in self.link_repo.list(query.client_id, period)]


class ResolveSlugHandler(QueryHandler[ResolveSlugQuery, object]):
    def __init__(self, link_repo: ConsultorLinkRepository, app_base_url: str = "") -> None:
        self.link_repo = link_repo
        self.app_base_url = (app_base_url or "").rstrip("/")

    def handle(self, query: ResolveSlugQuery) -> ResolvedLinkDTO | None:
        slug = (query.slug or "").strip().lower()
        if not slug or len(slug) > 64:
            return None
        link = self.link_repo.find_by_slug(slug)
        return to_resolved_dto(link, self.app_base_url) if link else None


class ResolveShortCodeHandler(QueryHandler[ResolveShortCodeQuery, object]):
    def __init__(self, link_repo: ConsultorLinkRepository, app_base_url: str = "") -> None:
        self.link_repo = link_repo
        self.app_base_url = (app_base_url or "").rstrip("/")

    def handle(self, query: ResolveShortCodeQuery) -> ResolvedLinkDTO | None:
        code = tokens.normalize_short_code(query.short_code)
        if code is None:
            return None
        link = self.link_repo.find_by_short_code(code)
        return to_resolved_dto(link, self.app_base_url) if link else None
