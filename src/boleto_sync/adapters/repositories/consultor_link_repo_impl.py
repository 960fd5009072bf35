from __future__ import annotations

import structlog
from django.db import IntegrityError, transaction
from django.utils import timezone

from boleto_sync.core.domain.entities.consultor_link_entity import ConsultorLinkEntity
from boleto_sync.core.domain.repositories.consultor_link_repository import ConsultorLinkRepository
from plugins.django_interface.models import ConsultorLink as ConsultorLinkModel

logger = structlog.get_logger(__name__)


class ConsultorLinkRepoImpl(ConsultorLinkRepository):
    @staticmethod
    def _to_entity(model: ConsultorLinkModel) -> ConsultorLinkEntity:
        return ConsultorLinkEntity.from_model(
            model,
            consultant_name=model.consultant.name,
            consultant_contact=model.consultant.contact,
            logo_url=model.client.logo_url or None,
        )

    def _qs(self):
        return ConsultorLinkModel.objects.select_related("consultant", "client")

    # ───────────────────────────────────────────────
    # Queries
    # ───────────────────────────────────────────────
    def find(self, client_id, consultant_id, period: str) -> ConsultorLinkEntity | None:
        model = self._qs().filter(client_id=client_id, consultant_id=consultant_id, period=period).first()
        return self._to_entity(model) if model else None

    def find_by_id(self, link_id) -> ConsultorLinkEntity | None:
        model = self._qs().filter(id=link_id).first()
        return self._to_entity(model) if model else None

    def find_by_slug(self, slug: str) -> ConsultorLinkEntity | None:
        model = self._qs().filter(slug=slug).first()
        return self._to_entity(model) if model else None

    def find_by_short_code(self, short_code: str) -> ConsultorLinkEntity | None:
        model = self._qs().filter(short_code=short_code).first()
        return self._to_entity(model) if model else None

    def short_code_exists(self, short_code: str) -> bool:
        return ConsultorLinkModel.objects.filter(short_code=short_code).exists()

    def list(self, client_id, period: str | None = None) -> list[ConsultorLinkEntity]:
        qs = self._qs().filter(client_id=client_id)
        if period:
            qs = qs.filter(period=period)
        # "MM/YYYY" não ordena cronologicamente como texto; ordena em Python
        models = sorted(qs, key=lambda m: m.consultant.name.lower())
        models.sort(key=lambda m: (m.period[3:], m.period[:2]), reverse=True)
        return [self._to_entity(m) for m in models]

    # ───────────────────────────────────────────────
    # Persistência
    # ───────────────────────────────────────────────
    def create(self, link: ConsultorLinkEntity) -> ConsultorLinkEntity | None:
        try:
            with transaction.atomic():
                model = ConsultorLinkModel.objects.create(
                    id=link.id,
                    client_id=link.client_id,
                    consultant_id=link.consultant_id,
                    period=link.period,
                    slug=link.slug,
                    short_code=link.short_code,
                    full_url=link.full_url,
                )
        except IntegrityError as exc:
            logger.info(
                "consultor_link.create.unique_violation",
                client_id=str(link.client_id),
                consultant_id=str(link.consultant_id),
                period=link.period,
                error=str(exc),
            )
            return None
        return self.find_by_id(model.id)

    def assign_short_code(self, link_id, short_code: str) -> bool:
        try:
            with transaction.atomic():
                updated = ConsultorLinkModel.objects.filter(id=link_id, short_code__isnull=True).update(
                    short_code=short_code, updated_at=timezone.now()
                )
        except IntegrityError:
            logger.info("consultor_link.backfill.unique_violation", link_id=str(link_id))
            return False
        return bool(updated)

    def touch(self, link_id) -> None:
        ConsultorLinkModel.objects.filter(id=link_id).update(updated_at=timezone.now())

    def rebuild_full_urls(self, build_url) -> int:
        changed = 0
        for model in ConsultorLinkModel.objects.only("id", "slug", "full_url").iterator():
            new_url = build_url(model.slug)
            if model.full_url != new_url:
                ConsultorLinkModel.objects.filter(id=model.id).update(full_url=new_url, updated_at=timezone.now())
                changed += 1
        return changed
