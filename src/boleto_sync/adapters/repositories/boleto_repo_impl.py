from __future__ import annotations

from decimal import Decimal
from typing import Any

import structlog
from django.db import IntegrityError, transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from boleto_sync.core.application.cqrs import PagedResult
from boleto_sync.core.domain.entities.boleto_entity import BoletoEntity, UpsertOutcome
from boleto_sync.core.domain.entities.consultant_entity import ConsultantEntity
from boleto_sync.core.domain.repositories.boleto_repository import BoletoRepository
from boleto_sync.core.utils.date_utils import period_bounds
from plugins.django_interface.models import Boleto as BoletoModel
from plugins.django_interface.models import Client as ClientModel
from plugins.django_interface.models import Consultant as ConsultantModel

logger = structlog.get_logger(__name__)

SUMMARY_STATUSES = ("ABERTO", "VENCIDO", "PAGO")


class BoletoRepoImpl(BoletoRepository):
    """
    Armazenamento de reconciliação dos boletos do SGA.
    A unicidade (client, nosso_numero) é garantida pela constraint
    `uq_boleto_client_nosso_numero`.
    """

    @staticmethod
    def _to_entity(model: BoletoModel) -> BoletoEntity:
        return BoletoEntity.from_model(
            model,
            consultant_name=model.consultant.name if model.consultant_id else None,
            client_name=model.client.name if model.client_id else None,
        )

    # ─────────────────────────── PERSISTÊNCIA ───────────────────────────
    def upsert(self, boleto: BoletoEntity) -> UpsertOutcome:
        natural_key = {"client_id": boleto.client_id, "nosso_numero": boleto.nosso_numero}
        values = boleto.mutable_values()

        try:
            with transaction.atomic():
                model, created = BoletoModel.objects.update_or_create(**natural_key, defaults=values)
        except IntegrityError:
            # Outra execução inseriu a mesma chave entre o SELECT e o INSERT
            logger.warning("boleto.upsert.race_recovered", **{k: str(v) for k, v in natural_key.items()})
            with transaction.atomic():
                updated = BoletoModel.objects.filter(**natural_key).update(**values, updated_at=timezone.now())
            if not updated:
                raise
            model = BoletoModel.objects.get(**natural_key)
            created = False

        boleto.id = model.id
        boleto.created_at = model.created_at
        boleto.updated_at = model.updated_at
        return UpsertOutcome.INSERTED if created else UpsertOutcome.UPDATED

    def update_payment_info(
        self, client_id, nosso_numero: str, *, pix_copy_paste: str | None, pdf_url: str | None
    ) -> int:
        return BoletoModel.objects.filter(client_id=client_id, nosso_numero=nosso_numero).update(
            pix_copy_paste=pix_copy_paste,
            pdf_url=pdf_url,
            updated_at=timezone.now(),
        )

    # ─────────────────────────── CONSULTAS ───────────────────────────
    def find_by_id(self, boleto_id) -> BoletoEntity | None:
        model = BoletoModel.objects.select_related("consultant", "client").filter(id=boleto_id).first()
        return self._to_entity(model) if model else None

    def find_by_natural_key(self, client_id, nosso_numero: str) -> BoletoEntity | None:
        model = (
            BoletoModel.objects.select_related("consultant", "client")
            .filter(client_id=client_id, nosso_numero=nosso_numero)
            .first()
        )
        return self._to_entity(model) if model else None

    def list(self, filtros: dict[str, Any], page: int, page_size: int) -> PagedResult[BoletoEntity]:
        """
        - filtros: client_id (obrigatório), consultant_id, billing_status,
          start_date / end_date (date, aplicados sobre o vencimento)
        - page: número da página (1-based)
        """
        client_id = filtros.get("client_id")
        if not client_id:
            raise ValueError("client_id é obrigatório")

        qs = BoletoModel.objects.select_related("consultant", "client").filter(client_id=client_id)
        if filtros.get("consultant_id"):
            qs = qs.filter(consultant_id=filtros["consultant_id"])
        if filtros.get("billing_status"):
            qs = qs.filter(billing_status=filtros["billing_status"])
        if filtros.get("start_date"):
            qs = qs.filter(due_date__gte=filtros["start_date"])
        if filtros.get("end_date"):
            qs = qs.filter(due_date__lte=filtros["end_date"])

        total = qs.count()
        offset = (page - 1) * page_size
        rows = qs.order_by("-due_date", "-created_at")[offset: offset + page_size]

        logo_url = ClientModel.objects.filter(id=client_id).values_list("logo_url", flat=True).first()
        return PagedResult(
            items=[self._to_entity(m) for m in rows],
            total=total,
            page=page,
            page_size=page_size,
            extra={"logo_url": logo_url},
        )

    def consultant_summary(self, client_id, consultant_id) -> dict[str, Any]:
        agg = BoletoModel.objects.filter(client_id=client_id, consultant_id=consultant_id).aggregate(
            total_boletos=Count("id"),
            total_amount=Sum("amount"),
            **{
                f"total_{status.lower()}": Count("id", filter=Q(billing_status=status))
                for status in SUMMARY_STATUSES
            },
        )
        return {
            "consultant_id": str(consultant_id),
            "total_boletos": agg["total_boletos"],
            "total_amount": agg["total_amount"] or Decimal("0"),
            "total_open": agg["total_aberto"],
            "total_overdue": agg["total_vencido"],
            "total_paid": agg["total_pago"],
        }

    def distinct_consultants_for_period(self, client_id, period: str) -> list[ConsultantEntity]:
        """
        Boletos da competência: `reference_month` igual ao período ou,
        quando o SGA não informou o mês, vencimento dentro do mês.
        """
        first_day, last_day = period_bounds(period)
        in_period = Q(boletos__reference_month=period) | (
            Q(boletos__reference_month="")
            & Q(boletos__due_date__gte=first_day)
            & Q(boletos__due_date__lte=last_day)
        )
        qs = (
            ConsultantModel.objects.filter(Q(boletos__client_id=client_id) & in_period, client_id=client_id)
            .distinct()
            .order_by("name")
        )
        return [ConsultantEntity.from_model(m) for m in qs]
